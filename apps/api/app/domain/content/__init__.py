"""Typed content shapes produced by the generation pipeline."""
