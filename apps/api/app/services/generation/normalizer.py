"""Best-effort recovery of a JSON document from free-form completion text.

LLM output routinely wraps JSON in prose or markdown fences, truncates it, or
uses Python-ish quoting. ``extract_json_candidate`` walks a fixed chain of
strategies and returns the first candidate that parses; it never raises and
returns ``""`` when nothing usable is found.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any


logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json|JSON)?\s*([\s\S]+?)```")
# Matches an object nested up to three levels deep.
_BALANCED_OBJECT = re.compile(r"\{(?:[^{}]|\{(?:[^{}]|\{[^{}]*\})*\})*\}")
_SINGLE_QUOTED = re.compile(r"(?<!\w)'([^'\n]*)'(?!\w)")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_BARE_KEY = re.compile(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)\s*:")
_LIST_MARKER = re.compile(r"^(?:[-*•]\s+|\d{1,2}[.)]\s+)")


def is_valid_json(text: str) -> bool:
    if not text or not text.strip():
        return False
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        return False
    return True


def _first_fenced_block(text: str) -> str:
    match = _FENCED_BLOCK.search(text)
    if not match:
        return ""
    return match.group(1).strip()


def _balanced_prefix_object(text: str) -> str:
    if not text.startswith("{"):
        return ""

    depth = 0
    in_string = False
    escape = False
    for idx, ch in enumerate(text):
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[: idx + 1]
    return ""


def _balanced_regex_object(text: str) -> str:
    match = _BALANCED_OBJECT.search(text)
    return match.group(0) if match else ""


def _naive_slice(text: str) -> str:
    object_start = text.find("{")
    array_start = text.find("[")

    openers = [pos for pos in (object_start, array_start) if pos != -1]
    if not openers:
        return ""
    start = min(openers)
    closer = "}" if start == object_start else "]"
    end = text.rfind(closer)
    if end <= start:
        return ""
    return text[start : end + 1]


def repair_json(candidate: str) -> str:
    """Fix the usual LLM slips: single quotes, trailing commas, bare keys."""
    repaired = _SINGLE_QUOTED.sub(r'"\1"', candidate)
    repaired = _TRAILING_COMMA.sub(r"\1", repaired)
    repaired = _BARE_KEY.sub(r'\1"\2":', repaired)
    return repaired


def extract_json_candidate(text: str) -> str:
    raw = str(text or "")
    if is_valid_json(raw):
        return raw

    stripped = raw.strip()

    fenced = _first_fenced_block(stripped) if "```" in stripped else ""
    if fenced and is_valid_json(fenced):
        return fenced

    prefix_object = _balanced_prefix_object(stripped)
    if prefix_object and is_valid_json(prefix_object):
        return prefix_object

    regex_object = _balanced_regex_object(stripped)
    if regex_object and is_valid_json(regex_object):
        return regex_object

    sliced = _naive_slice(stripped)
    if sliced:
        if is_valid_json(sliced):
            return sliced
        repaired = repair_json(sliced)
        if is_valid_json(repaired):
            logger.info("completion JSON recovered after repair")
            return repaired

    logger.warning("no valid JSON found in completion (%d chars)", len(raw))
    return ""


def parse_json_payload(text: str) -> Any | None:
    candidate = extract_json_candidate(text)
    if not candidate:
        return None
    return json.loads(candidate)


def parse_roadmap_steps(text: str) -> list[str]:
    steps: list[str] = []
    for line in str(text or "").splitlines():
        step = line.strip().replace("**", "").strip()
        step = _LIST_MARKER.sub("", step).strip()
        if step:
            steps.append(step)
    return steps
