from typing import Protocol


class CompletionProvider(Protocol):
    """One upstream call per invocation; retries are the caller's concern."""

    def complete(self, prompt: str) -> str:
        ...
