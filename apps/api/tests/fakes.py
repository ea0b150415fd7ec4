from datetime import datetime, timezone
from typing import Callable

from app.domain.ai.errors import UpstreamExhausted
from app.domain.content.models import RawCompletion


def exhausted(last_error: Exception, attempts: int = 3) -> UpstreamExhausted:
    return UpstreamExhausted(attempts, last_error)


class FakeCompletionClient:
    """Stands in for CompletionClient; answers every prompt without touching the network."""

    def __init__(
        self,
        *,
        text: str = "",
        error: Exception | None = None,
        responder: Callable[[str], str] | None = None,
    ):
        self.text = text
        self.error = error
        self.responder = responder
        self.calls = 0
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> RawCompletion:
        self.calls += 1
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        text = self.responder(prompt) if self.responder else self.text
        return RawCompletion(text=text, received_at=datetime.now(timezone.utc))
