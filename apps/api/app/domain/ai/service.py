from datetime import datetime, timezone
import logging

from app.domain.ai.providers.base import CompletionProvider
from app.domain.ai.retry import RetryPolicy
from app.domain.content.models import RawCompletion


logger = logging.getLogger(__name__)


class CompletionClient:
    def __init__(
        self,
        *,
        provider: CompletionProvider,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.provider = provider
        self.retry_policy = retry_policy or RetryPolicy()

    def complete(self, prompt: str) -> RawCompletion:
        """Send the prompt, retrying per policy; raises UpstreamExhausted when out of attempts."""
        text = self.retry_policy.run(lambda _attempt: self.provider.complete(prompt))
        logger.info("completion received (%d chars)", len(text))
        return RawCompletion(text=text, received_at=datetime.now(timezone.utc))
