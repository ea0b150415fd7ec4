from app.core.config import CompletionConfig
from app.domain.ai.providers.openai import OpenAICompatibleProvider
from app.domain.ai.retry import RetryPolicy, linear_backoff
from app.domain.ai.service import CompletionClient


def build_completion_client(config: CompletionConfig) -> CompletionClient:
    provider = OpenAICompatibleProvider(
        api_key=config.api_key,
        model=config.model,
        api_url=config.api_url,
        timeout_sec=config.timeout_sec,
    )
    return CompletionClient(
        provider=provider,
        retry_policy=RetryPolicy(
            max_attempts=config.max_attempts,
            backoff=linear_backoff(config.backoff_sec),
        ),
    )
