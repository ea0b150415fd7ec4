from functools import lru_cache

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CompletionConfig(BaseModel):
    """Immutable view of the settings the completion client needs."""

    model_config = ConfigDict(frozen=True)

    api_url: str
    model: str
    api_key: str
    timeout_sec: float = 60
    max_attempts: int = 3
    backoff_sec: float = 2


class Settings(BaseSettings):
    env: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    cors_origins: list[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    # Env var names follow the deployment: API_URL / MODEL / OPENROUTER_API_KEY.
    completion_api_url: str = Field(
        default="https://openrouter.ai/api/v1/chat/completions",
        validation_alias=AliasChoices("API_URL", "COMPLETION_API_URL"),
    )
    completion_model: str = Field(
        default="openai/gpt-4o-mini",
        validation_alias=AliasChoices("MODEL", "COMPLETION_MODEL"),
    )
    completion_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("OPENROUTER_API_KEY", "API_KEY"),
    )
    completion_timeout_sec: float = 60
    completion_max_attempts: int = 3
    completion_backoff_sec: float = 2

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def completion_config(self) -> CompletionConfig:
        return CompletionConfig(
            api_url=self.completion_api_url,
            model=self.completion_model,
            api_key=self.completion_api_key,
            timeout_sec=self.completion_timeout_sec,
            max_attempts=self.completion_max_attempts,
            backoff_sec=self.completion_backoff_sec,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
