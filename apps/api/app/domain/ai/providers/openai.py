import json
import logging
from typing import Any
from urllib import error, request

from app.domain.ai.errors import (
    ConfigError,
    UpstreamEmptyResponse,
    UpstreamMalformedResponse,
    UpstreamStatusError,
    UpstreamTransportError,
)


logger = logging.getLogger(__name__)


class OpenAICompatibleProvider:
    """Single-attempt client for an OpenAI-style chat completions endpoint."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        api_url: str,
        timeout_sec: float = 60,
    ) -> None:
        if not api_key:
            raise ConfigError("completion_api_key_missing")
        if not api_url:
            raise ConfigError("completion_api_url_missing")

        self.api_key = api_key
        self.model = model
        self.api_url = api_url
        self.timeout_sec = timeout_sec

    def complete(self, prompt: str) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "user", "content": prompt},
            ],
        }

        req = request.Request(
            self.api_url,
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            method="POST",
        )

        logger.debug("POST %s model=%s", self.api_url, self.model)
        try:
            with request.urlopen(req, timeout=self.timeout_sec) as response:
                body = response.read().decode("utf-8")
        except error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace") if exc.fp else ""
            raise UpstreamStatusError(exc.code, detail) from exc
        except (error.URLError, OSError) as exc:  # includes socket timeouts
            raise UpstreamTransportError(f"completion_request_failed:{exc}") from exc

        try:
            decoded = json.loads(body)
        except ValueError as exc:
            raise UpstreamMalformedResponse(f"completion_envelope_invalid:{exc}") from exc
        return self._extract_text(decoded)

    @staticmethod
    def _extract_text(response_json: Any) -> str:
        if not isinstance(response_json, dict):
            raise UpstreamMalformedResponse("completion_envelope_not_object")

        choices = response_json.get("choices")
        if not isinstance(choices, list) or not choices:
            raise UpstreamEmptyResponse("completion_choices_missing")

        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None

        if isinstance(content, str) and content.strip():
            return content

        if isinstance(content, list):
            texts: list[str] = []
            for part in content:
                if isinstance(part, dict):
                    text = part.get("text")
                    if isinstance(text, str) and text.strip():
                        texts.append(text)
            if texts:
                return "\n".join(texts)

        raise UpstreamEmptyResponse("completion_content_missing")
