class ConfigError(ValueError):
    """Raised before any network call when the completion endpoint is not configured."""


class UpstreamError(RuntimeError):
    kind = "upstream_error"


class UpstreamTransportError(UpstreamError):
    kind = "upstream_transport"


class UpstreamStatusError(UpstreamError):
    kind = "upstream_status"

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"completion_status_{status_code}:{body[:200]}")


class UpstreamEmptyResponse(UpstreamError):
    kind = "upstream_empty"


class UpstreamMalformedResponse(UpstreamError):
    kind = "upstream_malformed"


class UpstreamExhausted(UpstreamError):
    kind = "upstream_exhausted"

    def __init__(self, attempts: int, last_error: BaseException | None) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"completion_failed_after_{attempts}_attempts:{last_error}")


RETRYABLE_UPSTREAM_ERRORS = (
    UpstreamTransportError,
    UpstreamStatusError,
    UpstreamEmptyResponse,
    UpstreamMalformedResponse,
)
