from typing import Any

from fastapi import HTTPException


KNOWN_ERROR_CODES = {
    "invalid_request",
    "config_error",
    "upstream_error",
    "empty_output",
    "unknown",
}

RETRYABLE_ERROR_CODES = {
    "upstream_error",
    "empty_output",
}


def normalize_error_code(value: Any) -> str:
    raw = str(value or "").strip().lower()
    if raw in KNOWN_ERROR_CODES:
        return raw
    return "unknown"


def _build_message(code: str, reason: str) -> str:
    message = " ".join(str(reason or "").split()).strip()
    if message:
        return message[:260]
    defaults = {
        "invalid_request": "Request body is invalid",
        "config_error": "Completion service configuration error",
        "upstream_error": "Completion provider request failed",
        "empty_output": "Completion provider returned empty content",
        "unknown": "Request failed",
    }
    return defaults.get(code, "Request failed")


def build_structured_error_detail(
    *,
    error_code: str,
    message: str | None = None,
    retryable: bool | None = None,
    detail: Any = None,
) -> dict[str, Any]:
    code = normalize_error_code(error_code)
    message_text = " ".join(str(message or "").split()).strip()
    if not message_text:
        message_text = _build_message(code, str(detail or ""))
    if retryable is None:
        retryable = code in RETRYABLE_ERROR_CODES

    detail_text = " ".join(str(detail or "").split()).strip() or message_text

    return {
        "error_code": code,
        "message": message_text[:260],
        "retryable": bool(retryable),
        "detail": detail_text,
    }


def format_failure_detail(pipeline: str, kind: str, reason: str) -> str:
    reason_text = " ".join(str(reason or "").split())[:260]
    return f"{pipeline}_failed:{kind}:{reason_text}"


def parse_plain_detail(detail: Any) -> tuple[str, str, str]:
    """Plain-string details carry no error code and map to ``unknown``."""
    text = " ".join(str(detail or "").split()).strip()
    return "unknown", _build_message("unknown", text), text


def _payload_from_detail_dict(detail: dict[str, Any]) -> tuple[str, str, bool, str]:
    code = normalize_error_code(detail.get("error_code"))
    message = " ".join(str(detail.get("message") or "").split()).strip()
    if not message:
        message = _build_message(code, detail.get("detail") or "")
    retryable = bool(detail.get("retryable")) if "retryable" in detail else code in RETRYABLE_ERROR_CODES
    detail_text = str(detail.get("detail") or "").strip() or message
    return code, message[:260], retryable, detail_text


def build_http_error_payload(exc: HTTPException, trace_id: str) -> dict[str, Any]:
    detail = exc.detail

    if isinstance(detail, dict):
        code, message, retryable, detail_text = _payload_from_detail_dict(detail)
    else:
        code, message, detail_text = parse_plain_detail(detail)
        retryable = code in RETRYABLE_ERROR_CODES

    return {
        "error_code": code,
        "message": message,
        "retryable": retryable,
        "trace_id": trace_id,
        "detail": detail_text,
    }


def build_validation_error_payload(errors: list[dict[str, Any]], trace_id: str) -> dict[str, Any]:
    fields = []
    for err in errors:
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        fields.append(f"{location}: {err.get('msg', 'invalid')}" if location else str(err.get("msg", "invalid")))
    reason = "; ".join(fields) or "invalid_request_body"
    return {
        "error_code": "invalid_request",
        "message": reason[:260],
        "retryable": False,
        "trace_id": trace_id,
        "detail": f"request_validation_failed:invalid_request:{reason[:260]}",
    }


def build_unexpected_error_payload(trace_id: str) -> dict[str, Any]:
    return {
        "error_code": "unknown",
        "message": "Unexpected server error",
        "retryable": False,
        "trace_id": trace_id,
        "detail": "unexpected_server_error",
    }
