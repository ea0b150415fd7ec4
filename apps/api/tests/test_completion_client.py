import io
import json
import unittest
from unittest.mock import MagicMock, patch
from urllib import error

from app.core.config import CompletionConfig
from app.domain.ai import CompletionClient, build_completion_client
from app.domain.ai.errors import (
    ConfigError,
    UpstreamEmptyResponse,
    UpstreamExhausted,
    UpstreamMalformedResponse,
    UpstreamStatusError,
    UpstreamTransportError,
)
from app.domain.ai.providers import OpenAICompatibleProvider
from app.domain.ai.retry import RetryPolicy, linear_backoff


class _RecordingSleep:
    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class _FlakyProvider:
    def __init__(self, failures: list[Exception], text: str = '{"ok": true}'):
        self.failures = list(failures)
        self.text = text
        self.calls = 0

    def complete(self, prompt: str) -> str:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.text


def _response(body: bytes) -> MagicMock:
    cm = MagicMock()
    cm.__enter__.return_value.read.return_value = body
    return cm


class RetryPolicyTests(unittest.TestCase):
    def test_three_attempts_with_six_seconds_of_backoff(self) -> None:
        sleep = _RecordingSleep()
        policy = RetryPolicy(max_attempts=3, backoff=linear_backoff(2), sleep=sleep)
        attempts: list[int] = []

        def _call(attempt: int) -> str:
            attempts.append(attempt)
            raise UpstreamTransportError("connection reset")

        with self.assertRaises(UpstreamExhausted) as ctx:
            policy.run(_call)

        self.assertEqual(attempts, [1, 2, 3])
        self.assertEqual(sleep.calls, [2, 4])
        self.assertEqual(sum(sleep.calls), 6)
        self.assertEqual(ctx.exception.attempts, 3)
        self.assertIsInstance(ctx.exception.last_error, UpstreamTransportError)

    def test_success_stops_retrying(self) -> None:
        sleep = _RecordingSleep()
        policy = RetryPolicy(sleep=sleep)
        results = iter([UpstreamEmptyResponse("empty"), "done"])

        def _call(_attempt: int) -> str:
            value = next(results)
            if isinstance(value, Exception):
                raise value
            return value

        self.assertEqual(policy.run(_call), "done")
        self.assertEqual(sleep.calls, [2])

    def test_non_retryable_errors_propagate(self) -> None:
        sleep = _RecordingSleep()
        policy = RetryPolicy(sleep=sleep)

        def _call(_attempt: int) -> str:
            raise KeyError("bug")

        with self.assertRaises(KeyError):
            policy.run(_call)
        self.assertEqual(sleep.calls, [])

    def test_linear_backoff(self) -> None:
        delay = linear_backoff(2)
        self.assertEqual([delay(n) for n in (1, 2, 3)], [0, 2, 4])


class CompletionClientTests(unittest.TestCase):
    def test_returns_raw_completion_after_retry(self) -> None:
        provider = _FlakyProvider([UpstreamStatusError(503, "busy")], text="Step One\nStep Two")
        client = CompletionClient(provider=provider, retry_policy=RetryPolicy(sleep=_RecordingSleep()))

        raw = client.complete("roadmap please")

        self.assertEqual(raw.text, "Step One\nStep Two")
        self.assertIsNotNone(raw.received_at.tzinfo)
        self.assertEqual(provider.calls, 2)

    def test_exhausted_after_max_attempts(self) -> None:
        provider = _FlakyProvider([UpstreamEmptyResponse("a"), UpstreamEmptyResponse("b"), UpstreamEmptyResponse("c")])
        client = CompletionClient(provider=provider, retry_policy=RetryPolicy(sleep=_RecordingSleep()))

        with self.assertRaises(UpstreamExhausted):
            client.complete("prompt")
        self.assertEqual(provider.calls, 3)

    def test_factory_requires_api_key(self) -> None:
        config = CompletionConfig(api_url="https://example.test/v1/chat/completions", model="m", api_key="")
        with self.assertRaises(ConfigError):
            build_completion_client(config)

    def test_factory_applies_config(self) -> None:
        config = CompletionConfig(
            api_url="https://example.test/v1/chat/completions",
            model="m",
            api_key="k",
            max_attempts=5,
            backoff_sec=1,
        )
        client = build_completion_client(config)
        self.assertEqual(client.retry_policy.max_attempts, 5)
        self.assertEqual(client.retry_policy.backoff(3), 2)
        self.assertEqual(client.provider.model, "m")

    def test_config_is_immutable(self) -> None:
        config = CompletionConfig(api_url="u", model="m", api_key="k")
        with self.assertRaises(Exception):
            config.api_key = "other"


class OpenAICompatibleProviderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.provider = OpenAICompatibleProvider(
            api_key="secret",
            model="openai/gpt-4o-mini",
            api_url="https://example.test/v1/chat/completions",
        )

    @patch("app.domain.ai.providers.openai.request.urlopen")
    def test_sends_single_user_message(self, urlopen: MagicMock) -> None:
        envelope = {"choices": [{"message": {"role": "assistant", "content": "hello"}}]}
        urlopen.return_value = _response(json.dumps(envelope).encode("utf-8"))

        self.assertEqual(self.provider.complete("hi"), "hello")

        req = urlopen.call_args.args[0]
        body = json.loads(req.data.decode("utf-8"))
        self.assertEqual(body["model"], "openai/gpt-4o-mini")
        self.assertEqual(body["messages"], [{"role": "user", "content": "hi"}])
        self.assertEqual(req.get_header("Authorization"), "Bearer secret")
        self.assertEqual(urlopen.call_args.kwargs["timeout"], 60)

    @patch("app.domain.ai.providers.openai.request.urlopen")
    def test_content_parts_are_joined(self, urlopen: MagicMock) -> None:
        envelope = {"choices": [{"message": {"content": [{"type": "text", "text": "a"}, {"text": "b"}]}}]}
        urlopen.return_value = _response(json.dumps(envelope).encode("utf-8"))
        self.assertEqual(self.provider.complete("hi"), "a\nb")

    @patch("app.domain.ai.providers.openai.request.urlopen")
    def test_non_2xx_maps_to_status_error(self, urlopen: MagicMock) -> None:
        urlopen.side_effect = error.HTTPError(
            "https://example.test", 429, "Too Many Requests", hdrs=None, fp=io.BytesIO(b"slow down")
        )
        with self.assertRaises(UpstreamStatusError) as ctx:
            self.provider.complete("hi")
        self.assertEqual(ctx.exception.status_code, 429)
        self.assertEqual(ctx.exception.body, "slow down")

    @patch("app.domain.ai.providers.openai.request.urlopen")
    def test_transport_failure(self, urlopen: MagicMock) -> None:
        urlopen.side_effect = error.URLError("timed out")
        with self.assertRaises(UpstreamTransportError):
            self.provider.complete("hi")

    @patch("app.domain.ai.providers.openai.request.urlopen")
    def test_empty_choices(self, urlopen: MagicMock) -> None:
        for envelope in ({"choices": []}, {"choices": [{"message": {"content": "   "}}]}, {}):
            with self.subTest(envelope=envelope):
                urlopen.return_value = _response(json.dumps(envelope).encode("utf-8"))
                with self.assertRaises(UpstreamEmptyResponse):
                    self.provider.complete("hi")

    @patch("app.domain.ai.providers.openai.request.urlopen")
    def test_malformed_envelope(self, urlopen: MagicMock) -> None:
        for body in (b"<html>bad gateway</html>", b"[1, 2]"):
            with self.subTest(body=body):
                urlopen.return_value = _response(body)
                with self.assertRaises(UpstreamMalformedResponse):
                    self.provider.complete("hi")


if __name__ == "__main__":
    unittest.main()
