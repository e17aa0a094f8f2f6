import asyncio
from types import SimpleNamespace

import httpx
import openai
import pytest

from mjtranslate.core.config import Settings
from mjtranslate.core.errors import (
    InvalidCredentials,
    NotConfigured,
    ProviderTimeout,
    ProviderUnavailable,
    RateLimited,
    UnsupportedProvider,
)
from mjtranslate.core.providers import (
    DeepSeekClient,
    GeminiClient,
    Provider,
    build_providers,
)

URL = "https://api.deepseek.com/v1/chat/completions"


def _request() -> httpx.Request:
    return httpx.Request("POST", URL)


def _status_error(cls, status: int):
    return cls("boom", response=httpx.Response(status, request=_request()), body=None)


class _FakeCompletions:
    def __init__(self, outcome):
        self.outcome = outcome
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.outcome, Exception):
            raise self.outcome
        message = SimpleNamespace(content=self.outcome)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _deepseek(outcome):
    completions = _FakeCompletions(outcome)
    sdk = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return DeepSeekClient(api_key="sk-test", base_url="unused", client=sdk), completions


class _FakeModels:
    def __init__(self, outcome):
        self.outcome = outcome
        self.kwargs = None

    async def generate_content(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return SimpleNamespace(text=self.outcome)


def _gemini(outcome):
    models = _FakeModels(outcome)
    sdk = SimpleNamespace(aio=SimpleNamespace(models=models))
    return GeminiClient(api_key="g-test", client=sdk), models


def test_provider_parse():
    assert Provider.parse("DeepSeek") is Provider.DEEPSEEK
    assert Provider.parse(Provider.GEMINI) is Provider.GEMINI
    assert Provider.DEEPSEEK.alternate is Provider.GEMINI
    assert Provider.GEMINI.alternate is Provider.DEEPSEEK
    with pytest.raises(UnsupportedProvider):
        Provider.parse("qwen")


def test_deepseek_request_shape():
    client, completions = _deepseek("  美丽的日落 \n")
    text = asyncio.run(client.complete("SYS", "USER", max_tokens=1500))
    assert text == "美丽的日落"
    assert completions.kwargs["model"] == "deepseek-chat"
    assert completions.kwargs["temperature"] == 0.3
    assert completions.kwargs["max_tokens"] == 1500
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "SYS"},
        {"role": "user", "content": "USER"},
    ]


@pytest.mark.parametrize(
    "error, expected",
    [
        (_status_error(openai.AuthenticationError, 401), InvalidCredentials),
        (_status_error(openai.RateLimitError, 429), RateLimited),
        (openai.APITimeoutError(request=_request()), ProviderTimeout),
        (_status_error(openai.InternalServerError, 500), ProviderUnavailable),
        (openai.APIConnectionError(request=_request()), ProviderUnavailable),
    ],
)
def test_deepseek_error_mapping(error, expected):
    client, _ = _deepseek(error)
    with pytest.raises(expected) as excinfo:
        asyncio.run(client.complete("SYS", "USER"))
    assert excinfo.value.provider == "deepseek"


def test_deepseek_empty_content_is_unavailable():
    client, _ = _deepseek("   ")
    with pytest.raises(ProviderUnavailable):
        asyncio.run(client.complete("SYS", "USER"))


def test_deepseek_without_key_fails_fast():
    client = DeepSeekClient(api_key=None, base_url="https://api.deepseek.com/v1")
    assert not client.is_configured
    with pytest.raises(NotConfigured) as excinfo:
        asyncio.run(client.complete("SYS", "USER"))
    assert "DeepSeek" in excinfo.value.message
    assert excinfo.value.kind == "configuration"


def test_gemini_concatenates_prompt():
    client, models = _gemini(" 日落 ")
    assert asyncio.run(client.complete("SYS", "USER")) == "日落"
    assert models.kwargs["model"] == "gemini-1.5-flash"
    assert models.kwargs["contents"] == "SYS\n\nUSER"


@pytest.mark.parametrize("outcome", [RuntimeError("quota"), ValueError("blocked"), None, ""])
def test_gemini_failures_collapse_to_unavailable(outcome):
    client, _ = _gemini(outcome)
    with pytest.raises(ProviderUnavailable) as excinfo:
        asyncio.run(client.complete("SYS", "USER"))
    assert excinfo.value.provider == "gemini"


def test_gemini_without_key_fails_fast():
    client = GeminiClient(api_key=None)
    with pytest.raises(NotConfigured):
        asyncio.run(client.complete("SYS", "USER"))


def test_build_providers_from_settings():
    providers = build_providers(Settings(deepseek_api_key="sk-test"))
    assert set(providers) == {Provider.DEEPSEEK, Provider.GEMINI}
    assert providers[Provider.DEEPSEEK].is_configured
    assert not providers[Provider.GEMINI].is_configured


def test_deepseek_sdk_client_has_timeout_and_no_retries(monkeypatch):
    created = []

    def fake_async_openai(**kwargs):
        created.append(kwargs)
        return SimpleNamespace()

    monkeypatch.setattr("mjtranslate.core.providers.AsyncOpenAI", fake_async_openai)
    build_providers(Settings(deepseek_api_key="sk-test", deepseek_api_url=URL))

    assert created == [
        {
            "api_key": "sk-test",
            "base_url": "https://api.deepseek.com/v1",
            "timeout": 30.0,
            "max_retries": 0,
        }
    ]


def test_deepseek_sdk_client_not_built_without_key(monkeypatch):
    created = []
    monkeypatch.setattr(
        "mjtranslate.core.providers.AsyncOpenAI", lambda **kwargs: created.append(kwargs)
    )
    DeepSeekClient(api_key=None, base_url="https://api.deepseek.com/v1")
    assert created == []
