import logging
from enum import Enum
from typing import Dict, Optional, Protocol

import openai
from google import genai
from openai import AsyncOpenAI

from mjtranslate.core.config import Settings
from mjtranslate.core.errors import (
    InvalidCredentials,
    NotConfigured,
    ProviderTimeout,
    ProviderUnavailable,
    RateLimited,
    UnsupportedProvider,
)

logger = logging.getLogger(__name__)

DEEPSEEK_TEMPERATURE = 0.3
DEEPSEEK_TIMEOUT = 30.0
DEFAULT_MAX_TOKENS = 1000


class Provider(str, Enum):
    DEEPSEEK = "deepseek"
    GEMINI = "gemini"

    @classmethod
    def parse(cls, value) -> "Provider":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedProvider(str(value)) from None

    @property
    def alternate(self) -> "Provider":
        return Provider.GEMINI if self is Provider.DEEPSEEK else Provider.DEEPSEEK


class CompletionClient(Protocol):
    provider: Provider

    @property
    def is_configured(self) -> bool: ...

    async def complete(self, system: str, user: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> str: ...


class DeepSeekClient:
    """DeepSeek chat completions，走 OpenAI 兼容接口。"""

    provider = Provider.DEEPSEEK

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        model: str = "deepseek-chat",
        timeout: float = DEEPSEEK_TIMEOUT,
        client=None,
    ):
        self._api_key = api_key
        self._model = model
        self._client = client
        if self._client is None and api_key:
            # 不让 SDK 自己重试，失败后由上层切换到备用提供商
            self._client = AsyncOpenAI(
                api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0
            )

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def complete(self, system: str, user: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
        if not self.is_configured:
            raise NotConfigured(self.provider)

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=DEEPSEEK_TEMPERATURE,
                max_tokens=max_tokens,
            )
        except openai.AuthenticationError as e:
            logger.error("DeepSeek API调用失败: %s", e)
            raise InvalidCredentials(self.provider) from e
        except openai.RateLimitError as e:
            logger.error("DeepSeek API调用失败: %s", e)
            raise RateLimited(self.provider) from e
        except openai.APITimeoutError as e:
            logger.error("DeepSeek API调用超时: %s", e)
            raise ProviderTimeout(self.provider) from e
        except openai.OpenAIError as e:
            logger.error("DeepSeek API调用失败: %s", e)
            raise ProviderUnavailable(self.provider) from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            logger.error("DeepSeek 返回了空内容")
            raise ProviderUnavailable(self.provider)
        return content.strip()


class GeminiClient:
    """Gemini generate_content。没有单独的 system 通道，两段提示词拼接后发送。"""

    provider = Provider.GEMINI

    def __init__(self, api_key: Optional[str], model: str = "gemini-1.5-flash", client=None):
        self._api_key = api_key
        self._model = model
        self._client = client
        if self._client is None and api_key:
            self._client = genai.Client(api_key=api_key)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def complete(self, system: str, user: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
        if not self.is_configured:
            raise NotConfigured(self.provider)

        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=f"{system}\n\n{user}",
            )
            text = response.text
        except Exception as e:
            # Gemini 的所有失败统一视为服务不可用
            logger.error("Gemini API调用失败: %s", e)
            raise ProviderUnavailable(self.provider) from e

        if not text or not text.strip():
            logger.error("Gemini 返回了空内容")
            raise ProviderUnavailable(self.provider)
        return text.strip()


def build_providers(settings: Settings) -> Dict[Provider, CompletionClient]:
    return {
        Provider.DEEPSEEK: DeepSeekClient(
            api_key=settings.deepseek_api_key,
            base_url=settings.deepseek_base_url,
            model=settings.deepseek_model,
        ),
        Provider.GEMINI: GeminiClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
        ),
    }
