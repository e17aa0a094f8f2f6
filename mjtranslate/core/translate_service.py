"""翻译编排：选择提供商、构造提示词、调用模型、解析结果，失败时切换一次备用提供商。"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from mjtranslate.core.errors import (
    BatchTooLarge,
    EmptyInput,
    NotConfigured,
    TranslationError,
)
from mjtranslate.core.parser import parse_response
from mjtranslate.core.prompts import build_prompt
from mjtranslate.core.providers import CompletionClient, Provider
from mjtranslate.models.translation import (
    BatchItemResult,
    TranslateMode,
    TranslationRequest,
    TranslationResult,
)

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 10
BATCH_DELAY_SECONDS = 1.0

MAX_TOKENS = {
    TranslateMode.PLAIN: 1000,
    TranslateMode.INTERACTIVE: 1500,
    TranslateMode.PHRASE_ANALYSIS: 1000,
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class TranslateService:

    def __init__(
        self,
        providers: Dict[Provider, CompletionClient],
        default_provider: Union[Provider, str] = Provider.DEEPSEEK,
        batch_delay: float = BATCH_DELAY_SECONDS,
        sleep=asyncio.sleep,
    ):
        self._providers = dict(providers)
        self.default_provider = Provider.parse(default_provider)
        self._batch_delay = batch_delay
        self._sleep = sleep

    def configured_providers(self) -> List[Provider]:
        return [p for p in Provider if p in self._providers and self._providers[p].is_configured]

    def _alternate(self, provider: Provider) -> Optional[Provider]:
        alternate = provider.alternate
        client = self._providers.get(alternate)
        if client is not None and client.is_configured:
            return alternate
        return None

    async def translate(
        self, request: TranslationRequest, provider: Union[Provider, str, None] = None
    ) -> TranslationResult:
        if not request.sourceText or not request.sourceText.strip():
            raise EmptyInput()
        if request.mode == TranslateMode.PHRASE_ANALYSIS and not (
            request.translatedText and request.translatedText.strip()
        ):
            raise EmptyInput("译文不能为空")

        selected = Provider.parse(provider) if provider else self.default_provider
        logger.info("使用翻译提供商: %s (mode=%s)", selected.value, request.mode.value)

        try:
            return await self._run(selected, request)
        except Exception as e:
            # 任何失败都切换一次备用提供商，备用也失败时抛出备用的错误
            logger.warning("%s 翻译失败: %s", selected.value, getattr(e, "message", e))
            alternate = self._alternate(selected)
            if alternate is None:
                raise
            logger.info("尝试使用 %s 作为备用...", alternate.value)
            return await self._run(alternate, request)

    async def _run(self, provider: Provider, request: TranslationRequest) -> TranslationResult:
        client = self._providers.get(provider)
        if client is None:
            raise NotConfigured(provider)

        prompt = build_prompt(request)
        raw_text = await client.complete(
            prompt.system, prompt.user, max_tokens=MAX_TOKENS[request.mode]
        )
        parsed = parse_response(
            request.mode, raw_text, original=request.sourceText, translated=request.translatedText
        )
        return TranslationResult(
            original=request.sourceText,
            translated=parsed.translated,
            language=request.targetLanguage,
            provider=provider.value,
            timestamp=_now(),
            keyPhrases=parsed.key_phrases,
        )

    async def translate_prompt(self, text: str, target_language: str = "zh-CN", provider=None) -> TranslationResult:
        return await self.translate(
            TranslationRequest(sourceText=text, targetLanguage=target_language), provider
        )

    async def translate_with_phrases(self, text: str, target_language: str = "zh-CN", provider=None) -> TranslationResult:
        return await self.translate(
            TranslationRequest(
                sourceText=text, targetLanguage=target_language, mode=TranslateMode.INTERACTIVE
            ),
            provider,
        )

    async def analyze_phrases(
        self, original: str, translated: str, target_language: str = "zh-CN", provider=None
    ) -> TranslationResult:
        return await self.translate(
            TranslationRequest(
                sourceText=original,
                translatedText=translated,
                targetLanguage=target_language,
                mode=TranslateMode.PHRASE_ANALYSIS,
            ),
            provider,
        )

    async def translate_batch(self, texts: List[str], target_language: str = "zh-CN") -> List[BatchItemResult]:
        """逐条顺序翻译，每条之前固定等待，单条失败只记录在该条结果里。"""
        if len(texts) > MAX_BATCH_SIZE:
            raise BatchTooLarge()

        results = []
        for text in texts:
            await self._sleep(self._batch_delay)
            try:
                result = await self.translate_prompt(text, target_language)
            except TranslationError as e:
                logger.warning("批量翻译单条失败: %s", e.message)
                results.append(self._failed_item(text, target_language, e.message))
            except Exception:
                logger.exception("批量翻译单条出现未知错误")
                results.append(
                    self._failed_item(text, target_language, TranslationError.default_message)
                )
            else:
                results.append(
                    BatchItemResult(
                        original=result.original,
                        translated=result.translated,
                        language=result.language,
                        provider=result.provider,
                        timestamp=result.timestamp,
                    )
                )
        return results

    @staticmethod
    def _failed_item(text: str, target_language: str, error: str) -> BatchItemResult:
        return BatchItemResult(
            original=text, language=target_language, timestamp=_now(), error=error
        )
