"""把模型返回的原始文本解析为统一结构。

交互式/词组分析模式下模型应返回 JSON，但模型经常输出不合法的内容。
解析失败时不抛异常，而是返回降级结果：保留可用的译文，keyPhrases 为空。
"""

import json
import logging
import re
from typing import Any, List, NamedTuple

from pydantic import ValidationError

from mjtranslate.core.errors import MalformedUpstreamResponse
from mjtranslate.models.translation import KeyPhrase, TranslateMode

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)


class ParsedResponse(NamedTuple):
    translated: str
    key_phrases: List[KeyPhrase]
    degraded: bool = False


def strip_code_fence(text: str) -> str:
    text = text.strip()
    m = _CODE_FENCE.match(text)
    return m.group(1).strip() if m else text


def _to_key_phrase(index: int, item: Any) -> KeyPhrase:
    if not isinstance(item, dict):
        raise MalformedUpstreamResponse(f"词组不是对象: {item!r}")
    try:
        return KeyPhrase(
            id=index + 1,
            sourceText=item["en"],
            targetText=item["zh"],
            sourceStart=item["enStart"],
            sourceEnd=item["enEnd"],
            targetStart=item["zhStart"],
            targetEnd=item["zhEnd"],
        )
    except (KeyError, ValidationError) as e:
        raise MalformedUpstreamResponse(f"词组字段不完整: {item!r}") from e


def _key_phrases(items: list) -> List[KeyPhrase]:
    phrases = []
    for index, item in enumerate(items):
        # id 按模型返回列表中的位置编号，个别词组不合法时跳过但不重排
        try:
            phrases.append(_to_key_phrase(index, item))
        except MalformedUpstreamResponse as e:
            logger.warning("跳过无法解析的词组: %s", e)
    return phrases


def decode_json_payload(raw_text: str, require_translated: bool) -> dict:
    try:
        payload = json.loads(strip_code_fence(raw_text))
    except json.JSONDecodeError as e:
        raise MalformedUpstreamResponse(f"JSON解析失败: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedUpstreamResponse("响应不是JSON对象")
    if require_translated:
        translated = payload.get("translated")
        if not isinstance(translated, str) or not translated.strip():
            raise MalformedUpstreamResponse("响应缺少 translated 字段")
    if not isinstance(payload.get("keyPhrases"), list):
        raise MalformedUpstreamResponse("响应缺少 keyPhrases 字段")
    return payload


def _log_misaligned(phrases: List[KeyPhrase], original: str, translated: str) -> None:
    for phrase in phrases:
        if not phrase.is_aligned(original, translated):
            logger.debug(
                "词组位置与文本不一致 id=%s en=%r zh=%r", phrase.id, phrase.sourceText, phrase.targetText
            )


def parse_plain(raw_text: str) -> ParsedResponse:
    return ParsedResponse(raw_text.strip(), [])


def parse_interactive(raw_text: str, original: str = "") -> ParsedResponse:
    try:
        payload = decode_json_payload(raw_text, require_translated=True)
    except MalformedUpstreamResponse as e:
        logger.warning("解析交互式翻译响应失败: %s; 原始响应: %s", e, raw_text[:200])
        return ParsedResponse(raw_text.strip(), [], degraded=True)

    translated = payload["translated"].strip()
    phrases = _key_phrases(payload["keyPhrases"])
    _log_misaligned(phrases, original, translated)
    return ParsedResponse(translated, phrases)


def parse_phrase_analysis(raw_text: str, original: str, translated: str) -> ParsedResponse:
    try:
        payload = decode_json_payload(raw_text, require_translated=False)
    except MalformedUpstreamResponse as e:
        logger.warning("解析词组分析响应失败: %s; 原始响应: %s", e, raw_text[:200])
        return ParsedResponse(translated, [], degraded=True)

    phrases = _key_phrases(payload["keyPhrases"])
    _log_misaligned(phrases, original, translated)
    return ParsedResponse(translated, phrases)


def parse_response(
    mode: TranslateMode, raw_text: str, original: str = "", translated: str | None = None
) -> ParsedResponse:
    if mode == TranslateMode.INTERACTIVE:
        return parse_interactive(raw_text, original)
    if mode == TranslateMode.PHRASE_ANALYSIS:
        return parse_phrase_analysis(raw_text, original, translated or "")
    return parse_plain(raw_text)
