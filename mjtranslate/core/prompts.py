"""Midjourney 提示词翻译用的 system / user 提示词构造。纯字符串处理，无 I/O。"""

from typing import NamedTuple

from mjtranslate.models.translation import TranslateMode, TranslationRequest

DEFAULT_LANGUAGE = "zh-CN"
SUPPORTED_LANGUAGES = ("zh-CN", "en-US", "ja-JP", "ko-KR")

# 目标语言 -> (原文语言, 译文语言)
LANGUAGE_PAIRS = {
    "zh-CN": ("英文", "中文"),
    "en-US": ("中文", "英文"),
    "ja-JP": ("中文", "日文"),
    "ko-KR": ("中文", "韩文"),
}

SYSTEM_PROMPTS = {
    "zh-CN": """你是一名专业的Midjourney提示词翻译专家。请把英文提示词翻译成中文，要求：
1. 专业术语保持准确（如 photorealistic、cinematic、octane render、bokeh 等风格、镜头与渲染关键词）
2. 保持提示词原有的结构和词序
3. 中文表达简洁明了
4. 保留技术参数（如 --ar 16:9、--v 6）和风格描述
5. 只输出翻译结果，不要附加任何解释或说明""",
    "en-US": """You are an expert Midjourney prompt translator. Translate the Chinese prompt into English:
1. Keep professional terms accurate (style, camera and rendering keywords)
2. Keep the original structure and word order of the prompt
3. Use clear, concise English
4. Preserve technical parameters (e.g. --ar 16:9, --v 6) and style descriptions
5. Output the translation only, with no explanations or extra content""",
    "ja-JP": """あなたはMidjourneyプロンプトの専門翻訳者です。中国語のプロンプトを日本語に翻訳してください：
1. 専門用語（スタイル、カメラ、レンダリングのキーワード）を正確に保つ
2. プロンプトの構造と語順を保つ
3. 簡潔で分かりやすい日本語で表現する
4. 技術パラメータ（--ar 16:9、--v 6 など）とスタイル記述を保持する
5. 翻訳結果のみを出力し、説明などを付け加えない""",
    "ko-KR": """당신은 Midjourney 프롬프트 전문 번역가입니다. 중국어 프롬프트를 한국어로 번역하세요:
1. 전문 용어(스타일, 카메라, 렌더링 키워드)를 정확하게 유지
2. 프롬프트의 구조와 어순 유지
3. 간결하고 명확한 한국어 표현 사용
4. 기술 매개변수(--ar 16:9, --v 6 등)와 스타일 설명 보존
5. 번역 결과만 출력하고 설명이나 기타 내용을 추가하지 않음""",
}

_PHRASE_FORMAT_EXAMPLE = """{
  "en": "beautiful",
  "zh": "美丽的",
  "enStart": 0,
  "enEnd": 9,
  "zhStart": 0,
  "zhEnd": 3
}"""

INTERACTIVE_SYSTEM_PROMPT = """你是一名专业的Midjourney提示词翻译专家。请把{source}提示词翻译成{target}，并提取2-3组最重要的关键词组对应关系。

要求：
1. 翻译准确、自然，专业术语保持准确
2. 只提取2-3组最有学习价值的词组（名词、形容词或短语）
3. 字段 en 为原文中的词组，zh 为译文中对应的词组
4. enStart/enEnd 为该词组在原文中的字符位置，zhStart/zhEnd 为在译文中的字符位置（左闭右开）

只返回如下格式的JSON：
{{
  "translated": "译文",
  "keyPhrases": [
{example}
  ]
}}

注意：
- 只返回JSON，不要其他内容
- 确保位置索引准确"""

PHRASE_ANALYSIS_PROMPT = """你是一名专业的词组对应分析专家。请分析给定的{source}原文和{target}译文，提取2-3组最重要的词组对应关系。

要求：
1. 只提取2-3组最有学习价值的词组（名词、形容词或短语）
2. 词组必须同时出现在原文和译文中
3. 字段 en 为原文中的词组，zh 为译文中对应的词组
4. enStart/enEnd 为该词组在原文中的字符位置，zhStart/zhEnd 为在译文中的字符位置（左闭右开）
5. 不要重新翻译

只返回如下格式的JSON：
{{
  "keyPhrases": [
{example}
  ]
}}

注意：
- 只返回JSON，不要其他内容
- 确保位置索引准确（基于字符位置）"""


class PromptPair(NamedTuple):
    system: str
    user: str


def _language_pair(target_language: str) -> tuple[str, str]:
    return LANGUAGE_PAIRS.get(target_language, LANGUAGE_PAIRS[DEFAULT_LANGUAGE])


def get_system_prompt(target_language: str) -> str:
    return SYSTEM_PROMPTS.get(target_language, SYSTEM_PROMPTS[DEFAULT_LANGUAGE])


def get_interactive_system_prompt(target_language: str) -> str:
    source, target = _language_pair(target_language)
    return INTERACTIVE_SYSTEM_PROMPT.format(
        source=source, target=target, example=_PHRASE_FORMAT_EXAMPLE
    )


def get_phrase_analysis_prompt(target_language: str) -> str:
    source, target = _language_pair(target_language)
    return PHRASE_ANALYSIS_PROMPT.format(
        source=source, target=target, example=_PHRASE_FORMAT_EXAMPLE
    )


def build_prompt(request: TranslationRequest) -> PromptPair:
    language = request.targetLanguage
    if request.mode == TranslateMode.INTERACTIVE:
        return PromptPair(
            get_interactive_system_prompt(language),
            f"请翻译以下Midjourney提示词并提取关键词组对应关系：\n\n{request.sourceText}",
        )
    if request.mode == TranslateMode.PHRASE_ANALYSIS:
        source, target = _language_pair(language)
        return PromptPair(
            get_phrase_analysis_prompt(language),
            f"请分析以下{source}与{target}文本的词组对应关系：\n\n"
            f"原文：{request.sourceText}\n译文：{request.translatedText or ''}",
        )
    return PromptPair(
        get_system_prompt(language),
        f"请翻译以下Midjourney提示词，保持专业术语的准确性：\n\n{request.sourceText}",
    )
