from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class TranslateMode(str, Enum):
    PLAIN = "plain"
    INTERACTIVE = "interactive"
    PHRASE_ANALYSIS = "phraseAnalysisOnly"


# 接口请求体
class TranslateRequest(BaseModel):
    text: str = ""
    targetLanguage: str = "zh-CN"
    provider: Optional[str] = None
    saveToDatabase: bool = False


class AnalyzePhrasesRequest(BaseModel):
    original: str = ""
    translated: str = ""
    targetLanguage: str = "zh-CN"
    provider: Optional[str] = None


class BatchTranslateRequest(BaseModel):
    texts: List[str] = Field(default_factory=list)
    targetLanguage: str = "zh-CN"


# 服务层数据
class TranslationRequest(BaseModel):
    sourceText: str
    targetLanguage: str = "zh-CN"
    mode: TranslateMode = TranslateMode.PLAIN
    # 仅词组分析模式使用：已有的译文
    translatedText: Optional[str] = None


class KeyPhrase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    sourceText: str
    targetText: str
    sourceStart: int
    sourceEnd: int
    targetStart: int
    targetEnd: int

    def is_aligned(self, original: str, translated: str) -> bool:
        """模型给出的位置是否与词组文本一致。"""
        return (
            0 <= self.sourceStart <= self.sourceEnd <= len(original)
            and 0 <= self.targetStart <= self.targetEnd <= len(translated)
            and original[self.sourceStart:self.sourceEnd] == self.sourceText
            and translated[self.targetStart:self.targetEnd] == self.targetText
        )


class TranslationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    original: str
    translated: str
    language: str
    provider: Literal["deepseek", "gemini"]
    timestamp: str
    keyPhrases: List[KeyPhrase] = Field(default_factory=list)


class BatchItemResult(BaseModel):
    original: str
    translated: Optional[str] = None
    language: str
    provider: Optional[Literal["deepseek", "gemini"]] = None
    timestamp: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
