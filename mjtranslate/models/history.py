from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict


class Category(str, Enum):
    GENERAL = "general"
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    ABSTRACT = "abstract"
    CHARACTER = "character"
    SCENE = "scene"
    STYLE = "style"
    OTHER = "other"


class HistoryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    originalText: str
    translatedText: str
    language: str
    category: Category = Category.GENERAL
    createdAt: datetime


class HistoryPage(BaseModel):
    records: List[HistoryRecord]
    total: int
    page: int
    page_size: int
    pages: int


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class HistoryResponse(BaseModel):
    prompts: List[HistoryRecord]
    pagination: Pagination
