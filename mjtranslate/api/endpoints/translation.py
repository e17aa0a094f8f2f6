import logging

from fastapi import APIRouter, Path, Query, Request

from mjtranslate.core.errors import BatchTooLarge, EmptyInput, RecordNotFound
from mjtranslate.core.history import HistoryStore
from mjtranslate.core.translate_service import MAX_BATCH_SIZE, TranslateService
from mjtranslate.models.history import HistoryPage, HistoryResponse, Pagination
from mjtranslate.models.translation import (
    AnalyzePhrasesRequest,
    BatchTranslateRequest,
    TranslateRequest,
    TranslationResult,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _service(request: Request) -> TranslateService:
    return request.app.state.translate_service


def _history(request: Request) -> HistoryStore:
    return request.app.state.history


def _save(history: HistoryStore, translation: TranslationResult) -> dict:
    data = translation.model_dump()
    record = history.add(
        original_text=translation.original,
        translated_text=translation.translated,
        language=translation.language,
    )
    data["saved"] = True
    data["promptId"] = record.id
    data["message"] = f"已保存，当前共{len(history)}条记录"
    return data


def _page_response(page: HistoryPage) -> dict:
    return HistoryResponse(
        prompts=page.records,
        pagination=Pagination(
            page=page.page, limit=page.page_size, total=page.total, pages=page.pages
        ),
    ).model_dump(mode="json")


@router.post("")
async def translate_text(body: TranslateRequest, request: Request):
    # 空文本在进入翻译服务之前直接拒绝
    if not body.text.strip():
        raise EmptyInput()

    translation = await _service(request).translate_prompt(
        body.text, body.targetLanguage, body.provider
    )
    if body.saveToDatabase:
        data = _save(_history(request), translation)
    else:
        data = translation.model_dump()
    return {"success": True, "data": data}


@router.post("/interactive")
async def translate_interactive(body: TranslateRequest, request: Request):
    if not body.text.strip():
        raise EmptyInput()

    logger.info("开始交互式翻译: %s", body.text[:50])
    translation = await _service(request).translate_with_phrases(
        body.text, body.targetLanguage, body.provider
    )
    logger.info("交互式翻译完成, keyPhrases=%d", len(translation.keyPhrases))
    if body.saveToDatabase:
        data = _save(_history(request), translation)
    else:
        data = translation.model_dump()
    return {"success": True, "data": data}


@router.post("/analyze-phrases")
async def analyze_phrases(body: AnalyzePhrasesRequest, request: Request):
    if not body.original.strip():
        raise EmptyInput("原文不能为空")
    if not body.translated.strip():
        raise EmptyInput("译文不能为空")

    analysis = await _service(request).analyze_phrases(
        body.original, body.translated, body.targetLanguage, body.provider
    )
    logger.info("词组分析完成, keyPhrases=%d", len(analysis.keyPhrases))
    return {"success": True, "data": analysis.model_dump()}


@router.post("/batch")
async def translate_batch(body: BatchTranslateRequest, request: Request):
    if not body.texts:
        raise EmptyInput("请提供要翻译的文本数组")
    if len(body.texts) > MAX_BATCH_SIZE:
        raise BatchTooLarge()

    results = await _service(request).translate_batch(body.texts, body.targetLanguage)
    return {"success": True, "data": [item.model_dump() for item in results]}


@router.get("/history")
def get_translation_history(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category: str = None,
):
    history_page = _history(request).list(category=category, page=page, page_size=limit)
    return {"success": True, "data": _page_response(history_page)}


@router.get("/search")
def search_history(
    request: Request,
    q: str = "",
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    if not q.strip():
        raise EmptyInput("搜索关键词不能为空")
    history_page = _history(request).search(q, page=page, page_size=limit)
    return {"success": True, "data": _page_response(history_page)}


@router.delete("/history/{record_id}", status_code=204)
def delete_history_record(
    request: Request,
    record_id: str = Path(..., description="要删除的翻译记录ID"),
):
    if not _history(request).delete(record_id):
        raise RecordNotFound()
    return
