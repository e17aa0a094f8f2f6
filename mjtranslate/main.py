import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mjtranslate.api.endpoints import translation
from mjtranslate.core.config import Settings
from mjtranslate.core.errors import (
    InvalidCredentials,
    NotConfigured,
    RateLimited,
    RecordNotFound,
    TranslationError,
    UnsupportedProvider,
)
from mjtranslate.core.history import HistoryStore
from mjtranslate.core.logging_config import configure_logging
from mjtranslate.core.providers import build_providers
from mjtranslate.core.translate_service import TranslateService

logger = logging.getLogger(__name__)


def error_status(error: TranslationError) -> int:
    if isinstance(error, RecordNotFound):
        return 404
    if error.kind == "input" or isinstance(error, UnsupportedProvider):
        return 400
    if isinstance(error, (NotConfigured, InvalidCredentials)):
        return 503
    if isinstance(error, RateLimited):
        return 429
    return 502


def create_app(
    settings: Settings = None,
    service: TranslateService = None,
    history: HistoryStore = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 日志在服务启动时配置，仅导入模块不会创建日志文件
        configure_logging(settings.log_level, settings.log_dir)
        yield

    app = FastAPI(title="mjtranslate", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if service is None:
        service = TranslateService(
            build_providers(settings), default_provider=settings.default_provider
        )
    app.state.settings = settings
    app.state.translate_service = service
    app.state.history = history if history is not None else HistoryStore()

    @app.exception_handler(TranslationError)
    async def translation_error_handler(request: Request, exc: TranslationError):
        logger.error("翻译失败: %s (%s)", exc.message, exc.code)
        return JSONResponse(
            status_code=error_status(exc),
            content={"success": False, **exc.to_dict()},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("未处理的异常: %s", exc)
        message = "服务器内部错误" if settings.is_production else str(exc)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": message, "code": "internal_error"},
        )

    @app.get("/health", tags=["health"])
    def health():
        return {
            "status": "ok",
            "providers": [p.value for p in service.configured_providers()],
            "defaultProvider": service.default_provider.value,
        }

    # 提示词翻译
    app.include_router(translation.router, prefix="/api/translate", tags=["translate"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mjtranslate.main:app", host="0.0.0.0", port=8000, reload=True)
