import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DEEPSEEK_API_URL = "https://api.deepseek.com/v1/chat/completions"
DEFAULT_DEEPSEEK_MODEL = "deepseek-chat"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
KNOWN_PROVIDERS = ("deepseek", "gemini")


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    deepseek_api_key: str | None = None
    deepseek_api_url: str = DEFAULT_DEEPSEEK_API_URL
    deepseek_model: str = DEFAULT_DEEPSEEK_MODEL
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    default_provider: str = "deepseek"
    app_env: str = "development"
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))
    log_level: str = "INFO"
    log_dir: str = "logs"

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def deepseek_base_url(self) -> str:
        # SDK 需要的是 base_url，配置里给的是完整的 chat/completions 地址
        url = self.deepseek_api_url.rstrip("/")
        suffix = "/chat/completions"
        if url.endswith(suffix):
            url = url[: -len(suffix)]
        return url

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        if load_env_file:
            load_dotenv()

        default_provider = (os.getenv("DEFAULT_TRANSLATE_PROVIDER") or "deepseek").strip().lower()
        if default_provider not in KNOWN_PROVIDERS:
            logger.warning(
                "未知的 DEFAULT_TRANSLATE_PROVIDER=%s，使用 deepseek", default_provider
            )
            default_provider = "deepseek"

        return cls(
            deepseek_api_key=os.getenv("DEEPSEEK_API_KEY") or None,
            deepseek_api_url=os.getenv("DEEPSEEK_API_URL") or DEFAULT_DEEPSEEK_API_URL,
            deepseek_model=os.getenv("DEEPSEEK_MODEL") or DEFAULT_DEEPSEEK_MODEL,
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            default_provider=default_provider,
            app_env=os.getenv("APP_ENV", "development"),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "*")) or ("*",),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_dir=os.getenv("LOG_DIR", "logs"),
        )
