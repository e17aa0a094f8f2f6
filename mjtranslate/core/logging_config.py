import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

_HANDLERS: list[logging.Handler] = []


def configure_logging(level: str = "INFO", log_dir: str | None = "logs") -> None:
    """初始化根日志：控制台 + 滚动文件。重复调用不会重复添加 handler。"""
    if _HANDLERS:
        return

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    _HANDLERS.append(stream_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path / "mjtranslate.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        _HANDLERS.append(file_handler)

    for handler in _HANDLERS:
        root_logger.addHandler(handler)


def reset_logging() -> None:
    """移除 configure_logging 添加的 handler，之后可以按新配置重新初始化。"""
    root_logger = logging.getLogger()
    for handler in _HANDLERS:
        root_logger.removeHandler(handler)
        handler.close()
    _HANDLERS.clear()
