# 📜 storefront/shared/utils/logger.py
"""
📜 Єдина схема логування для ядра каталогу та префетчу.

🔹 Ініціалізує логер `storefront` з консольним та (опційно) файловим виводом.
🔹 Підтримує JSON-формат із `extra`-полями, щоб події префетчу легко фільтрувались.
🔹 Надає `get_logger()` для дочірніх логерів із загальним префіксом.
"""
from __future__ import annotations

# 🔠 Системні імпорти
import json                                                         # 📦 Серіалізація payload логів
import logging                                                      # 🪵 Логери Python
import sys                                                          # 🧵 Потік stdout
import threading                                                    # 🔒 Захист повторної ініціалізації
from dataclasses import dataclass, field                            # 🧱 DTO-конфіг логування
from logging.handlers import TimedRotatingFileHandler               # 📁 Файли з ротацією
from pathlib import Path                                            # 📂 Шляхи до лог-файлів
from typing import Any, Dict, Mapping, Optional, Union              # 🧰 Типи

# ================================
# 🧾 КОНСТАНТИ МОДУЛЯ
# ================================
LOG_NAME: str = "storefront"                                        # 🏷️ Базовий префікс логерів
PLAIN_FORMAT: str = "%(asctime)s [%(levelname)s] - (%(name)s).%(funcName)s(%(lineno)d) - %(message)s"
CONSOLE_FORMAT: str = "[%(levelname).1s] %(name)s: %(message)s"

# Стандартні атрибути LogRecord, які не потрапляють у JSON як extra
_RESERVED_ATTRS = frozenset(
    {
        "args", "asctime", "created", "exc_info", "exc_text", "filename", "levelno",
        "lineno", "module", "msecs", "message", "msg", "name", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "thread", "threadName",
        "levelname", "funcName", "taskName",
    }
)

_lock = threading.Lock()


# ================================
# 🧾 DTO КОНФІГУРАЦІЇ
# ================================
@dataclass
class LoggingConfig:
    """Налаштування логування з дефолтами для локального запуску."""
    level: str = "INFO"
    console: bool = True
    json: bool = False
    file: Optional[str] = None                                      # 📁 None → без файлового хендлера
    when: str = "midnight"
    backup_count: int = 7
    suppress: Dict[str, str] = field(default_factory=lambda: {"httpx": "WARNING", "httpcore": "WARNING"})


# ================================
# 🧰 ФОРМАТТЕР
# ================================
class JsonFormatter(logging.Formatter):
    """Плаский JSON: базові поля + усе, що передано через `extra=`."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, datefmt="%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "func": record.funcName,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():                  # 🔎 Забираємо custom extra-поля
            if key.startswith("_") or key in _RESERVED_ATTRS or key in payload:
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = str(value)                           # 🔄 Несеріалізоване → рядок
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


# ================================
# 🛠️ ДОПОМОЖНІ ФУНКЦІЇ
# ================================
def _to_level(value: Union[str, int, None], default: int = logging.INFO) -> int:
    """Рядок/число → числовий рівень логування."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    return getattr(logging, str(value).upper(), default)


def _make_file_handler(cfg: LoggingConfig, fmt: logging.Formatter) -> logging.Handler:
    """Файловий хендлер з ротацією за часом."""
    assert cfg.file is not None
    log_path = Path(cfg.file)
    log_path.parent.mkdir(parents=True, exist_ok=True)              # 🧱 Директорія має існувати
    handler = TimedRotatingFileHandler(
        filename=str(log_path),
        when=cfg.when,
        backupCount=cfg.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(fmt)
    return handler


# ================================
# 🚀 ПУБЛІЧНИЙ API
# ================================
def init_logging(
    *,
    level: Optional[str] = None,
    console: Optional[bool] = None,
    json_mode: Optional[bool] = None,
    file: Optional[str] = None,
    suppress: Optional[Mapping[str, str]] = None,
) -> logging.Logger:
    """Налаштовує кореневий логер `storefront` і повертає його."""
    with _lock:                                                     # 🔒 Одна конфігурація за раз
        cfg = LoggingConfig(
            level=(level or "INFO").upper(),
            console=True if console is None else bool(console),
            json=bool(json_mode),
            file=file or None,
        )
        if suppress is not None:
            cfg.suppress = dict(suppress)

        root_logger = logging.getLogger(LOG_NAME)
        root_logger.setLevel(_to_level(cfg.level))

        for handler in list(root_logger.handlers):                  # 🧹 Прибираємо наші попередні хендлери
            if isinstance(handler, (logging.StreamHandler, TimedRotatingFileHandler)):
                root_logger.removeHandler(handler)
                handler.close()

        formatter: logging.Formatter = JsonFormatter() if cfg.json else logging.Formatter(CONSOLE_FORMAT)
        if cfg.console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        if cfg.file:
            file_fmt = JsonFormatter() if cfg.json else logging.Formatter(PLAIN_FORMAT)
            root_logger.addHandler(_make_file_handler(cfg, file_fmt))

        for name, lib_level in cfg.suppress.items():                # 🙊 Приглушуємо сторонні бібліотеки
            logging.getLogger(name).setLevel(_to_level(lib_level, logging.WARNING))

        root_logger.info(
            "✅ Logging initialized | level=%s console=%s json=%s file=%s",
            cfg.level,
            "ON" if cfg.console else "OFF",
            "ON" if cfg.json else "OFF",
            cfg.file or "-",
        )
        return root_logger


def init_logging_from_config(config: Optional[Mapping[str, Any]]) -> logging.Logger:
    """Ініціалізує логування з розділу `logging` конфігурації."""
    node = config or {}
    return init_logging(
        level=node.get("level"),
        console=node.get("console"),
        json_mode=node.get("json"),
        file=node.get("file"),
        suppress=node.get("suppress"),
    )


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    """Дочірній логер `storefront.<suffix>` (або кореневий без суфікса)."""
    return logging.getLogger(LOG_NAME if not suffix else f"{LOG_NAME}.{suffix}")


__all__ = ["LOG_NAME", "JsonFormatter", "LoggingConfig", "init_logging", "init_logging_from_config", "get_logger"]
