# moviecatalog/core/logger.py
from __future__ import annotations

"""
MovieCatalog · Logging (Loguru)
-------------------------------
- Pretty console logs by default; optional JSON logs via `LOG_JSON=1`
- Request correlation: supports `request_id` (from RequestIDMiddleware)
- Intercepts stdlib/uvicorn/fastapi/sqlalchemy logs into Loguru
- Optional file sink with rotation

Env
---
LOG_LEVEL=INFO|DEBUG|WARNING|ERROR (default: INFO)
LOG_JSON=1 (enable JSON logs; pretty logs otherwise)
LOG_TO_FILE=1 (write logs/app.log with rotation; default: 0)
LOG_DIR=logs
LOG_FILE=app.log
LOG_ROTATION=10 MB
APP_DEBUG=1 (enables backtrace/diagnose in console sink)
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from loguru import logger

# ─────────────────────────────────────────────────────────────
# ⚙️ Env
# ─────────────────────────────────────────────────────────────
load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_JSON = os.getenv("LOG_JSON", "0").lower() in {"1", "true", "yes"}
APP_DEBUG = os.getenv("APP_DEBUG", "0").lower() in {"1", "true", "yes"}

LOG_TO_FILE = os.getenv("LOG_TO_FILE", "0").lower() in {"1", "true", "yes"}
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
LOG_FILE = os.getenv("LOG_FILE", "app.log")
LOG_ROTATION = os.getenv("LOG_ROTATION", "10 MB")

# Remove default handler
logger.remove()

# ─────────────────────────────────────────────────────────────
# 🧾 Formatters
# ─────────────────────────────────────────────────────────────
def _fmt_pretty(record) -> str:
    """Colorized single-line template with request_id support."""
    record["extra"].setdefault("request_id", "N/A")
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level> | request_id={extra[request_id]}\n{exception}"
    )


def _fmt_json(record) -> str:
    """Structured JSON lines, safe for ingestion (Datadog, Loki, ELK)."""
    payload: Dict[str, Any] = {
        "ts": record["time"].timestamp(),
        "time": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%f%z"),
        "level": record["level"].name,
        "logger": record["name"],
        "func": record["function"],
        "line": record["line"],
        "message": record["message"],
        "request_id": record["extra"].get("request_id", "N/A"),
    }
    for k, v in record["extra"].items():
        if k not in payload and not k.startswith("_"):
            payload[k] = v
    if record["exception"] is not None:
        payload["exception"] = repr(record["exception"].value)
    record["extra"]["_json"] = json.dumps(payload, ensure_ascii=False, default=str)
    return "{extra[_json]}\n"


CONSOLE_FORMAT = _fmt_json if LOG_JSON else _fmt_pretty

# ─────────────────────────────────────────────────────────────
# 📤 Sinks
# ─────────────────────────────────────────────────────────────
logger.add(
    sys.stdout,
    level=LOG_LEVEL,
    format=CONSOLE_FORMAT,
    enqueue=True,
    backtrace=APP_DEBUG,
    diagnose=APP_DEBUG,
)

if LOG_TO_FILE:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(LOG_DIR / LOG_FILE),
        rotation=LOG_ROTATION,
        level=LOG_LEVEL,
        format=_fmt_json if LOG_JSON else _fmt_pretty,
        enqueue=True,
        backtrace=False,
        diagnose=False,
    )


# ─────────────────────────────────────────────────────────────
# 🔁 Intercept stdlib logging → Loguru
# ─────────────────────────────────────────────────────────────
class InterceptHandler(logging.Handler):
    """Route standard logging records into Loguru, keeping the caller's frame."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


# Patch common loggers (the application's own modules included)
for name in ("uvicorn", "uvicorn.error", "fastapi", "starlette", "moviecatalog", "sqlalchemy.engine"):
    std_logger = logging.getLogger(name)
    std_logger.handlers = [InterceptHandler()]
    std_logger.setLevel("WARNING" if name == "sqlalchemy.engine" else LOG_LEVEL)
    std_logger.propagate = False
