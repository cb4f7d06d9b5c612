import json
import logging
import os
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler

# -------- structured context (per request) --------
_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_user_id: ContextVar[int | None] = ContextVar("user_id", default=None)


def set_log_context(request_id: str | None = None, user_id: int | None = None) -> None:
    _request_id.set(request_id)
    _user_id.set(user_id)


def clear_log_context() -> None:
    _request_id.set(None)
    _user_id.set(None)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        obj = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            obj["exc_info"] = self.formatException(record.exc_info)

        # context vars and anything passed via extra={...}
        for k in ("request_id", "user_id", "date", "entry_id", "event"):
            v = getattr(record, k, None)
            if v is not None:
                obj[k] = v

        return json.dumps(obj, ensure_ascii=False)


def setup_logging() -> None:
    # inject contextvars into EVERY log record (incl. uvicorn.*, sqlalchemy.*)
    old_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = old_factory(*args, **kwargs)
        record.request_id = _request_id.get()
        record.user_id = _user_id.get()
        return record

    logging.setLogRecordFactory(record_factory)

    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    log_format = (os.getenv("LOG_FORMAT", "text") or "text").strip().lower()
    use_json = log_format in {"json", "structured", "jsonl"}

    text_fmt = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"
    text_formatter = logging.Formatter(text_fmt)
    json_formatter = JsonFormatter()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    # stdout
    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(json_formatter if use_json else text_formatter)
    root.addHandler(ch)

    # file (rotation), only when asked for
    log_path = (os.getenv("LOG_FILE") or "").strip()
    if log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        fh = TimedRotatingFileHandler(
            log_path,
            when="D",
            interval=1,
            backupCount=14,
            encoding="utf-8",
        )
        fh.setLevel(level)
        fh.setFormatter(json_formatter if use_json else text_formatter)
        root.addHandler(fh)
