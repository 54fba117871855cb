"""
Structured logging for the site: JSON or text output, per-request context and secret masking
"""
import json
import logging
import re
import sys
from contextvars import ContextVar
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

from app.core.config import Settings, get_settings

# Per-request fields (request_id, method, path, ...) merged into every record
request_context: ContextVar[Dict[str, Any]] = ContextVar('request_context', default={})

# Attributes every LogRecord carries; anything else came in through extra=
_RESERVED_RECORD_KEYS = frozenset(logging.LogRecord(
    '', logging.INFO, '', 0, '', None, None
).__dict__) | {'message', 'asctime', 'taskName'}

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


class SensitiveDataFilter(logging.Filter):
    """
    Masks credentials before a record reaches any handler

    Covers passwords, session tokens (header, cookie or key=value form) and
    identity provider secrets, both in the message and in extra= fields.
    """

    MASK = '***'
    SENSITIVE_KEYS = ('password', 'token', 'secret', 'authorization', 'cookie')
    SENSITIVE_PATTERNS = [
        re.compile(r'(Bearer\s+)[^\s"\',]+', re.IGNORECASE),
        re.compile(r'((?:password|secret|token)\w*["\']?\s*[:=]\s*["\']?)[^"\'\s&,]+', re.IGNORECASE),
        re.compile(r'((?:session_token|__session)=)[^;\s"\']+', re.IGNORECASE),
    ]

    def __init__(self, enabled: bool = True):
        super().__init__()
        self.enabled = enabled

    def mask(self, value: str) -> str:
        for pattern in self.SENSITIVE_PATTERNS:
            value = pattern.sub(lambda m: m.group(1) + self.MASK, value)
        return value

    def _is_sensitive_key(self, key: str) -> bool:
        key = key.lower()
        return any(marker in key for marker in self.SENSITIVE_KEYS)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.enabled:
            return True

        if isinstance(record.msg, str):
            record.msg = self.mask(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(self.mask(a) if isinstance(a, str) else a for a in record.args)

        for key in list(record.__dict__):
            if key in _RESERVED_RECORD_KEYS:
                continue
            if self._is_sensitive_key(key):
                setattr(record, key, self.MASK)
            elif isinstance(record.__dict__[key], str):
                setattr(record, key, self.mask(record.__dict__[key]))

        return True


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_KEYS}


class ContextualFormatter(logging.Formatter):
    """One JSON object per line: base fields, request context, then extra= fields"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'location': f'{record.module}.{record.funcName}:{record.lineno}',
            'message': record.getMessage(),
        }
        entry.update(request_context.get({}))
        entry.update(_extra_fields(record))

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Plain text with the request id appended when one is bound"""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        request_id = request_context.get({}).get('request_id')
        return f'{line} [request_id={request_id}]' if request_id else line


class LoggingConfig:
    """Centralized logging configuration with structured logging support"""

    _configured = False
    _module_levels: Dict[str, str] = {}

    @staticmethod
    def _levels(settings: Settings, overrides: Optional[Dict[str, str]]) -> Dict[str, str]:
        levels = {
            'root': settings.log_level,
            'app': settings.log_level,
            'sqlalchemy.engine': 'INFO' if settings.log_sqlalchemy else 'WARNING',
            'sqlalchemy.pool': 'WARNING',
            'uvicorn.access': 'INFO' if settings.log_uvicorn_access else 'WARNING',
            'uvicorn.error': 'INFO',
            'httpx': 'WARNING',
            'httpcore': 'WARNING',
        }
        if settings.log_module_levels:
            try:
                levels.update(json.loads(settings.log_module_levels))
            except (json.JSONDecodeError, TypeError):
                sys.stderr.write('LOG_MODULE_LEVELS is not valid JSON; ignoring it\n')
        levels.update(overrides or {})
        return levels

    @staticmethod
    def _handlers(settings: Settings) -> List[logging.Handler]:
        if settings.log_format.lower() == 'json':
            formatter: logging.Formatter = ContextualFormatter(datefmt='%Y-%m-%d %H:%M:%S')
        else:
            formatter = TextFormatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
        masking = SensitiveDataFilter(enabled=not settings.log_sensitive_data)

        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
        if settings.log_file_enabled:
            log_path = Path(settings.log_file_path)
            if not log_path.is_absolute():
                log_path = PROJECT_ROOT / log_path
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(TimedRotatingFileHandler(
                filename=str(log_path),
                when='midnight',
                backupCount=settings.log_file_retention,
                encoding='utf-8',
            ))

        for handler in handlers:
            handler.setFormatter(formatter)
            handler.addFilter(masking)
        return handlers

    @classmethod
    def configure(cls, module_levels: Optional[Dict[str, str]] = None, force: bool = False):
        """Install handlers and levels once per process (force=True reapplies settings)"""
        if cls._configured and not force:
            return

        settings = get_settings()
        levels = cls._levels(settings, module_levels)

        logging.basicConfig(
            level=getattr(logging, levels.pop('root').upper()),
            handlers=cls._handlers(settings),
            force=True,
        )
        for name, level in levels.items():
            logging.getLogger(name).setLevel(getattr(logging, level.upper()))

        cls._module_levels = levels
        cls._configured = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._configured:
            cls.configure()
        return logging.getLogger(name)

    @classmethod
    def set_context(cls, **kwargs):
        """Bind fields to every record logged in the current request"""
        ctx = dict(request_context.get({}))
        ctx.update(kwargs)
        request_context.set(ctx)

    @classmethod
    def clear_context(cls):
        request_context.set({})


LoggingConfig.configure()
