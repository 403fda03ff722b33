"""
Logging setup for the Venturelink API

Records go to stdout and, optionally, a rotating file. Every handler masks
credentials (passwords, OTP codes, JWTs) unless LOG_SENSITIVE_DATA is on,
and JSON output carries the request context bound by the middleware and
the authenticated user bound by the token dependency.
"""
import json
import logging
import re
import sys
from contextvars import ContextVar
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from app.core.config import get_settings
from app.core.metrics import log_records_total

request_context: ContextVar[Dict[str, Any]] = ContextVar('request_context', default={})

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
TEXT_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

_ROTATION_CHOICES = {'midnight', 'W0', 'W1', 'W2', 'W3', 'W4', 'W5', 'W6'}

# Attributes every LogRecord has; anything else came through extra=
_STANDARD_ATTRS = frozenset(
    logging.LogRecord('', 0, '', 0, '', None, None).__dict__
) | {'message', 'asctime', 'taskName'}

_JWT = r'eyJ[\w-]+\.[\w-]+\.[\w-]+'


class CredentialMaskingFilter(logging.Filter):
    """Masks credentials in the message and its arguments"""

    RULES: List[Tuple[re.Pattern, str]] = [
        (re.compile(r'(["\']?(?:new_|old_)?password["\']?\s*[:=]\s*)["\']?[^"\'\s&,}]+', re.I), r'\1***'),
        (re.compile(r'(["\']?(?:refresh_|access_)?token["\']?\s*[:=]\s*)["\']?[^"\'\s&,}]+', re.I), r'\1***'),
        (re.compile(r'(["\']?otp(?:_code)?["\']?\s*[:=]\s*)["\']?\d+', re.I), r'\1***'),
        (re.compile(r'(["\']?(?:jwt_)?secret["\']?\s*[:=]\s*)["\']?[^"\'\s&,}]+', re.I), r'\1***'),
        (re.compile(r'(Bearer\s+)\S+', re.I), r'\1***'),
        (re.compile(_JWT), '<jwt>'),
    ]

    def __init__(self, enabled: bool = True):
        super().__init__()
        self.enabled = enabled

    @classmethod
    def mask(cls, text: str) -> str:
        for pattern, replacement in cls.RULES:
            text = pattern.sub(replacement, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if self.enabled:
            if isinstance(record.msg, str):
                record.msg = self.mask(record.msg)
            if isinstance(record.args, tuple):
                record.args = tuple(self.mask(a) if isinstance(a, str) else a for a in record.args)
        return True


class RequestJSONFormatter(logging.Formatter):
    """One JSON object per line, merged with the bound request context"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'time': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'where': f"{record.module}.{record.funcName}:{record.lineno}",
            'message': record.getMessage(),
        }
        entry.update(request_context.get())

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith('_'):
                entry[key] = value

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


class _LevelCounter(logging.Handler):
    """Feeds log_records_total"""

    def emit(self, record: logging.LogRecord) -> None:
        log_records_total.labels(level=record.levelname).inc()


def _module_levels(settings, overrides: Optional[Dict[str, str]]) -> Dict[str, str]:
    levels = {
        'root': settings.log_level,
        'app': settings.log_level,
        'app.services.token_cleanup_scheduler': 'INFO',
        'app.services.email_service': 'INFO',
        'sqlalchemy.engine': 'INFO' if settings.log_sqlalchemy else 'WARNING',
        'sqlalchemy.pool': 'WARNING',
        'uvicorn.error': 'INFO',
        'uvicorn.access': 'INFO' if settings.log_uvicorn_access else 'WARNING',
        'multipart': 'WARNING',
    }
    if settings.log_module_levels:
        try:
            levels.update(json.loads(settings.log_module_levels))
        except (json.JSONDecodeError, TypeError):
            print(f"Ignoring malformed LOG_MODULE_LEVELS: {settings.log_module_levels!r}", file=sys.stderr)
    if overrides:
        levels.update(overrides)
    return levels


def _log_file(settings) -> Path:
    path = Path(settings.log_file_path)
    if not path.is_absolute():
        # Relative paths resolve against the repository root
        path = Path(__file__).resolve().parents[3] / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


class LoggingConfig:
    """Process-wide logging configuration"""

    _configured = False

    @classmethod
    def configure(cls, module_levels: Optional[Dict[str, str]] = None, force: bool = False):
        if cls._configured and not force:
            return

        settings = get_settings()
        levels = _module_levels(settings, module_levels)

        if settings.log_format.lower() == 'json':
            formatter: logging.Formatter = RequestJSONFormatter(datefmt=DATE_FORMAT)
        else:
            formatter = logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)
        masking = CredentialMaskingFilter(enabled=not settings.log_sensitive_data)

        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
        if settings.log_file_enabled:
            handlers.append(TimedRotatingFileHandler(
                filename=str(_log_file(settings)),
                when=settings.log_file_rotation if settings.log_file_rotation in _ROTATION_CHOICES else 'midnight',
                backupCount=settings.log_file_retention,
                encoding='utf-8',
            ))
        for handler in handlers:
            handler.setFormatter(formatter)
            handler.addFilter(masking)
        handlers.append(_LevelCounter())

        logging.basicConfig(level=levels.pop('root').upper(), handlers=handlers, force=True)

        for name, level in levels.items():
            module_logger = logging.getLogger(name)
            module_logger.setLevel(level.upper())
            # uvicorn installs its own handlers
            if name.startswith('uvicorn'):
                module_logger.propagate = False

        cls._configured = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._configured:
            cls.configure()
        return logging.getLogger(name)

    @classmethod
    def set_context(cls, **fields):
        """Bind fields to every record logged for the current request"""
        request_context.set({**request_context.get(), **fields})

    @classmethod
    def clear_context(cls):
        request_context.set({})


LoggingConfig.configure()
