# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging across store, map and form layers
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Every GIS component logs through get_logger(name, ComponentType.X). The
session wraps each page action in log_context(session_id=..., asset_id=...,
operation=...) so lines from the store, reconciler and map adapter can be
tied back to the click or commit that caused them.

Context lives in a ContextVar: page actions run as asyncio tasks and a
commit awaits the backend inside its log_context block.

Output is one JSON object per line with LOG_FORMAT=json, otherwise a
single readable line with the context inline.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, asdict, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class ComponentType(str, Enum):
    """Component a logger belongs to; emitted as data.component."""
    STORE = "store"
    MAP_SURFACE = "map_surface"
    SELECTION = "selection"
    EDITOR = "editor"
    RECONCILER = "reconciler"
    SESSION = "session"
    API = "api"
    BACKEND = "backend"


@dataclass(frozen=True)
class LogContext:
    """Which session, asset and operation a log line belongs to."""
    session_id: Optional[str] = None
    asset_id: Optional[str] = None
    operation: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        return {key: value for key, value in asdict(self).items() if value is not None}


_EMPTY = LogContext()
_context_stack: ContextVar[Tuple[LogContext, ...]] = ContextVar("gis_log_context", default=())


def get_current_context() -> LogContext:
    stack = _context_stack.get()
    return stack[-1] if stack else _EMPTY


@contextmanager
def log_context(**fields: Optional[str]):
    """
    Layer context fields over the enclosing context for the block.

    Example:
        with log_context(session_id="s-1", operation="commit"):
            logger.info("Committing draft")
    """
    current = replace(get_current_context(), **fields)
    token = _context_stack.set(_context_stack.get() + (current,))
    try:
        yield current
    finally:
        _context_stack.reset(token)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": _timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = get_current_context().to_dict()
        if context:
            log_data["context"] = context

        data = getattr(record, "extra", None)
        if data:
            log_data["data"] = data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data["source"] = {"file": record.filename, "line": record.lineno}
        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Readable single-line output for local runs."""

    _LABELS = (("session_id", "session"), ("asset_id", "asset"), ("operation", "op"))

    def format(self, record: logging.LogRecord) -> str:
        context = get_current_context().to_dict()
        parts = [f"{label}={context[key]}" for key, label in self._LABELS if key in context]
        context_str = f" [{', '.join(parts)}]" if parts else ""

        result = (
            f"{datetime.now(timezone.utc):%Y-%m-%d %H:%M:%S} {record.levelname:<8} "
            f"{record.name}{context_str}: {record.getMessage()}"
        )
        if record.exc_info:
            result += f"\n{self.formatException(record.exc_info)}"
        return result


class ContextLogger(logging.LoggerAdapter):
    """Attaches the component and any extra= fields to each record."""

    def process(self, msg, kwargs):
        data = dict(kwargs.get("extra") or {})
        component = (self.extra or {}).get("component")
        if component and "component" not in data:
            data["component"] = component
        # Formatters read record.extra
        kwargs["extra"] = {"extra": data}
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    return ContextLogger(
        logging.getLogger(name),
        {"component": component.value if component is not None else None},
    )


def configure_logging(level: Union[str, int] = "INFO", json_output: bool = False) -> None:
    """
    Replace root handlers with a single stdout handler.

    Args:
        level: Level name or number; unknown names fall back to INFO
        json_output: StructuredFormatter instead of HumanFormatter
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if json_output else HumanFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)


def log_checkpoint(name: str, data: Optional[Dict[str, Any]] = None) -> None:
    """
    Log a named session lifecycle step (session_mounted, surface_ready,
    reconcile_pass, ...) on the "checkpoint" logger.
    """
    checkpoint: Dict[str, Any] = {"checkpoint": name, **get_current_context().to_dict()}
    if data:
        checkpoint["data"] = data
    logging.getLogger("checkpoint").info(f"CHECKPOINT: {name}", extra={"extra": checkpoint})


__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
