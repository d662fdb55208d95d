"""Structured logging for skribble, backed by telelog.

Loggers are built lazily from ``LogSettings``; call ``configure`` to swap the
settings (cached loggers are dropped so the next lookup picks them up).
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "SKRIBBLE_"
ROOT_LOGGER = "skribble"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _flag(raw: Optional[str], default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class LogSettings:
    """What telelog should emit and where."""

    level: str = "INFO"
    console: bool = True
    color: bool = True
    json: bool = False
    file: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", self.level.upper())

    @classmethod
    def from_env(cls) -> "LogSettings":
        env = {
            key[len(ENV_PREFIX) :]: value
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }
        return cls(
            level=env.get("LOG_LEVEL") or "INFO",
            console=not _flag(env.get("DISABLE_CONSOLE"), False),
            color=not _flag(env.get("NO_COLOR"), False),
            json=_flag(env.get("LOG_JSON"), False),
            file=env.get("LOG_FILE") or None,
        )

    def build(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.color)
        if self.json:
            config.with_json_format(True)
        if self.file:
            config.with_file_output(self.file)
        return config


_config: Optional[Any] = None
_loggers: MutableMapping[str, Any] = {}


def configure(settings: Optional[LogSettings] = None) -> LogSettings:
    """Adopt ``settings`` (default: read ``SKRIBBLE_*`` env) and reset loggers."""

    global _config
    adopted = settings or LogSettings.from_env()
    _config = adopted.build()
    _loggers.clear()
    return adopted


def get_logger(name: Optional[str] = None) -> Any:
    logger_name = name or ROOT_LOGGER
    if logger_name not in _loggers:
        if _config is None:
            configure()
        _loggers[logger_name] = tl.Logger.with_config(logger_name, _config)
    return _loggers[logger_name]


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else repr(value)


def _log(logger: Any, level: str, message: str, fields: Dict[str, Any]) -> None:
    name = level.lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(k), _as_text(v)) for k, v in fields.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {fields}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` attached as key/value pairs."""

    _log(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
) -> Iterator[Dict[str, Any]]:
    """Profile a block under ``name``.

    ``context`` is attached to every line logged inside the block. The yielded
    dict collects details discovered mid-block; they are logged at debug level
    when the block finishes, or with the error if it raises.
    """

    log = get_logger(logger_name)
    details: Dict[str, Any] = {}
    with ExitStack() as stack:
        for key, value in (context or {}).items():
            log.add_context(key, _as_text(value))
            stack.callback(log.remove_context, key)
        if component:
            stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))
        try:
            yield details
        except Exception as exc:
            _log(log, "error", f"span::{name}", {**details, "error": str(exc)})
            raise
        if details:
            _log(log, "debug", f"span::{name}", details)


__all__ = [
    "LogSettings",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
