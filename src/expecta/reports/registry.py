"""Lookup of reporter classes named in ``[tool.expecta] reporters``."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, TypeVar


if TYPE_CHECKING:
    from expecta.reports.base import Reporter


T = TypeVar("T", bound="Reporter")

_reporters: dict[str, type[Reporter]] = {}


def reporter(cls: type[T] | None = None, *, name: str | None = None):
    """Make a reporter class selectable by name in the configuration.

        @reporter
        class JUnitNotes: ...

        @reporter(name="notes")
        class JUnitNotes: ...
    """

    def decorator(cls: type[T]) -> type[T]:
        _reporters[name or cls.__name__] = cls
        return cls

    if cls is not None:
        return decorator(cls)
    return decorator


def get_reporter_registry() -> dict[str, type[Reporter]]:
    return _reporters


def reporter_class(name: str) -> type[Reporter]:
    """Find the reporter class for a registered name or a ``module:Class`` path.

    Raises:
        ValueError: If the name is neither registered nor importable.
        TypeError: If the imported object is not a reporter class.
    """
    if name in _reporters:
        return _reporters[name]

    module_path, sep, class_name = name.rpartition(":")
    if not sep:
        module_path, sep, class_name = name.rpartition(".")
    if not sep or not module_path:
        available = ", ".join(sorted(_reporters)) or "none"
        raise ValueError(f"Unknown reporter: {name}. Available: {available}")

    try:
        cls = getattr(importlib.import_module(module_path), class_name)
    except (ImportError, AttributeError) as exc:
        raise ValueError(f"Cannot import reporter {name}: {exc}") from exc

    from expecta.reports.base import Reporter

    if not isinstance(cls, type) or not issubclass(cls, Reporter):
        raise TypeError(f"{name} does not implement the Reporter protocol")
    return cls


def resolve_reporters(names: list[str]) -> list[Reporter]:
    """Instantiate the reporters named in the configuration, in order."""
    return [reporter_class(name)() for name in names]


__all__ = ["get_reporter_registry", "reporter", "reporter_class", "resolve_reporters"]
