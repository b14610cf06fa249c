"""Configuration loaded from ``pyproject.toml`` and ``EXPECTA_*`` variables."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from expecta.errors import ConfigError
from expecta.reports.registry import reporter_class

logger = logging.getLogger(__name__)

ENV_PREFIX = "EXPECTA_"


class ExpectaConfig(BaseModel):
    """Settings for checkpoints and the pytest plugin.

    Attributes
    ----------
    announce_pass: bool
        Print "`expect` test passed." to stderr when a checkpoint passes
    include_location: bool
        Append ``(file:line)`` to every line of the failure report
    reporters: list[str]
        Reporter registry names or ``module:Class`` import strings
    auto_checkpoint: bool
        Let the pytest plugin checkpoint pending failures after each test
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    announce_pass: bool = False
    include_location: bool = False
    reporters: list[str] = Field(default_factory=list)
    auto_checkpoint: bool = True

    @field_validator("reporters", mode="before")
    @classmethod
    def _split_reporters(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    @field_validator("reporters")
    @classmethod
    def _known_reporters(cls, names: list[str]) -> list[str]:
        for name in names:
            try:
                reporter_class(name)
            except TypeError as exc:
                raise ValueError(str(exc)) from exc
        return names


def find_pyproject(start: Path | None = None) -> Path | None:
    """Return the nearest ``pyproject.toml`` at or above ``start``."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _read_tool_table(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Could not parse {path}: {exc}") from exc
    table = data.get("tool", {}).get("expecta", {})
    return {key.replace("-", "_"): value for key, value in table.items()}


def _env_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for field_name in ExpectaConfig.model_fields:
        value = environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if value is not None:
            overrides[field_name] = value
    return overrides


def load_config(
    start: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ExpectaConfig:
    """Load settings; environment variables win over ``[tool.expecta]``."""
    path = find_pyproject(start)
    data: dict[str, Any] = _read_tool_table(path) if path else {}
    data.update(_env_overrides(os.environ if environ is None else environ))

    try:
        config = ExpectaConfig.model_validate(data)
    except ValidationError as exc:
        where = f" in {path}" if path else ""
        raise ConfigError(f"Invalid expecta configuration{where}:\n{exc}") from exc

    logger.debug("Loaded expecta configuration from %s: %r", path or "defaults", config)
    return config


_config: ExpectaConfig | None = None


def get_config() -> ExpectaConfig:
    """Process-wide configuration, loaded on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: ExpectaConfig | None) -> None:
    """Replace the process-wide configuration; ``None`` reloads on next use."""
    global _config
    _config = config
