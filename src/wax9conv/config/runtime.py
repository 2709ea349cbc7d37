"""Runtime configuration for the converter."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def resolve_timezone(name: str) -> tzinfo:
    """Return ``timezone.utc`` for UTC, otherwise the named IANA zone."""
    if name.strip().upper() in {"UTC", "Z", "GMT"}:
        return timezone.utc
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone {name!r}") from exc


@dataclass(slots=True)
class ConverterConfig:
    """
    Knobs for how a WAX9 stream is written out.

    ``timezone`` is the clock used both for row/file timestamps and for
    detecting hour boundaries when ``split_by_hour`` is on.
    """

    split_by_hour: bool = False
    timezone: str = "UTC"

    device_tag: str = "WAX9"
    sensor_tag: str = "ACCEL"

    # Frames between debug progress messages
    progress_every: int = 1000
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @property
    def tzinfo(self) -> tzinfo:
        return resolve_timezone(self.timezone)

    def sanitized(self) -> ConverterConfig:
        """Return a copy with derived limits applied."""
        return ConverterConfig(
            split_by_hour=bool(self.split_by_hour),
            timezone=str(self.timezone or "UTC").strip(),
            device_tag=str(self.device_tag).strip() or "WAX9",
            sensor_tag=str(self.sensor_tag).strip() or "ACCEL",
            progress_every=max(1, int(self.progress_every)),
            chunk_size=max(1, int(self.chunk_size)),
        )

    def with_overrides(self, **overrides: Any) -> ConverterConfig:
        """Return a copy with non-``None`` *overrides* applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes).sanitized()


SECTION = "converter"

_SPLIT_VALUES = {"split": True, "no_split": False, "true": True, "false": False}


def _split_flag(value: Any) -> bool:
    """Accept a YAML boolean or the CLI words ``split`` / ``no_split``."""
    if isinstance(value, bool):
        return value
    key = str(value).strip().lower()
    if key not in _SPLIT_VALUES:
        raise ValueError(f"split_by_hour must be true/false or split/no_split, got {value!r}")
    return _SPLIT_VALUES[key]


def config_from_mapping(data: Mapping[str, Any] | None, source: str = "<mapping>") -> ConverterConfig:
    """
    Build :class:`ConverterConfig` from the ``converter`` section of *data*.

    A document without that section is read from its root. Unknown keys are
    logged and skipped; an unknown ``timezone`` raises ``ValueError`` here
    rather than when the first row is written.
    """
    if not data:
        return ConverterConfig()
    section = data.get(SECTION, data)
    if not isinstance(section, Mapping):
        raise ValueError(f"{source}: '{SECTION}' must be a mapping, got {type(section).__name__}")

    known = {f.name for f in fields(ConverterConfig)}
    unknown = sorted(str(key) for key in section if key not in known and key != SECTION)
    if unknown:
        logger.warning("%s: ignoring unknown config keys %s", source, ", ".join(unknown))

    payload = {key: section[key] for key in known if section.get(key) is not None}
    if "split_by_hour" in payload:
        payload["split_by_hour"] = _split_flag(payload["split_by_hour"])
    cfg = ConverterConfig(**payload).sanitized()
    try:
        resolve_timezone(cfg.timezone)
    except ValueError as exc:
        raise ValueError(f"{source}: {exc}") from exc
    return cfg


def load_config(path: str | Path | None) -> ConverterConfig:
    """
    Read a YAML config file.

    ``None`` or a path that does not exist yields the defaults. Malformed
    YAML and invalid values raise ``ValueError`` naming the file.
    """
    if path is None:
        return ConverterConfig()
    cfg_path = Path(path)
    if not cfg_path.is_file():
        logger.info("No config file at %s; using defaults", cfg_path)
        return ConverterConfig()
    try:
        raw = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"{cfg_path}: invalid YAML ({exc})") from exc
    if raw is None:
        return ConverterConfig()
    if not isinstance(raw, Mapping):
        raise ValueError(f"{cfg_path}: expected a mapping, got {type(raw).__name__}")
    return config_from_mapping(raw, source=str(cfg_path))


__all__ = ["ConverterConfig", "config_from_mapping", "load_config", "resolve_timezone"]
