"""Configuration objects and helpers for wax9conv.

Settings can come from a small YAML file (``converter:`` block or flat keys)
and are overridden by command-line flags. The resulting
:class:`~wax9conv.config.runtime.ConverterConfig` is the single source of
truth for the pipeline.
"""

from .runtime import ConverterConfig, config_from_mapping, load_config, resolve_timezone

__all__ = ["ConverterConfig", "config_from_mapping", "load_config", "resolve_timezone"]
