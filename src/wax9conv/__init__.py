"""Convert WAX9 motion-sensor binary streams into mHealth CSV files."""

from .config import ConverterConfig, load_config
from .core.pipeline import convert_file, convert_stream
from .errors import (
    MetadataError,
    MissingMetadataError,
    PacketError,
    PacketSizeMismatch,
    UnrecognizedPacketFormat,
    UnsupportedRangeError,
    Wax9Error,
)

__version__ = "0.1.0"

__all__ = [
    "ConverterConfig",
    "load_config",
    "convert_file",
    "convert_stream",
    "Wax9Error",
    "MissingMetadataError",
    "MetadataError",
    "PacketError",
    "PacketSizeMismatch",
    "UnrecognizedPacketFormat",
    "UnsupportedRangeError",
]
