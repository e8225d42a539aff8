"""Configuration for tagtree tools."""

from .config import CodecConfig, GzipMode

__all__ = ["CodecConfig", "GzipMode"]
