"""S3 Control sweepers."""

from __future__ import annotations

from .sweep import register_sweepers

__all__ = ["register_sweepers"]
