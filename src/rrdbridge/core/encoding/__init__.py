"""Encoders for engine command syntax."""

from rrdbridge.core.encoding.command import format_value, join, to_epoch

__all__ = ["format_value", "join", "to_epoch"]
