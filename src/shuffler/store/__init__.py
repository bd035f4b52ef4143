from __future__ import annotations

from .kvstore import Value, decode_value, encode_value, load, save

__all__ = ["Value", "decode_value", "encode_value", "load", "save"]
