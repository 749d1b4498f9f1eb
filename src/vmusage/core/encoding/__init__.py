"""Output encoders."""

from vmusage.core.encoding.ndjson import encode_records

__all__ = ["encode_records"]
