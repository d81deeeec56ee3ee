"""Small helpers shared by the vendor stream translators."""

from .payload import attr_or_key, to_plain

__all__ = ["attr_or_key", "to_plain"]
