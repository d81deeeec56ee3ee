"""Mock handler package exposing deterministic fixtures for tests."""

from .client import MockHandler, event_from_dict, load_fixture_catalog

__all__ = ["MockHandler", "event_from_dict", "load_fixture_catalog"]
