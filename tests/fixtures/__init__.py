"""Test fixtures package."""

from .fake_mysql import FakeIntrospector, FakeConnection, FakeCursor

__all__ = [
    "FakeIntrospector",
    "FakeConnection",
    "FakeCursor",
]
