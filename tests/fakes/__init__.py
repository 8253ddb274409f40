"""Fake implementations for testing."""

from tests.fakes.random_source_fake import FakeRandomSource, FixedRandomSource

__all__ = ["FakeRandomSource", "FixedRandomSource"]
