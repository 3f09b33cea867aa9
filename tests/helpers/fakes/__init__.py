"""Fake implementations for external boundary clients used in tests."""

from .mongo import FakeAsyncMongoClient, FakeMongoServer

__all__ = [
    "FakeAsyncMongoClient",
    "FakeMongoServer",
]
