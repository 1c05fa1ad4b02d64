"""
Fake implementations for testing swiftfs without a live object store.

These fakes subclass the actual storage protocols to ensure interface
changes break CI immediately.
"""
from .fake_swift import FakeContainer, FakeObjectStorage, FakeSessionFactory

__all__ = ["FakeContainer", "FakeObjectStorage", "FakeSessionFactory"]
