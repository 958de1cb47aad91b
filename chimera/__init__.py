"""Primitives, transforms, batch hashing, fabric topology and memory, SHA-256 and in-process messaging."""

__version__ = "0.1.0b1"