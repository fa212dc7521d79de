"""Persistence helpers for docmap outputs."""

from .snapshot import SnapshotStore

__all__ = ["SnapshotStore"]
