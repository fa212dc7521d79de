"""Helpers that prepare assembled records for rendering."""

from .links import LinkResolver, RelatedGroup, RelatedLink

__all__ = ["LinkResolver", "RelatedGroup", "RelatedLink"]
