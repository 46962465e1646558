from __future__ import annotations


class InvalidInput(ValueError):
    """Field, row or style data that cannot produce a well-defined layout."""


class RenderFailure(RuntimeError):
    """The document engine could not place or write the composed layout."""
