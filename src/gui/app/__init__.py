"""Application layer: bootstrap and context object."""

from .bootstrap import AppContext, create_application  # noqa: F401

__all__ = ["AppContext", "create_application"]
