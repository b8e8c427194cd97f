"""In-memory entity store and interner."""

from .project import Project

__all__ = ["Project"]
