"""Persisted entity shapes."""

from .entities import CommentEntity

__all__ = ["CommentEntity"]
