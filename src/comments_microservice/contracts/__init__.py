"""Request/response contracts exposed to the serving layer."""

from .comments import AddCommentContract, CommentContract, UpdateCommentContract
from .unsettable import UNSET, Unsettable

__all__ = [
    "AddCommentContract",
    "CommentContract",
    "UpdateCommentContract",
    "UNSET",
    "Unsettable",
]
