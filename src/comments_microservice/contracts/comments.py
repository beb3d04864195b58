"""Comment contracts.

``AddCommentContract`` and ``UpdateCommentContract`` are consumed once by the
contract logic; ``CommentContract`` is what callers get back.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .unsettable import UNSET, Unsettable


@dataclass(frozen=True, slots=True)
class AddCommentContract:
    """Fields a caller may set when creating a comment."""

    unique_identity: str
    text: str
    parent_id: int | None = None


@dataclass(frozen=True, slots=True)
class UpdateCommentContract:
    """Identifier of the comment plus the fields to change.

    Fields left as ``UNSET`` keep their stored values.
    """

    id: int
    unique_identity: Unsettable[str] = UNSET
    text: Unsettable[str] = UNSET
    parent_id: Unsettable[int] = UNSET


@dataclass(frozen=True, slots=True)
class CommentContract:
    """Read projection of a stored comment."""

    id: int
    unique_identity: str
    text: str
    creation_date_time: datetime
    parent_id: int | None = None
    modification_date_time: datetime | None = None

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    @property
    def is_edited(self) -> bool:
        return self.modification_date_time is not None
