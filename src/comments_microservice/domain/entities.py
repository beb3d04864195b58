"""Entity definitions.

Entities mirror their table rows one field per column. They are only created
and changed through a contract logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class CommentEntity:
    """A stored comment.

    Attributes:
        id: Store-assigned identifier.
        unique_identity: Key of the resource the comment is attached to.
        text: Comment body.
        parent_id: Identifier of the comment this one replies to, if any.
        creation_date_time: UTC time of creation.
        modification_date_time: UTC time of the last update, if any.
    """

    id: int
    unique_identity: str
    text: str
    creation_date_time: datetime
    parent_id: int | None = None
    modification_date_time: datetime | None = None
