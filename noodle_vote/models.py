from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import AwareDatetime, BaseModel, Field


class VoteChoice(str, Enum):
    JJAJANG = "jjajang"
    JJAMPPONG = "jjamppong"


CHOICES = frozenset(c.value for c in VoteChoice)


def is_valid_choice(value) -> bool:
    """
    Exact match against the two menu items: case-sensitive, no trimming.
    """
    return isinstance(value, str) and value in CHOICES


class Tally(BaseModel):
    """
    One persisted row per choice: running count + last mutation time.
    """
    choice: VoteChoice
    count: int = Field(..., ge=0)
    updated_at: AwareDatetime


class VoteResult(BaseModel):
    jjajang: int
    jjamppong: int
    total: int
    updated_at: datetime = Field(..., serialization_alias="updatedAt")


class ResultFailure(VoteResult):
    """
    Zeroed result returned alongside a 500, so callers always get a parsable body.
    """
    error: str


class VoteAck(BaseModel):
    ok: bool = True


class VoteRejected(BaseModel):
    ok: bool = False
    message: str
    remaining_seconds: Optional[int] = Field(None, serialization_alias="remainingSeconds")
    cooldown_ms: Optional[int] = Field(None, serialization_alias="cooldownMs")


class VoteAccepted(BaseModel):
    """
    Outcome of an accepted vote. `marker` is the new cooldown cookie value.
    """
    choice: VoteChoice
    marker: str
