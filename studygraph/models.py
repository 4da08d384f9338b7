from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class InteractionType(Enum):
    MESSAGE = "message"
    STUDY_SESSION = "study_session"
    CONNECTION = "connection"


def _require_user_id(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("user id must not be blank")
    return v


class UserAttributes(BaseModel):
    """Snapshot of the preferences used for content-based scoring."""

    model_config = ConfigDict(frozen=True)

    id: str
    subjects: frozenset[str] = Field(default_factory=frozenset)
    interests: frozenset[str] = Field(default_factory=frozenset)
    skill_level: str | None = None  # exact-match label, e.g. "INTERMEDIATE"
    study_style: str | None = None  # exact-match label, e.g. "COLLABORATIVE"

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        return _require_user_id(v)

    @field_validator("skill_level", "study_style")
    @classmethod
    def blank_label_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class InteractionEvent(BaseModel):
    """Directed signal from source toward target."""

    model_config = ConfigDict(frozen=True)

    source_user_id: str
    target_user_id: str
    interaction_type: InteractionType
    timestamp: datetime
    weight: float | None = None  # explicit override of the per-kind weight

    @field_validator("source_user_id", "target_user_id")
    @classmethod
    def validate_user_ids(cls, v: str) -> str:
        return _require_user_id(v)

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class ConnectionPair(BaseModel):
    """Accepted connection between two users, as stored by the persistence layer."""

    model_config = ConfigDict(frozen=True)

    source_user_id: str = Field(validation_alias=AliasChoices("source_user_id", "sourceUserId"))
    target_user_id: str = Field(validation_alias=AliasChoices("target_user_id", "targetUserId"))

    @field_validator("source_user_id", "target_user_id")
    @classmethod
    def validate_user_ids(cls, v: str) -> str:
        return _require_user_id(v)

    @property
    def is_self_loop(self) -> bool:
        return self.source_user_id == self.target_user_id


class RecommendationCandidate(BaseModel):
    user_id: str
    score: float


class FriendOfFriend(BaseModel):
    user_id: str
    mutual_count: int = Field(ge=1)


class GraphStats(BaseModel):
    total_users: int
    total_connections: int
    avg_connections_per_user: float
    max_connections: int
    min_connections: int


class PartnerRecommendation(BaseModel):
    """Final ranked partner suggestion with the signals that produced it."""

    user_id: str
    score: float = Field(ge=0, le=100)
    content_score: float
    collaborative_score: float = 0.0  # normalized to [0, 100]
    mutual_connections: int = 0
    quality_label: str
