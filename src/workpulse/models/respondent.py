"""Input records: survey responses and respondent profiles supplied by the store."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from workpulse.utils.hashing import hash_snapshot


class RawResponseRecord(BaseModel):
    """One respondent's raw survey answers.

    Answers are kept as delivered (no coercion) so the score calculator can
    tell a missing or malformed answer from a genuine zero.
    """

    model_config = ConfigDict(frozen=True)

    respondent_id: str
    answers: dict[int, Any] = Field(default_factory=dict, description="Item number (1-12) -> answer")
    responded_at: datetime

    @field_validator("answers", mode="before")
    @classmethod
    def _normalize_item_keys(cls, value: Any) -> Any:
        # The store emits "q1".."q12", "1".."12" or plain ints depending on the query
        if not isinstance(value, dict):
            return value
        normalized: dict[int, Any] = {}
        for key, answer in value.items():
            if isinstance(key, str):
                stripped = key.strip().lower().removeprefix("q")
                if not stripped.isdigit():
                    raise ValueError(f"Unrecognized item key '{key}'")
                key = int(stripped)
            normalized[key] = answer
        return normalized


class RespondentProfile(BaseModel):
    """Organizational and behavioral attributes of one respondent."""

    model_config = ConfigDict(frozen=True)

    respondent_id: str
    department: str | None = None
    role: str | None = None
    shift: str | None = None
    gender: str | None = None
    age: int | None = Field(None, ge=0)
    tenure_years: float | None = Field(None, ge=0)
    contract_type: str | None = None
    education_level: str | None = None
    uses_protective_equipment: bool | None = None
    had_prior_incident: bool | None = None
    management_confidence: float | None = None
    job_satisfaction: float | None = None
    motivation: float | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)


class SnapshotEntry(BaseModel):
    """A response record paired with its owner's profile."""

    model_config = ConfigDict(frozen=True)

    record: RawResponseRecord
    profile: RespondentProfile

    @model_validator(mode="after")
    def _check_owner(self) -> SnapshotEntry:
        if self.record.respondent_id != self.profile.respondent_id:
            raise ValueError(
                f"Record respondent '{self.record.respondent_id}' does not match "
                f"profile '{self.profile.respondent_id}'"
            )
        return self


class Snapshot(BaseModel):
    """Immutable input set for one analytics pass."""

    model_config = ConfigDict(frozen=True)

    entries: list[SnapshotEntry] = Field(default_factory=list)
    version: str = Field("", description="Opaque store version, used by caller-side caches")

    @classmethod
    def from_pairs(
        cls,
        pairs: list[tuple[RawResponseRecord, RespondentProfile]],
        version: str = "",
    ) -> Snapshot:
        """Build a snapshot from (record, profile) pairs."""
        return cls(
            entries=[SnapshotEntry(record=r, profile=p) for r, p in pairs],
            version=version,
        )

    def fingerprint(self) -> str:
        """Content hash of the snapshot, independent of entry order."""
        return hash_snapshot(self)

    def __len__(self) -> int:
        return len(self.entries)
