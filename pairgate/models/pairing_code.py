"""Pairing code record.

Short-lived, single-use codes binding a generated code to a phone number.
Persisted in the ``pairs`` collection as an ordered JSON array.
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PairingCode(BaseModel):
    """A pairing code as stored on disk.

    ACTIVE while unused and before ``expires``; CONSUMED once ``used`` is
    set; EXPIRED is never stored, it is computed from the clock.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    code: str
    number: str
    created: datetime
    expires: datetime
    used: bool = False
    used_at: datetime | None = Field(default=None, alias="usedAt")

    @field_validator("created", "expires", "used_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Treat naive timestamps as UTC so they compare with aware clocks."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def is_active(self, now: datetime) -> bool:
        return not self.used and now < self.expires

    def to_record(self) -> dict:
        """Serialize with the on-disk field names (``usedAt`` only once used)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
