from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, validator


class UsherEntry(BaseModel):
    # Names are checked verbatim by the usher name rules, so no trimming here.
    name: str
    is_ppg: bool = False
    is_kolekte: bool = False


class UsherNamesPayload(BaseModel):
    ushers: list[UsherEntry]


class UsherSubmission(BaseModel):
    mass_id: int
    wilayah_id: int
    lingkungan_id: int
    ushers: list[UsherEntry]

    @validator("ushers")
    def ensure_ushers(cls, value: list[UsherEntry]) -> list[UsherEntry]:
        if not value:
            raise ValueError("Mohon lengkapi semua isian.")
        return value


class ValidationResultOut(BaseModel):
    is_valid: bool
    error: Optional[str] = None

    class Config:
        from_attributes = True


class EventUsherOut(BaseModel):
    id: int
    event_id: int
    name: str
    wilayah_id: int
    lingkungan_id: int
    position_id: Optional[int] = None
    position: Optional[str] = None
    zone: Optional[str] = None
    is_ppg: bool
    is_kolekte: bool
    sequence: Optional[int] = None
    created_at: datetime


class UsherSubmissionResponse(BaseModel):
    event_id: int
    event_date: date
    require_ppg: bool
    ushers: list[EventUsherOut]
