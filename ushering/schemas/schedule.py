from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, Field, validator

MassDayName = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
PositionType = Literal["usher", "prodiakon", "peta"]
EventTypeName = Literal["mass", "feast"]
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def _clean_required(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("Nama wajib diisi")
    return cleaned


def _clean_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class MassCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    code: Optional[str] = Field(None, max_length=50)
    day: MassDayName = "sunday"
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    briefing_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    sequence: Optional[int] = Field(None, ge=0)
    zone_ids: list[int] = Field(default_factory=list)

    @validator("name")
    def clean_name(cls, value: str) -> str:
        return _clean_required(value)

    @validator("code")
    def clean_code(cls, value: Optional[str]) -> Optional[str]:
        return _clean_optional(value)


class MassUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    code: Optional[str] = Field(None, max_length=50)
    day: Optional[MassDayName] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    briefing_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    sequence: Optional[int] = Field(None, ge=0)
    zone_ids: Optional[list[int]] = None


class MassOut(BaseModel):
    id: int
    church_id: int
    name: str
    code: Optional[str] = None
    day: str
    time: Optional[str] = None
    briefing_time: Optional[str] = None
    sequence: Optional[int] = None
    active: int
    zone_ids: list[int] = Field(default_factory=list)


class ZoneCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    sequence: Optional[int] = Field(None, ge=0)

    @validator("name")
    def clean_name(cls, value: str) -> str:
        return _clean_required(value)

    @validator("code", "description")
    def clean_optional(cls, value: Optional[str]) -> Optional[str]:
        return _clean_optional(value)


class ZoneUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    sequence: Optional[int] = Field(None, ge=0)


class PositionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    type: PositionType = "usher"
    code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    is_ppg: bool = False
    sequence: Optional[int] = Field(None, ge=1)

    @validator("name")
    def clean_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Nama posisi wajib diisi")
        return cleaned

    @validator("code", "description")
    def clean_optional(cls, value: Optional[str]) -> Optional[str]:
        return _clean_optional(value)


class PositionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    type: Optional[PositionType] = None
    code: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    is_ppg: Optional[bool] = None
    sequence: Optional[int] = Field(None, ge=1)
    zone_id: Optional[int] = None


class PositionOut(BaseModel):
    id: int
    zone_id: int
    name: str
    type: str
    code: Optional[str] = None
    description: Optional[str] = None
    is_ppg: bool
    sequence: Optional[int] = None
    active: int

    class Config:
        from_attributes = True


class ZoneOut(BaseModel):
    id: int
    church_id: int
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    sequence: Optional[int] = None
    active: int
    positions: list[PositionOut] = Field(default_factory=list)


class PositionOrderItem(BaseModel):
    id: int
    sequence: int = Field(..., ge=1)


class PositionReorder(BaseModel):
    items: list[PositionOrderItem] = Field(..., min_length=1)


class EventCreate(BaseModel):
    mass_id: int
    date: dt.date
    type: EventTypeName = "mass"
    code: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=500)
    week_number: Optional[int] = Field(None, ge=1, le=53)

    @validator("code")
    def clean_code(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Kode harus diisi")
        return cleaned

    @validator("description")
    def clean_description(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Nama harus diisi")
        return cleaned


class PrintedUsher(BaseModel):
    position: str
    sequence: int
    name: str
    wilayah: str
    lingkungan: str
    is_kolekte: bool
    is_ppg: bool


class PrintedSection(BaseModel):
    zone: str
    row_span: int
    ushers: list[PrintedUsher]


class PrintedSchedule(BaseModel):
    event_id: int
    church: str
    mass: str
    date: dt.date
    weekday: str
    time: Optional[str] = None
    briefing_time: Optional[str] = None
    ushers: list[PrintedSection]
    kolekte: list[PrintedSection]
    ppg: list[PrintedSection]
