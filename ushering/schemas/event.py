from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel


class EventOut(BaseModel):
    id: int
    church_id: int
    mass_id: int
    mass: Optional[str] = None
    date: dt.date
    week_number: Optional[int] = None
    is_complete: int
    active: int = 1
    type: str
    code: Optional[str] = None
    description: Optional[str] = None
    created_at: dt.datetime


class EventListResponse(BaseModel):
    items: list[EventOut]
    total: int
