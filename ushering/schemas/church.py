from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class ChurchOut(BaseModel):
    id: int
    code: str
    name: str
    parish: Optional[str] = None
    require_ppg: Optional[int] = None
    active: int
    created_at: datetime

    class Config:
        from_attributes = True


class ChurchPpgUpdate(BaseModel):
    require_ppg: Literal[0, 1]


class PpgRequirementOut(BaseModel):
    church_id: int
    church_code: str
    require_ppg: bool
