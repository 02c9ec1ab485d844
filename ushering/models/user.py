from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ushering.core.db import Base

UserRole = Enum("admin", "user", name="user_role")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    role = Column(UserRole, nullable=False, default="user")
    church_id = Column(Integer, ForeignKey("churches.id", ondelete="CASCADE"), nullable=False, index=True)
    lingkungan_id = Column(Integer, ForeignKey("lingkungans.id", ondelete="SET NULL"), nullable=True)
    active = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    church = relationship("Church")
    lingkungan = relationship("Lingkungan")

    @property
    def is_active(self) -> bool:
        return self.active == 1
