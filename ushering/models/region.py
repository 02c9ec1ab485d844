from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ushering.core.db import Base


class Wilayah(Base):
    __tablename__ = "wilayahs"

    id = Column(Integer, primary_key=True)
    church_id = Column(Integer, ForeignKey("churches.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    code = Column(String(50), nullable=True)
    sequence = Column(Integer, nullable=True)
    active = Column(Integer, nullable=False, default=1)

    lingkungans = relationship(
        "Lingkungan",
        back_populates="wilayah",
        cascade="all, delete-orphan",
        order_by="Lingkungan.sequence",
    )


class Lingkungan(Base):
    __tablename__ = "lingkungans"

    id = Column(Integer, primary_key=True)
    church_id = Column(Integer, ForeignKey("churches.id", ondelete="CASCADE"), nullable=False, index=True)
    wilayah_id = Column(Integer, ForeignKey("wilayahs.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    sequence = Column(Integer, nullable=True)
    active = Column(Integer, nullable=False, default=1)

    wilayah = relationship("Wilayah", back_populates="lingkungans")
