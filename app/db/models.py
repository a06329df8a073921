"""
ORM 모델
매물 / 노트 / 피처 테이블을 정의합니다.
모든 테이블은 deleted_at 기반 소프트 삭제를 사용합니다.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """모든 모델의 기본 클래스"""
    pass


class TimestampMixin:
    """created_at / updated_at / deleted_at 컬럼"""
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class Property(TimestampMixin, Base):
    """매물"""
    __tablename__ = "properties"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    neighborhood = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    area_m2 = Column(Float, nullable=False)
    property_type = Column(String(100), nullable=False, index=True)

    feature = relationship(
        "PropertyFeature",
        back_populates="property",
        uselist=False,
        lazy="raise",
    )

    def __repr__(self):
        return f"<Property(id={self.id}, title='{self.title}', city='{self.city}')>"


class PropertyNote(TimestampMixin, Base):
    """매물 노트 (AI 분석 결과 포함)"""
    __tablename__ = "property_notes"

    id = Column(String(36), primary_key=True, default=new_id)
    property_id = Column(String(36), ForeignKey("properties.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False)
    note_text = Column(Text, nullable=False)
    # 정규화된 NoteExtraction (미분석이면 NULL)
    ai_output = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<PropertyNote(id={self.id}, property_id={self.property_id})>"


class PropertyFeature(TimestampMixin, Base):
    """매물 단위 집계 피처 (매물당 최대 1건)"""
    __tablename__ = "property_features"

    id = Column(String(36), primary_key=True, default=new_id)
    property_id = Column(
        String(36), ForeignKey("properties.id"), nullable=False, unique=True
    )
    near_subway = Column(Boolean, nullable=False, default=False)
    needs_renovation = Column(Boolean, nullable=False, default=False)
    estimated_capacity_people = Column(Integer, nullable=True)
    recommended_use = Column(String(100), nullable=True)

    property = relationship("Property", back_populates="feature", lazy="raise")

    def __repr__(self):
        return f"<PropertyFeature(id={self.id}, property_id={self.property_id})>"
