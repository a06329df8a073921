"""
AI 피처 스키마

- NoteExtraction: 노트 1건에 대한 AI 분석 결과 (일부 필드 미설정 가능)
- AggregatedFeature: 매물 단위로 집계된 최종 피처 (모든 필드 확정)
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from .property import PropertyType


class NoteExtraction(BaseModel):
    """
    노트 분석 결과

    Response Normalizer의 출력입니다.
    None은 "AI가 값을 주지 않음"을 의미하며 False와 구분됩니다.
    """
    near_subway: Optional[bool] = None
    needs_renovation: Optional[bool] = None
    estimated_capacity_people: int = Field(default=0, ge=0)
    recommended_use: Optional[PropertyType] = None


class AggregatedFeature(BaseModel):
    """매물 단위 집계 피처"""
    near_subway: bool = False
    needs_renovation: bool = False
    estimated_capacity_people: int = Field(default=0, ge=0)
    recommended_use: PropertyType = PropertyType.OFFICE


class PropertyFeatureCreate(BaseModel):
    """피처 직접 생성 요청"""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "property_id": "a1b2c3d4-e5f6-4a5b-8c9d-0e1f2a3b4c5d",
                "near_subway": True,
                "needs_renovation": False,
                "estimated_capacity_people": 25,
                "recommended_use": "office",
            }
        }
    )

    property_id: str
    near_subway: bool = False
    needs_renovation: bool = False
    estimated_capacity_people: Optional[int] = Field(default=None, ge=0)
    recommended_use: Optional[PropertyType] = None


class PropertyFeatureRead(BaseModel):
    """피처 응답"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    property_id: str
    near_subway: bool
    needs_renovation: bool
    estimated_capacity_people: Optional[int] = None
    recommended_use: Optional[PropertyType] = None
    created_at: datetime
    updated_at: datetime
