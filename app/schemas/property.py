"""
매물 스키마
매물 CRUD 요청/응답을 구조화합니다.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class PropertyType(str, Enum):
    """매물 유형 (AI 추천 용도와 같은 값 집합을 사용)"""
    OFFICE = "office"
    WAREHOUSE = "warehouse"
    RETAIL = "retail"


class PropertyCreate(BaseModel):
    """매물 생성 요청"""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "title": "Modern Downtown Office Space",
                "city": "New York",
                "neighborhood": "Midtown Manhattan",
                "price": 850000.0,
                "area_m2": 250.0,
                "property_type": "office",
            }
        },
    )

    title: str = Field(min_length=3, max_length=200, description="매물 제목")
    city: str = Field(min_length=1, max_length=100, description="도시")
    neighborhood: str = Field(min_length=1, max_length=100, description="지역/동네")
    price: float = Field(ge=0, description="가격")
    area_m2: float = Field(ge=0, description="면적 (㎡)")
    property_type: PropertyType = Field(description="매물 유형")


class PropertyUpdate(BaseModel):
    """매물 부분 수정 요청 (입력된 필드만 반영)"""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=3, max_length=200)
    city: Optional[str] = Field(default=None, min_length=1, max_length=100)
    neighborhood: Optional[str] = Field(default=None, min_length=1, max_length=100)
    price: Optional[float] = Field(default=None, ge=0)
    area_m2: Optional[float] = Field(default=None, ge=0)
    property_type: Optional[PropertyType] = None


class PropertyFilter(BaseModel):
    """
    매물 목록 조회 필터

    매물 필드 조건과 AI 피처 조건을 모두 지원합니다.
    피처 조건이 하나라도 있으면 피처가 없는 매물은 제외됩니다.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    # === 매물 조건 ===
    city: Optional[str] = Field(default=None, examples=["New York"])
    neighborhood: Optional[str] = Field(default=None, examples=["Manhattan"])
    property_type: Optional[PropertyType] = None
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    min_area: Optional[float] = Field(default=None, ge=0)
    max_area: Optional[float] = Field(default=None, ge=0)

    # === 피처 조건 ===
    near_subway: Optional[bool] = None
    needs_renovation: Optional[bool] = None
    recommended_use: Optional[PropertyType] = None


class PropertyRead(BaseModel):
    """매물 응답"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    city: str
    neighborhood: str
    price: float
    area_m2: float
    property_type: PropertyType
    created_at: datetime
    updated_at: datetime
