"""
자연어 검색/랭킹 스키마
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from .property import PropertyType, PropertyRead
from .feature import PropertyFeatureRead


# 매물 테이블에 직접 적용되는 조건 (후보 축소용)
# 범위 조건은 최소/최대 중 하나라도 있으면 1개로 계산
HARD_FILTER_GROUPS = (
    ("city",),
    ("neighborhood",),
    ("property_type",),
    ("min_price", "max_price"),
    ("min_area", "max_area"),
)

# 점수 계산에만 쓰이는 피처 조건 (후보 제외에 쓰이지 않음)
SOFT_FILTER_FIELDS = (
    "near_subway",
    "needs_renovation",
    "recommended_use",
    "estimated_capacity_people",
)


class QueryFilters(BaseModel):
    """
    자연어 한 건에서 추출한 검색 조건

    요청 1건 동안만 존재합니다.
    hard 조건은 후보 조회에, soft 조건은 점수 계산에만 사용됩니다.
    """

    # === hard ===
    city: Optional[str] = None
    neighborhood: Optional[str] = None
    # 알 수 없는 유형도 원문 그대로 정확히 일치 조건으로 적용
    property_type: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_area: Optional[float] = None
    max_area: Optional[float] = None

    # === soft ===
    near_subway: Optional[bool] = None
    needs_renovation: Optional[bool] = None
    recommended_use: Optional[PropertyType] = None
    estimated_capacity_people: Optional[int] = None

    @property
    def hard_filter_count(self) -> int:
        """설정된 hard 조건 개수 (점수 분모의 가중치)"""
        return sum(
            1
            for group in HARD_FILTER_GROUPS
            if any(getattr(self, name) is not None for name in group)
        )


class RankRequest(BaseModel):
    """자연어 랭킹 요청"""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "text": "Client is looking for an office near the subway, "
                        "budget up to $500k, for 15-20 people"
            }
        },
    )

    text: str = Field(min_length=1, description="원하는 매물을 설명하는 자연어")


class ScoredProperty(BaseModel):
    """랭킹 결과 1건 (저장되지 않음)"""
    property_id: str
    property: PropertyRead
    feature: Optional[PropertyFeatureRead] = None
    score: int = Field(ge=0, le=10, description="일치 점수 (0-10)")
    rank: Optional[int] = Field(default=None, description="순위")
