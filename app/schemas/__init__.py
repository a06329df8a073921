"""
PropNotes 스키마 패키지
API 입출력과 도메인 레코드의 pydantic 모델을 정의합니다.
"""

from .property import (
    PropertyType,
    PropertyCreate,
    PropertyUpdate,
    PropertyFilter,
    PropertyRead,
)
from .feature import (
    NoteExtraction,
    AggregatedFeature,
    PropertyFeatureCreate,
    PropertyFeatureRead,
)
from .note import NoteCreate, NoteRead
from .ranking import QueryFilters, RankRequest, ScoredProperty

__all__ = [
    "PropertyType",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyFilter",
    "PropertyRead",
    "NoteExtraction",
    "AggregatedFeature",
    "PropertyFeatureCreate",
    "PropertyFeatureRead",
    "NoteCreate",
    "NoteRead",
    "QueryFilters",
    "RankRequest",
    "ScoredProperty",
]
