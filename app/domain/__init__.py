"""
PropNotes 도메인 로직 패키지
응답 정규화, 피처 집계, 검색 조건 해석, 점수화 로직을 담당합니다.
LLM과 DB는 이 레이어에 관여하지 않습니다.
"""

from .normalizer import normalize, normalize_payload, parse_property_type
from .aggregation import (
    round_half_up,
    majority_vote_boolean,
    majority_vote_enum,
    calculate_average,
    aggregate_ai_outputs,
)
from .filters import QueryFilterParser, parse_query_filters
from .scoring import ScoringEngine

__all__ = [
    "normalize",
    "normalize_payload",
    "parse_property_type",
    "round_half_up",
    "majority_vote_boolean",
    "majority_vote_enum",
    "calculate_average",
    "aggregate_ai_outputs",
    "QueryFilterParser",
    "parse_query_filters",
    "ScoringEngine",
]
