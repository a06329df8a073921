"""
피처 집계
노트별 AI 분석 결과 여러 건을 매물 단위 피처 1건으로 합칩니다.

- bool 필드: 다수결, 동률이면 가장 최근 노트의 값
- 추천 용도: 최빈값, 동률이면 가장 최근 노트의 값 (동률 후보에 있을 때)
- 수용 인원: 평균 후 반올림 (0.5는 올림)
"""

import math
from typing import Hashable, Optional, Sequence, TypeVar

from app.schemas.property import PropertyType
from app.schemas.feature import NoteExtraction, AggregatedFeature

T = TypeVar("T", bound=Hashable)

# 노트가 하나도 없을 때의 기본값 ("데이터 없음" 표식이 아님)
DEFAULT_FEATURE = AggregatedFeature(
    near_subway=False,
    needs_renovation=False,
    estimated_capacity_people=0,
    recommended_use=PropertyType.OFFICE,
)


def round_half_up(value: float) -> int:
    """0.5를 양의 무한대 방향으로 올리는 반올림 (10.5 -> 11)"""
    return int(math.floor(value + 0.5))


def majority_vote_boolean(values: Sequence[bool], tiebreaker: bool) -> bool:
    """bool 다수결. 동률이거나 값이 없으면 tiebreaker"""
    if not values:
        return tiebreaker

    true_count = sum(1 for v in values if v is True)
    false_count = len(values) - true_count

    if true_count > false_count:
        return True
    if false_count > true_count:
        return False
    return tiebreaker


def majority_vote_enum(values: Sequence[T], tiebreaker: T) -> T:
    """
    범주형 다수결

    최다 득표가 여럿이면 tiebreaker가 그 안에 있을 때 tiebreaker,
    아니면 집계 중 먼저 등장한 값을 반환합니다.
    """
    if not values:
        return tiebreaker

    counts: dict[T, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1

    max_count = 0
    winners: list[T] = []
    for value, count in counts.items():
        if count > max_count:
            max_count = count
            winners = [value]
        elif count == max_count:
            winners.append(value)

    if len(winners) == 1:
        return winners[0]
    if tiebreaker in winners:
        return tiebreaker
    return winners[0]


def calculate_average(values: Sequence[float]) -> int:
    """산술 평균 후 반올림. 값이 없으면 0"""
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def aggregate_ai_outputs(outputs: Sequence[NoteExtraction]) -> AggregatedFeature:
    """
    노트 분석 결과들을 하나의 피처로 집계

    Args:
        outputs: 노트 생성 순서(오래된 것 먼저)로 정렬된 분석 결과.
            마지막 원소를 최신 노트로 간주하며 재정렬하지 않습니다.

    Returns:
        AggregatedFeature: 모든 필드가 채워진 집계 결과
    """
    if not outputs:
        return DEFAULT_FEATURE.model_copy()

    latest = outputs[-1]

    # 미설정 bool은 False 표로 계산
    near_subway = [bool(o.near_subway) for o in outputs]
    needs_renovation = [bool(o.needs_renovation) for o in outputs]
    uses: list[Optional[PropertyType]] = [o.recommended_use for o in outputs]

    recommended_use = majority_vote_enum(uses, latest.recommended_use)

    return AggregatedFeature(
        near_subway=majority_vote_boolean(near_subway, bool(latest.near_subway)),
        needs_renovation=majority_vote_boolean(
            needs_renovation, bool(latest.needs_renovation)
        ),
        estimated_capacity_people=calculate_average(
            [o.estimated_capacity_people for o in outputs]
        ),
        recommended_use=recommended_use or DEFAULT_FEATURE.recommended_use,
    )
