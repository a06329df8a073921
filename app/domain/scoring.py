"""
점수화 엔진
검색 조건 대비 후보 매물의 일치 점수(0-10)를 계산합니다.
"""

from typing import Any, Sequence
from loguru import logger

from app.schemas.property import PropertyRead
from app.schemas.feature import PropertyFeatureRead
from app.schemas.ranking import QueryFilters, ScoredProperty, SOFT_FILTER_FIELDS
from .aggregation import round_half_up


class ScoringEngine:
    """
    규칙 기반 점수화 엔진

    - hard 조건: 후보 조회 단계에서 이미 걸러졌으므로 개수만큼 무조건 일치로 계산
    - soft 조건: 후보의 피처 값과 기대값이 같을 때만 1점
    - 점수 = round(일치 수 / 전체 조건 수 * 10), 조건이 없으면 0
    """

    MAX_SCORE = 10

    def relevant_soft_fields(self, filters: QueryFilters) -> dict[str, Any]:
        """
        점수에 반영할 soft 조건

        수용 인원은 0보다 클 때만 실제 조건으로 봅니다.
        """
        relevant = {}
        for name in SOFT_FILTER_FIELDS:
            value = getattr(filters, name)
            if value is None:
                continue
            if name == "estimated_capacity_people" and value <= 0:
                continue
            relevant[name] = value
        return relevant

    def score(
        self,
        feature: Any,
        hard_filter_count: int,
        relevant: dict[str, Any],
    ) -> int:
        """
        후보 1건 점수 계산

        Args:
            feature: 후보의 피처 레코드 (없으면 None)
            hard_filter_count: 적용된 hard 조건 수
            relevant: relevant_soft_fields() 결과
        """
        total_fields = hard_filter_count + len(relevant)
        if total_fields == 0:
            return 0

        match_count = hard_filter_count
        if feature is not None:
            for name, expected in relevant.items():
                if getattr(feature, name, None) == expected:
                    match_count += 1

        return round_half_up(match_count / total_fields * self.MAX_SCORE)

    def rank(
        self,
        candidates: Sequence[Any],
        filters: QueryFilters,
    ) -> list[ScoredProperty]:
        """
        후보 목록 점수화 및 정렬

        점수 내림차순, 동점이면 조회 순서를 유지합니다 (안정 정렬).
        """
        hard_filter_count = filters.hard_filter_count
        relevant = self.relevant_soft_fields(filters)

        scored = []
        for candidate in candidates:
            feature = getattr(candidate, "feature", None)
            score = self.score(feature, hard_filter_count, relevant)
            scored.append(
                ScoredProperty(
                    property_id=candidate.id,
                    property=PropertyRead.model_validate(candidate),
                    feature=(
                        PropertyFeatureRead.model_validate(feature)
                        if feature is not None
                        else None
                    ),
                    score=score,
                )
            )

        scored.sort(key=lambda s: s.score, reverse=True)
        for i, item in enumerate(scored, start=1):
            item.rank = i

        logger.debug(
            f"Scored {len(scored)} candidates "
            f"(hard={hard_filter_count}, soft={list(relevant)})"
        )
        return scored
