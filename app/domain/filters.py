"""
검색 조건 파서
자연어에서 추출된 필터 JSON을 QueryFilters로 변환합니다.
"""

from typing import Any, Callable, Optional
from loguru import logger

from app.schemas.ranking import QueryFilters
from .normalizer import (
    parse_json_object,
    parse_property_type,
    coerce_number,
    normalize_payload,
)


class QueryFilterParser:
    """
    필터 JSON 파서

    hard 조건은 값이 비어 있지 않을 때만 설정되고,
    soft 조건은 Response Normalizer와 같은 규칙으로 해석됩니다.
    """

    def __init__(self):
        # hard 파서 레지스트리: JSON 키 -> (QueryFilters 필드명, 변환함수)
        self._hard_parsers: dict[str, tuple[str, Callable[[Any], Any]]] = {
            "city": ("city", self._parse_text),
            "neighborhood": ("neighborhood", self._parse_text),
            "propertyType": ("property_type", self._parse_property_type),
            "minPrice": ("min_price", self._parse_number),
            "maxPrice": ("max_price", self._parse_number),
            "minArea": ("min_area", self._parse_number),
            "maxArea": ("max_area", self._parse_number),
        }

    def parse(self, raw_json: str) -> QueryFilters:
        """
        필터 JSON 파싱

        Raises:
            MalformedResponse: JSON 파싱 실패 (부분 결과 없음)
        """
        payload = parse_json_object(raw_json)

        values: dict[str, Any] = {}
        for key, (field_name, parse_func) in self._hard_parsers.items():
            parsed = parse_func(payload.get(key))
            if parsed is not None:
                values[field_name] = parsed

        expected = normalize_payload(payload)
        values.update(
            near_subway=expected.near_subway,
            needs_renovation=expected.needs_renovation,
            recommended_use=expected.recommended_use,
            estimated_capacity_people=expected.estimated_capacity_people,
        )

        filters = QueryFilters(**values)
        logger.debug(
            f"Parsed query filters: hard={filters.hard_filter_count} "
            f"{filters.model_dump(exclude_none=True)}"
        )
        return filters

    # === 개별 변환 함수들 ===

    def _parse_text(self, value: Any) -> Optional[str]:
        if not value:
            return None
        text = str(value).strip()
        return text or None

    def _parse_property_type(self, value: Any) -> Optional[str]:
        # 알려진 유형은 대소문자 무시로 정규화, 모르는 값은 원문 그대로 적용
        text = self._parse_text(value)
        if text is None:
            return None
        parsed = parse_property_type(text)
        if parsed is None:
            logger.warning(f"Unknown propertyType applied as-is: {text!r}")
            return text
        return parsed.value

    def _parse_number(self, value: Any) -> Optional[float]:
        # 0과 숫자가 아닌 값은 조건 없음으로 취급
        number = coerce_number(value)
        return number if number else None


def parse_query_filters(raw_json: str) -> QueryFilters:
    """QueryFilterParser 단축 함수"""
    return QueryFilterParser().parse(raw_json)
