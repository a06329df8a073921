"""
응답 정규화기
LLM이 돌려준 느슨한 JSON을 엄격한 NoteExtraction으로 변환합니다.
"""

import json
import math
from typing import Any, Optional

from loguru import logger

from app.errors import MalformedResponse
from app.schemas.property import PropertyType
from app.schemas.feature import NoteExtraction
from .aggregation import round_half_up

# 키가 아예 없는 경우와 null인 경우를 구분하기 위한 표식
_MISSING = object()


def parse_json_object(raw_json: str) -> dict[str, Any]:
    """
    JSON 문자열을 dict로 파싱

    Raises:
        MalformedResponse: JSON이 아니거나 최상위가 객체가 아닌 경우
    """
    try:
        parsed = json.loads(raw_json)
    except (TypeError, ValueError) as e:
        logger.warning(f"AI 응답 JSON 파싱 실패: {str(raw_json)[:100]}")
        raise MalformedResponse(
            "AI response is not valid JSON",
            details={"raw": str(raw_json)[:200], "error": str(e)},
        ) from e

    if not isinstance(parsed, dict):
        raise MalformedResponse(
            "AI response is not a JSON object",
            details={"raw": str(raw_json)[:200]},
        )
    return parsed


def parse_property_type(value: Any) -> Optional[PropertyType]:
    """대소문자 구분 없이 PropertyType 매칭, 실패 시 None"""
    if not value:
        return None
    normalized = str(value).strip().lower()
    for member in PropertyType:
        if member.value == normalized:
            return member
    return None


def coerce_number(value: Any) -> float:
    """숫자 변환. null/빈 값/숫자가 아닌 값은 0"""
    if value is None or value is _MISSING:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0

    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _coerce_optional_bool(value: Any) -> Optional[bool]:
    # null만 미설정으로 취급. 문자열 "false"도 truthy 규칙에 따라 True가 됨
    if value is None:
        return None
    if value is _MISSING:
        return False
    return bool(value)


def normalize_payload(payload: dict[str, Any]) -> NoteExtraction:
    """이미 파싱된 dict를 NoteExtraction으로 변환"""
    capacity = round_half_up(coerce_number(payload.get("estimatedCapacityPeople")))

    return NoteExtraction(
        near_subway=_coerce_optional_bool(payload.get("nearSubway", _MISSING)),
        needs_renovation=_coerce_optional_bool(
            payload.get("needsRenovation", _MISSING)
        ),
        estimated_capacity_people=max(capacity, 0),
        recommended_use=parse_property_type(payload.get("recommendedUse")),
    )


def normalize(raw_json: str) -> NoteExtraction:
    """
    AI 원문 응답 정규화

    Args:
        raw_json: LLM이 반환한 JSON 문자열

    Returns:
        NoteExtraction: 타입이 확정된 분석 결과

    Raises:
        MalformedResponse: JSON 파싱 실패
    """
    return normalize_payload(parse_json_object(raw_json))
