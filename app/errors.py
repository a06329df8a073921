"""
PropNotes 예외 정의

도메인/협력자 오류를 구분하기 위한 예외 계층입니다.
HTTP 상태 코드 매핑은 app.api.main의 핸들러가 담당합니다.
"""

from typing import Any, Optional


class PropNotesError(Exception):
    """PropNotes 기본 예외"""

    error_code: str = "PROPNOTES_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class MalformedResponse(PropNotesError):
    """AI 응답이 올바른 JSON 객체가 아닌 경우"""

    error_code = "MALFORMED_RESPONSE"


class EmptyCompletion(PropNotesError):
    """LLM이 내용 없는 응답을 반환한 경우"""

    error_code = "EMPTY_COMPLETION"


class TransportError(PropNotesError):
    """LLM 호출 실패 (네트워크, HTTP 오류, 모델 미로딩)"""

    error_code = "TRANSPORT_ERROR"


class NotFound(PropNotesError):
    """매물/노트/피처 ID를 찾을 수 없는 경우"""

    error_code = "RESOURCE_NOT_FOUND"


class Conflict(PropNotesError):
    """이미 피처가 존재하는 매물에 다시 생성하려는 경우"""

    error_code = "CONFLICT"
