"""
노트 스키마
사용자가 작성한 매물 메모의 요청/응답입니다.
AI 분석 결과(ai_output)는 응답에 노출하지 않습니다.
"""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict


class NoteCreate(BaseModel):
    """노트 생성 요청"""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "property_id": "a1b2c3d4-e5f6-4a5b-8c9d-0e1f2a3b4c5d",
                "note_text": "Two blocks from the subway, fits about 20 people.",
            }
        },
    )

    property_id: UUID
    note_text: str = Field(min_length=1, description="노트 본문")


class NoteRead(BaseModel):
    """노트 응답"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    property_id: str
    user_id: str
    note_text: str
    created_at: datetime
    updated_at: datetime
