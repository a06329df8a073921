"""
PropNotes Agent 패키지
각 Agent는 LLM 호출 하나를 담당하며, 정해진 입출력 스키마를 따릅니다.
"""

from .base import BaseAgent
from .note_agent import NoteAnalysisAgent
from .query_agent import FilterExtractionAgent

__all__ = [
    "BaseAgent",
    "NoteAnalysisAgent",
    "FilterExtractionAgent",
]
