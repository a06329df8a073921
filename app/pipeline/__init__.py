"""
파이프라인 패키지
Agent, 도메인 엔진, 저장소의 실행 순서를 제어합니다.
"""

from .ranking import RankingPipeline, CandidateStore
from .note_processing import NoteProcessingPipeline

__all__ = ["RankingPipeline", "CandidateStore", "NoteProcessingPipeline"]
