"""
Note Analysis Agent
노트 본문을 LLM으로 분석해 구조화된 피처를 추출합니다.
"""

from .base import BaseAgent
from app.config import settings
from app.llm.prompts import NOTE_ANALYSIS_SYSTEM_PROMPT
from app.schemas.feature import NoteExtraction
from app.domain.normalizer import normalize


class NoteAnalysisAgent(BaseAgent[str, NoteExtraction]):
    """
    노트 분석 Agent

    LLM 원문 응답은 Response Normalizer를 거쳐
    타입이 확정된 NoteExtraction으로만 반환됩니다.
    """

    name = "NoteAnalysisAgent"
    system_prompt = NOTE_ANALYSIS_SYSTEM_PROMPT

    async def _process(self, note_text: str) -> NoteExtraction:
        self.logger.debug(f"Analyzing note ({len(note_text)} chars)")

        content = await self._complete(note_text, settings.NOTE_ANALYSIS_MAX_TOKENS)
        extraction = normalize(content)

        self.logger.info(f"Note analyzed: {extraction.model_dump(mode='json')}")
        return extraction
