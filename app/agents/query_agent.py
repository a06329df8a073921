"""
Filter Extraction Agent
자연어 검색 문장에서 검색 조건 JSON을 추출합니다.
"""

from .base import BaseAgent
from app.config import settings
from app.llm.prompts import FILTER_EXTRACTION_SYSTEM_PROMPT


class FilterExtractionAgent(BaseAgent[str, str]):
    """
    검색 조건 추출 Agent

    LLM 응답 문자열을 그대로 반환합니다 (JSON 검증 없음).
    호출자마다 파싱 방식이 다르므로 해석은 호출자가 합니다.
    """

    name = "FilterExtractionAgent"
    system_prompt = FILTER_EXTRACTION_SYSTEM_PROMPT

    async def _process(self, free_text: str) -> str:
        self.logger.debug(f"Extracting filters ({len(free_text)} chars)")

        content = await self._complete(free_text, settings.FILTER_EXTRACTION_MAX_TOKENS)

        self.logger.info(f"Filters extracted: {content}")
        return content
