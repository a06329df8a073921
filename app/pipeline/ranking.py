"""
Ranking Pipeline
자연어 검색 -> 조건 추출 -> 후보 조회 -> 점수화 순서를 제어합니다.
"""

from typing import Optional, Protocol, Sequence, Any

from loguru import logger

from app.agents.query_agent import FilterExtractionAgent
from app.domain.filters import QueryFilterParser
from app.domain.scoring import ScoringEngine
from app.llm import BaseLLMRunner
from app.schemas.ranking import QueryFilters, ScoredProperty


class CandidateStore(Protocol):
    """hard 조건으로 후보(피처 포함)를 조회하는 저장소"""

    async def find_candidates(self, filters: QueryFilters) -> Sequence[Any]:
        ...


class RankingPipeline:
    """
    랭킹 파이프라인

    [1] FilterExtractionAgent: 자연어 -> 필터 JSON 원문
    [2] QueryFilterParser: 원문 -> QueryFilters (파싱 실패 시 전체 중단)
    [3] CandidateStore: hard 조건으로 후보 조회
    [4] ScoringEngine: soft 조건으로 점수화 후 내림차순 정렬

    어느 단계든 실패하면 부분 결과 없이 예외를 그대로 전달합니다.
    """

    def __init__(
        self,
        store: CandidateStore,
        runner: Optional[BaseLLMRunner] = None,
        filter_agent: Optional[FilterExtractionAgent] = None,
    ):
        self.store = store
        self.filter_agent = filter_agent or FilterExtractionAgent(runner)
        self.parser = QueryFilterParser()
        self.scoring_engine = ScoringEngine()

        self.logger = logger.bind(component="RankingPipeline")

    async def rank(self, free_text: str) -> list[ScoredProperty]:
        """
        자연어로 매물 랭킹

        Returns:
            점수 내림차순 ScoredProperty 목록
        """
        self.logger.debug("Ranking properties based on the text")

        raw_filters = await self.filter_agent.run(free_text)
        filters = self.parser.parse(raw_filters)

        candidates = await self.store.find_candidates(filters)
        ranked = self.scoring_engine.rank(candidates, filters)

        self.logger.info(f"Ranked {len(ranked)} properties")
        return ranked
