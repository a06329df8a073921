"""
Note Processing Pipeline
노트 생성 이후의 후속 처리를 담당합니다.

    노트 생성 -> LLM 분석 -> ai_output 저장 -> 매물 피처 전체 재집계

요청과 분리되어 백그라운드에서 실행되므로,
모든 오류는 여기서 로그만 남기고 다시 던지지 않습니다.
"""

from typing import Optional

from loguru import logger

from app.agents.note_agent import NoteAnalysisAgent
from app.db.database import Database
from app.db.repositories import NoteRepository, FeatureRepository
from app.domain.aggregation import aggregate_ai_outputs
from app.errors import NotFound
from app.llm import BaseLLMRunner
from app.schemas.feature import AggregatedFeature, NoteExtraction


class NoteProcessingPipeline:
    """
    노트 처리 파이프라인

    분석에 성공한 노트 1건마다 해당 매물의 피처를 정확히 1번 재계산합니다.
    같은 매물의 노트가 동시에 처리되면 마지막 쓰기가 남습니다 (잠금 없음).
    """

    def __init__(
        self,
        database: Database,
        runner: Optional[BaseLLMRunner] = None,
        note_agent: Optional[NoteAnalysisAgent] = None,
    ):
        self.database = database
        self.note_agent = note_agent or NoteAnalysisAgent(runner)
        self.logger = logger.bind(component="NoteProcessing")

    async def process_note(self, note_id: str) -> Optional[AggregatedFeature]:
        """
        노트 1건 분석 후 피처 재집계

        Returns:
            갱신된 피처 (실패하거나 갱신하지 않았으면 None)
        """
        try:
            async with self.database.session() as session:
                note = await NoteRepository(session).get(note_id)
                note_text = note.note_text
                property_id = note.property_id

            # LLM 호출 중에는 세션을 잡고 있지 않음
            extraction = await self.note_agent.run(note_text)

            async with self.database.session() as session:
                await NoteRepository(session).save_ai_output(note_id, extraction)

        except NotFound:
            self.logger.warning(f"Note not found: {note_id}")
            return None
        except Exception as e:
            self.logger.error(f"Failed to process note: {note_id} ({e})")
            return None

        self.logger.info(f"Note processed successfully: {note_id}")
        return await self.refresh_features(property_id)

    async def refresh_features(self, property_id: str) -> Optional[AggregatedFeature]:
        """
        매물의 모든 노트 분석 결과로 피처를 다시 계산해 저장

        분석된 노트가 하나도 없으면 저장하지 않습니다.
        """
        try:
            async with self.database.session() as session:
                notes = await NoteRepository(session).list_for_aggregation(property_id)
                outputs = [
                    NoteExtraction.model_validate(note.ai_output)
                    for note in notes
                    if note.ai_output is not None
                ]

                if not outputs:
                    self.logger.warning(f"No AI outputs found for property: {property_id}")
                    return None

                aggregated = aggregate_ai_outputs(outputs)
                await FeatureRepository(session).upsert(property_id, aggregated)

        except Exception as e:
            self.logger.error(
                f"Failed to update property feature for property: {property_id} ({e})"
            )
            return None

        self.logger.info(
            f"Property feature updated for property: {property_id} "
            f"(notes={len(outputs)})"
        )
        return aggregated
