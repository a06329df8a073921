"""
PropNotes 테스트 - Pipeline
"""

import pytest
import sys
sys.path.insert(0, ".")

from app.db import FeatureRepository, NoteRepository, PropertyRepository
from app.errors import MalformedResponse, NotFound, TransportError
from app.llm import FILTER_EXTRACTION_SYSTEM_PROMPT, NOTE_ANALYSIS_SYSTEM_PROMPT
from app.pipeline import NoteProcessingPipeline, RankingPipeline
from app.schemas import AggregatedFeature, PropertyCreate, PropertyType
from tests.fakes import FakeRunner

NYC_OFFICE = PropertyCreate(
    title="Modern Downtown Office Space",
    city="New York",
    neighborhood="Midtown Manhattan",
    price=450000,
    area_m2=250,
    property_type=PropertyType.OFFICE,
)

FULL_FILTER_JSON = (
    '{"city": "New York", "neighborhood": null, "propertyType": null, '
    '"minPrice": null, "maxPrice": 500000, "minArea": null, "maxArea": null, '
    '"nearSubway": true, "needsRenovation": false, '
    '"estimatedCapacityPeople": 20, "recommendedUse": "office"}'
)


async def create_property(database, data=NYC_OFFICE, feature=None):
    async with database.session() as session:
        prop = await PropertyRepository(session).create(data)
        if feature is not None:
            await FeatureRepository(session).upsert(prop.id, feature)
        return prop.id


async def rank(database, runner, text="office near subway in NYC"):
    async with database.session() as session:
        pipeline = RankingPipeline(PropertyRepository(session), runner)
        return await pipeline.rank(text)


class TestRankingPipeline:
    """자연어 랭킹 파이프라인 테스트"""

    def test_full_match(self, run_with_db):
        """hard 2 + soft 4 모두 일치 -> 10점"""
        feature = AggregatedFeature(
            near_subway=True,
            needs_renovation=False,
            estimated_capacity_people=20,
            recommended_use=PropertyType.OFFICE,
        )
        runner = FakeRunner(FULL_FILTER_JSON)

        async def scenario(database):
            await create_property(database, feature=feature)
            return await rank(database, runner)

        result = run_with_db(scenario)

        assert [r.score for r in result] == [10]
        assert runner.calls[0][0] == FILTER_EXTRACTION_SYSTEM_PROMPT

    def test_partial_match(self, run_with_db):
        """soft 2개 불일치 -> 7점"""
        feature = AggregatedFeature(
            near_subway=False,
            needs_renovation=True,
            estimated_capacity_people=20,
            recommended_use=PropertyType.OFFICE,
        )

        async def scenario(database):
            await create_property(database, feature=feature)
            return await rank(database, FakeRunner(FULL_FILTER_JSON))

        assert [r.score for r in run_with_db(scenario)] == [7]

    def test_hard_filters_only(self, run_with_db):
        """피처 없는 매물 + hard 조건만 -> 10점"""
        runner = FakeRunner(
            '{"city": "New York", "maxPrice": 500000, "nearSubway": null, '
            '"needsRenovation": null, "estimatedCapacityPeople": null, "recommendedUse": null}'
        )

        async def scenario(database):
            await create_property(database)
            return await rank(database, runner)

        result = run_with_db(scenario)

        assert result[0].score == 10
        assert result[0].feature is None

    def test_hard_filters_exclude_candidates(self, run_with_db):
        """hard 조건에 맞지 않는 매물은 결과에 없음"""
        expensive = NYC_OFFICE.model_copy(update={"title": "Pricey Office", "price": 900000})

        async def scenario(database):
            await create_property(database)
            await create_property(database, data=expensive)
            return await rank(database, FakeRunner('{"maxPrice": 500000}'))

        result = run_with_db(scenario)

        assert [r.property.title for r in result] == ["Modern Downtown Office Space"]

    def test_area_range_filters_candidates(self, run_with_db):
        """최소/최대 면적은 각각 경계 조건으로 적용되고 점수에는 1개로 반영"""
        small = NYC_OFFICE.model_copy(update={"title": "Small Office", "area_m2": 120})
        feature = AggregatedFeature(near_subway=False, needs_renovation=False)

        async def scenario(database):
            roomy = NYC_OFFICE.model_copy(update={"area_m2": 200})
            await create_property(database, data=roomy, feature=feature)
            await create_property(database, data=small)
            return await rank(
                database, FakeRunner('{"minArea": 180, "maxArea": 220, "nearSubway": true}')
            )

        result = run_with_db(scenario)

        assert [r.property.title for r in result] == ["Modern Downtown Office Space"]
        assert result[0].score == 7

    def test_unknown_property_type_matches_nothing(self, run_with_db):
        async def scenario(database):
            await create_property(database)
            return await rank(database, FakeRunner('{"propertyType": "castle"}'))

        assert run_with_db(scenario) == []

    def test_property_type_is_case_insensitive(self, run_with_db):
        async def scenario(database):
            await create_property(database)
            return await rank(database, FakeRunner(
                '{"propertyType": "Office", "nearSubway": null, "needsRenovation": null}'
            ))

        assert [r.score for r in run_with_db(scenario)] == [10]

    def test_malformed_filters_abort(self, run_with_db):
        async def scenario(database):
            await create_property(database)
            return await rank(database, FakeRunner("office please"))

        with pytest.raises(MalformedResponse):
            run_with_db(scenario)

    def test_transport_error_propagates(self, run_with_db):
        async def scenario(database):
            return await rank(database, FakeRunner(TransportError("LLM request failed")))

        with pytest.raises(TransportError):
            run_with_db(scenario)


class TestNoteProcessingPipeline:
    """노트 처리 파이프라인 테스트"""

    def test_note_updates_feature(self, run_with_db):
        runner = FakeRunner(
            '{"nearSubway": true, "needsRenovation": false, '
            '"estimatedCapacityPeople": 20, "recommendedUse": "retail"}'
        )

        async def scenario(database):
            prop_id = await create_property(database)
            async with database.session() as session:
                note = await NoteRepository(session).create(prop_id, "user-1", "Near metro")

            pipeline = NoteProcessingPipeline(database, runner)
            aggregated = await pipeline.process_note(note.id)

            async with database.session() as session:
                stored = await FeatureRepository(session).get_by_property(prop_id)
                saved_note = await NoteRepository(session).get(note.id)
                return aggregated, stored, saved_note.ai_output

        aggregated, stored, ai_output = run_with_db(scenario)

        assert aggregated.recommended_use == PropertyType.RETAIL
        assert stored.near_subway is True
        assert stored.estimated_capacity_people == 20
        assert stored.recommended_use == "retail"
        assert ai_output["recommended_use"] == "retail"
        assert runner.calls[0][0] == NOTE_ANALYSIS_SYSTEM_PROMPT

    def test_recomputes_from_all_notes(self, run_with_db):
        """노트마다 전체 노트로 재집계 (동률이면 최신 노트)"""
        runner = FakeRunner(
            '{"nearSubway": true, "estimatedCapacityPeople": 10, "recommendedUse": "office"}',
            '{"nearSubway": false, "estimatedCapacityPeople": 11, "recommendedUse": "warehouse"}',
        )

        async def scenario(database):
            prop_id = await create_property(database)
            pipeline = NoteProcessingPipeline(database, runner)

            for text in ("first visit", "second visit"):
                async with database.session() as session:
                    note = await NoteRepository(session).create(prop_id, "user-1", text)
                await pipeline.process_note(note.id)

            async with database.session() as session:
                return await FeatureRepository(session).get_by_property(prop_id)

        stored = run_with_db(scenario)

        assert stored.near_subway is False
        assert stored.estimated_capacity_people == 11
        assert stored.recommended_use == "warehouse"

    def test_failure_is_logged_not_raised(self, run_with_db):
        """분석 실패는 삼키고 기존 피처를 그대로 둠"""
        runner = FakeRunner("definitely not json")
        previous = AggregatedFeature(near_subway=True, estimated_capacity_people=5)

        async def scenario(database):
            prop_id = await create_property(database, feature=previous)
            async with database.session() as session:
                note = await NoteRepository(session).create(prop_id, "user-1", "text")

            result = await NoteProcessingPipeline(database, runner).process_note(note.id)

            async with database.session() as session:
                stored = await FeatureRepository(session).get_by_property(prop_id)
                saved_note = await NoteRepository(session).get(note.id)
                return result, stored, saved_note.ai_output

        result, stored, ai_output = run_with_db(scenario)

        assert result is None
        assert stored.near_subway is True
        assert stored.estimated_capacity_people == 5
        assert ai_output is None

    def test_missing_note(self, run_with_db):
        async def scenario(database):
            pipeline = NoteProcessingPipeline(database, FakeRunner())
            return await pipeline.process_note("00000000-0000-0000-0000-000000000000")

        assert run_with_db(scenario) is None

    def test_refresh_without_outputs_writes_nothing(self, run_with_db):
        async def scenario(database):
            prop_id = await create_property(database)
            async with database.session() as session:
                await NoteRepository(session).create(prop_id, "user-1", "not analyzed yet")

            result = await NoteProcessingPipeline(database, FakeRunner()).refresh_features(prop_id)

            async with database.session() as session:
                try:
                    await FeatureRepository(session).get_by_property(prop_id)
                    found = True
                except NotFound:
                    found = False
            return result, found

        assert run_with_db(scenario) == (None, False)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
