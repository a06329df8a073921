"""
PropNotes 테스트 - 저장소
인메모리 SQLite(aiosqlite)로 실행합니다.
"""

import pytest
import sys
sys.path.insert(0, ".")

from app.db import FeatureRepository, NoteRepository, PropertyRepository
from app.errors import Conflict, NotFound
from app.schemas import (
    AggregatedFeature,
    NoteExtraction,
    PropertyCreate,
    PropertyFeatureCreate,
    PropertyFilter,
    PropertyType,
    PropertyUpdate,
    QueryFilters,
)


def office(title="Modern Downtown Office Space", city="New York", price=850000, area=250):
    return PropertyCreate(
        title=title,
        city=city,
        neighborhood="Midtown Manhattan",
        price=price,
        area_m2=area,
        property_type=PropertyType.OFFICE,
    )


class TestPropertyRepository:
    """매물 저장소 테스트"""

    def test_create_and_get(self, run_with_db):
        async def scenario(database):
            async with database.session() as session:
                repo = PropertyRepository(session)
                created = await repo.create(office())
                fetched = await repo.get(created.id)
                return created, fetched

        created, fetched = run_with_db(scenario)

        assert fetched.id == created.id
        assert fetched.property_type == "office"
        assert len(created.id) == 36

    def test_get_missing(self, run_with_db):
        async def scenario(database):
            async with database.session() as session:
                await PropertyRepository(session).get("00000000-0000-0000-0000-000000000000")

        with pytest.raises(NotFound):
            run_with_db(scenario)

    def test_list_filters(self, run_with_db):
        """도시는 부분 일치(대소문자 무시), 가격은 경계 포함"""
        async def scenario(database):
            async with database.session() as session:
                repo = PropertyRepository(session)
                await repo.create(office(title="Cheap Office", price=500000))
                await repo.create(office(title="Pricey Office", price=900000))
                await repo.create(office(title="Chicago Office", city="Chicago", price=500000))

                by_city = await repo.list_all(PropertyFilter(city="new york"))
                by_price = await repo.list_all(PropertyFilter(max_price=500000))
                return [p.title for p in by_city], [p.title for p in by_price]

        by_city, by_price = run_with_db(scenario)

        assert by_city == ["Cheap Office", "Pricey Office"]
        assert by_price == ["Cheap Office", "Chicago Office"]

    def test_list_feature_filter_requires_feature(self, run_with_db):
        async def scenario(database):
            async with database.session() as session:
                repo = PropertyRepository(session)
                with_feature = await repo.create(office(title="Subway Office"))
                await repo.create(office(title="Unknown Office"))
                await FeatureRepository(session).create(
                    PropertyFeatureCreate(property_id=with_feature.id, near_subway=True)
                )
                result = await repo.list_all(PropertyFilter(near_subway=True))
                return [p.title for p in result]

        assert run_with_db(scenario) == ["Subway Office"]

    def test_find_candidates_loads_feature(self, run_with_db):
        async def scenario(database):
            async with database.session() as session:
                repo = PropertyRepository(session)
                prop = await repo.create(office())
                await repo.create(office(title="Warehouse-ish", city="Chicago"))
                await FeatureRepository(session).upsert(prop.id, AggregatedFeature(near_subway=True))

            async with database.session() as session:
                candidates = await PropertyRepository(session).find_candidates(
                    QueryFilters(city="York", near_subway=False)
                )
                return [(c.title, c.feature.near_subway) for c in candidates]

        assert run_with_db(scenario) == [("Modern Downtown Office Space", True)]

    def test_update_only_given_fields(self, run_with_db):
        async def scenario(database):
            async with database.session() as session:
                repo = PropertyRepository(session)
                prop = await repo.create(office())
                return await repo.update(prop.id, PropertyUpdate(price=700000))

        updated = run_with_db(scenario)

        assert updated.price == 700000
        assert updated.title == "Modern Downtown Office Space"

    def test_soft_delete_cascades(self, run_with_db):
        async def scenario(database):
            async with database.session() as session:
                repo = PropertyRepository(session)
                prop = await repo.create(office())
                note = await NoteRepository(session).create(prop.id, "user-1", "Near the subway")
                await FeatureRepository(session).upsert(prop.id, AggregatedFeature())

                await repo.delete(prop.id)

                results = {"count": await repo.count()}
                for name, call in (
                    ("property", repo.get(prop.id)),
                    ("note", NoteRepository(session).get(note.id)),
                    ("feature", FeatureRepository(session).get_by_property(prop.id)),
                ):
                    try:
                        await call
                        results[name] = "found"
                    except NotFound:
                        results[name] = "not found"
                return results

        results = run_with_db(scenario)

        assert results == {
            "count": 0,
            "property": "not found",
            "note": "not found",
            "feature": "not found",
        }


class TestNoteRepository:
    """노트 저장소 테스트"""

    def test_create_requires_property(self, run_with_db):
        async def scenario(database):
            async with database.session() as session:
                await NoteRepository(session).create(
                    "00000000-0000-0000-0000-000000000000", "user-1", "text"
                )

        with pytest.raises(NotFound):
            run_with_db(scenario)

    def test_ordering_and_ai_output(self, run_with_db):
        async def scenario(database):
            async with database.session() as session:
                prop = await PropertyRepository(session).create(office())
                notes = NoteRepository(session)
                first = await notes.create(prop.id, "user-1", "first")
                await notes.create(prop.id, "user-1", "second")
                await notes.save_ai_output(
                    first.id,
                    NoteExtraction(near_subway=True, recommended_use=PropertyType.RETAIL),
                )

                newest_first = [n.note_text for n in await notes.list_by_property(prop.id)]
                oldest_first = await notes.list_for_aggregation(prop.id)
                return newest_first, [(n.note_text, n.ai_output) for n in oldest_first]

        newest_first, oldest_first = run_with_db(scenario)

        assert newest_first == ["second", "first"]
        assert oldest_first[0] == (
            "first",
            {
                "near_subway": True,
                "needs_renovation": None,
                "estimated_capacity_people": 0,
                "recommended_use": "retail",
            },
        )
        assert oldest_first[1] == ("second", None)


class TestFeatureRepository:
    """피처 저장소 테스트"""

    def test_duplicate_create_conflicts(self, run_with_db):
        async def scenario(database):
            async with database.session() as session:
                prop = await PropertyRepository(session).create(office())
                features = FeatureRepository(session)
                await features.create(PropertyFeatureCreate(property_id=prop.id))
                await features.create(PropertyFeatureCreate(property_id=prop.id, near_subway=True))

        with pytest.raises(Conflict):
            run_with_db(scenario)

    def test_upsert_replaces(self, run_with_db):
        async def scenario(database):
            async with database.session() as session:
                prop = await PropertyRepository(session).create(office())
                features = FeatureRepository(session)
                first = await features.upsert(prop.id, AggregatedFeature(near_subway=True))
                second = await features.upsert(
                    prop.id,
                    AggregatedFeature(
                        near_subway=False,
                        estimated_capacity_people=30,
                        recommended_use=PropertyType.WAREHOUSE,
                    ),
                )
                stored = await features.get_by_property(prop.id)
                return first.id, second.id, stored

        first_id, second_id, stored = run_with_db(scenario)

        assert first_id == second_id
        assert stored.near_subway is False
        assert stored.estimated_capacity_people == 30
        assert stored.recommended_use == "warehouse"

    def test_get_missing(self, run_with_db):
        async def scenario(database):
            async with database.session() as session:
                await FeatureRepository(session).get("00000000-0000-0000-0000-000000000000")

        with pytest.raises(NotFound):
            run_with_db(scenario)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
