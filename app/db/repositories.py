"""
저장소 (Repository)

각 저장소는 테이블 하나를 담당하며, 쓰기 작업은 즉시 커밋합니다.
소프트 삭제된 행은 모든 조회에서 제외됩니다.
"""

from typing import Optional

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import Conflict, NotFound
from app.schemas.property import PropertyCreate, PropertyUpdate, PropertyFilter, PropertyType
from app.schemas.feature import (
    AggregatedFeature,
    NoteExtraction,
    PropertyFeatureCreate,
)
from app.schemas.ranking import QueryFilters
from .models import Property, PropertyNote, PropertyFeature, utcnow


class BaseRepository:
    """저장소 기본 클래스"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.logger = logger.bind(component=type(self).__name__)


def _apply_property_filters(query, filters):
    """매물 필드 조건 (부분 문자열은 대소문자 무시, 범위는 경계 포함)"""
    if filters.city:
        query = query.where(Property.city.ilike(f"%{filters.city}%"))
    if filters.neighborhood:
        query = query.where(Property.neighborhood.ilike(f"%{filters.neighborhood}%"))
    if filters.property_type is not None:
        property_type = filters.property_type
        if isinstance(property_type, PropertyType):
            property_type = property_type.value
        query = query.where(Property.property_type == property_type)
    if filters.min_price is not None:
        query = query.where(Property.price >= filters.min_price)
    if filters.max_price is not None:
        query = query.where(Property.price <= filters.max_price)
    if filters.min_area is not None:
        query = query.where(Property.area_m2 >= filters.min_area)
    if filters.max_area is not None:
        query = query.where(Property.area_m2 <= filters.max_area)
    return query


class PropertyRepository(BaseRepository):
    """매물 저장소"""

    async def create(self, data: PropertyCreate) -> Property:
        self.logger.debug(f"Creating property: {data.title}")

        prop = Property(**data.model_dump(mode="json"))
        self.session.add(prop)
        await self.session.commit()

        self.logger.info(f"Property created: id={prop.id} title={prop.title}")
        return prop

    async def get(self, property_id: str) -> Property:
        """
        매물 조회

        Raises:
            NotFound: 없거나 삭제된 매물
        """
        result = await self.session.execute(
            select(Property).where(
                Property.id == property_id,
                Property.deleted_at.is_(None),
            )
        )
        prop = result.scalar_one_or_none()

        if prop is None:
            self.logger.warning(f"Property not found: {property_id}")
            raise NotFound("Property not found", details={"property_id": property_id})
        return prop

    async def list_all(self, filters: Optional[PropertyFilter] = None) -> list[Property]:
        """매물 목록 (매물 조건 + 피처 조건)"""
        filters = filters or PropertyFilter()
        self.logger.debug(f"Listing properties: {filters.model_dump(exclude_none=True)}")

        query = select(Property).where(Property.deleted_at.is_(None))
        query = _apply_property_filters(query, filters)

        feature_conditions = []
        if filters.near_subway is not None:
            feature_conditions.append(PropertyFeature.near_subway == filters.near_subway)
        if filters.needs_renovation is not None:
            feature_conditions.append(
                PropertyFeature.needs_renovation == filters.needs_renovation
            )
        if filters.recommended_use is not None:
            feature_conditions.append(
                PropertyFeature.recommended_use == filters.recommended_use.value
            )

        if feature_conditions:
            query = query.join(
                PropertyFeature, PropertyFeature.property_id == Property.id
            ).where(PropertyFeature.deleted_at.is_(None), *feature_conditions)

        result = await self.session.execute(query.order_by(Property.created_at))
        properties = list(result.scalars().all())

        self.logger.info(f"Found {len(properties)} properties")
        return properties

    async def find_candidates(self, filters: QueryFilters) -> list[Property]:
        """
        랭킹 후보 조회

        hard 조건만 적용하고 피처를 함께 로드합니다 (피처가 없을 수 있음).
        """
        query = (
            select(Property)
            .where(Property.deleted_at.is_(None))
            .options(selectinload(Property.feature))
        )
        query = _apply_property_filters(query, filters)

        result = await self.session.execute(query.order_by(Property.created_at))
        candidates = list(result.scalars().all())

        self.logger.info(f"Found {len(candidates)} ranking candidates")
        return candidates

    async def update(self, property_id: str, data: PropertyUpdate) -> Property:
        """입력된 필드만 수정"""
        self.logger.debug(f"Updating property: {property_id}")

        prop = await self.get(property_id)
        for key, value in data.model_dump(mode="json", exclude_unset=True).items():
            if value is not None:
                setattr(prop, key, value)
        prop.updated_at = utcnow()
        await self.session.commit()

        self.logger.info(f"Property updated: id={property_id}")
        return prop

    async def delete(self, property_id: str) -> None:
        """매물 소프트 삭제 (노트와 피처도 함께 삭제)"""
        self.logger.debug(f"Soft deleting property: {property_id}")

        prop = await self.get(property_id)
        now = utcnow()
        prop.deleted_at = now

        await self.session.execute(
            update(PropertyNote)
            .where(
                PropertyNote.property_id == property_id,
                PropertyNote.deleted_at.is_(None),
            )
            .values(deleted_at=now)
        )
        await self.session.execute(
            update(PropertyFeature)
            .where(
                PropertyFeature.property_id == property_id,
                PropertyFeature.deleted_at.is_(None),
            )
            .values(deleted_at=now)
        )
        await self.session.commit()

        self.logger.info(f"Property soft deleted: id={property_id}")

    async def count(self) -> int:
        result = await self.session.execute(
            select(Property.id).where(Property.deleted_at.is_(None))
        )
        return len(result.all())


class NoteRepository(BaseRepository):
    """노트 저장소"""

    async def create(self, property_id: str, user_id: str, note_text: str) -> PropertyNote:
        """
        노트 생성

        Raises:
            NotFound: 매물이 없는 경우
        """
        self.logger.debug(f"Creating note for property: {property_id}")

        await PropertyRepository(self.session).get(property_id)

        note = PropertyNote(
            property_id=property_id,
            user_id=user_id,
            note_text=note_text,
        )
        self.session.add(note)
        await self.session.commit()

        self.logger.info(f"Property note created: id={note.id}")
        return note

    async def get(self, note_id: str) -> PropertyNote:
        result = await self.session.execute(
            select(PropertyNote).where(
                PropertyNote.id == note_id,
                PropertyNote.deleted_at.is_(None),
            )
        )
        note = result.scalar_one_or_none()

        if note is None:
            self.logger.warning(f"Property note not found: {note_id}")
            raise NotFound("Note not found", details={"note_id": note_id})
        return note

    async def list_by_property(self, property_id: str) -> list[PropertyNote]:
        """매물의 노트 목록 (최신순)"""
        result = await self.session.execute(
            select(PropertyNote)
            .where(
                PropertyNote.property_id == property_id,
                PropertyNote.deleted_at.is_(None),
            )
            .order_by(PropertyNote.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_aggregation(self, property_id: str) -> list[PropertyNote]:
        """집계용 노트 목록 (오래된 순)"""
        result = await self.session.execute(
            select(PropertyNote)
            .where(
                PropertyNote.property_id == property_id,
                PropertyNote.deleted_at.is_(None),
            )
            .order_by(PropertyNote.created_at.asc())
        )
        return list(result.scalars().all())

    async def save_ai_output(self, note_id: str, extraction: NoteExtraction) -> PropertyNote:
        """노트에 정규화된 분석 결과 저장"""
        note = await self.get(note_id)
        note.ai_output = extraction.model_dump(mode="json")
        note.updated_at = utcnow()
        await self.session.commit()
        return note

    async def delete(self, note_id: str) -> None:
        self.logger.debug(f"Soft deleting note: {note_id}")

        note = await self.get(note_id)
        note.deleted_at = utcnow()
        await self.session.commit()

        self.logger.info(f"Property note soft deleted: id={note_id}")


class FeatureRepository(BaseRepository):
    """피처 저장소 (매물당 1건)"""

    async def _find_by_property(self, property_id: str) -> Optional[PropertyFeature]:
        result = await self.session.execute(
            select(PropertyFeature).where(
                PropertyFeature.property_id == property_id,
                PropertyFeature.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def create(self, data: PropertyFeatureCreate) -> PropertyFeature:
        """
        피처 직접 생성

        Raises:
            NotFound: 매물이 없는 경우
            Conflict: 이미 피처가 있는 경우 (덮어쓰지 않음)
        """
        self.logger.debug(f"Creating feature for property: {data.property_id}")

        await PropertyRepository(self.session).get(data.property_id)

        if await self._find_by_property(data.property_id) is not None:
            self.logger.warning(f"Feature already exists for property: {data.property_id}")
            raise Conflict(
                "Feature already exists for this property",
                details={"property_id": data.property_id},
            )

        feature = PropertyFeature(**data.model_dump(mode="json"))
        self.session.add(feature)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            self.logger.warning(f"Feature already exists for property: {data.property_id}")
            raise Conflict(
                "Feature already exists for this property",
                details={"property_id": data.property_id},
            ) from e

        self.logger.info(f"Property feature created: id={feature.id}")
        return feature

    async def get(self, feature_id: str) -> PropertyFeature:
        result = await self.session.execute(
            select(PropertyFeature).where(
                PropertyFeature.id == feature_id,
                PropertyFeature.deleted_at.is_(None),
            )
        )
        feature = result.scalar_one_or_none()

        if feature is None:
            self.logger.warning(f"Property feature not found: {feature_id}")
            raise NotFound("Feature not found", details={"feature_id": feature_id})
        return feature

    async def get_by_property(self, property_id: str) -> PropertyFeature:
        feature = await self._find_by_property(property_id)

        if feature is None:
            self.logger.warning(f"Property feature not found for property: {property_id}")
            raise NotFound(
                "Feature not found for this property",
                details={"property_id": property_id},
            )
        return feature

    async def upsert(self, property_id: str, aggregated: AggregatedFeature) -> PropertyFeature:
        """집계 결과로 피처를 무조건 교체 (없으면 생성)"""
        self.logger.debug(f"Upserting feature for property: {property_id}")

        values = aggregated.model_dump(mode="json")
        feature = await self._find_by_property(property_id)

        if feature is None:
            feature = PropertyFeature(property_id=property_id, **values)
            self.session.add(feature)
            action = "created"
        else:
            for key, value in values.items():
                setattr(feature, key, value)
            feature.updated_at = utcnow()
            action = "updated"

        await self.session.commit()

        self.logger.info(f"Property feature {action}: id={feature.id}")
        return feature
