"""
PropNotes API 라우터
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_runner, get_session
from app.db.database import Database
from app.db.repositories import FeatureRepository, NoteRepository, PropertyRepository
from app.llm import BaseLLMRunner
from app.pipeline import NoteProcessingPipeline, RankingPipeline
from app.schemas import (
    NoteCreate,
    NoteRead,
    PropertyCreate,
    PropertyFeatureCreate,
    PropertyFeatureRead,
    PropertyFilter,
    PropertyRead,
    PropertyUpdate,
    RankRequest,
    ScoredProperty,
)

router = APIRouter()


# =========================================================
# 매물
# =========================================================

@router.post(
    "/properties",
    response_model=PropertyRead,
    status_code=status.HTTP_201_CREATED,
    tags=["properties"],
)
async def create_property(
    data: PropertyCreate,
    session: AsyncSession = Depends(get_session),
) -> PropertyRead:
    """매물 등록"""
    prop = await PropertyRepository(session).create(data)
    return PropertyRead.model_validate(prop)


@router.get("/properties", response_model=list[PropertyRead], tags=["properties"])
async def list_properties(
    filters: Annotated[PropertyFilter, Query()],
    session: AsyncSession = Depends(get_session),
) -> list[PropertyRead]:
    """
    매물 목록 조회

    - 도시/동네는 부분 일치 (대소문자 무시)
    - 가격/면적은 경계 포함 범위
    - 피처 조건을 주면 피처가 있는 매물만 반환
    """
    properties = await PropertyRepository(session).list_all(filters)
    return [PropertyRead.model_validate(p) for p in properties]


@router.post("/properties/rank", response_model=list[ScoredProperty], tags=["properties"])
async def rank_properties(
    request: RankRequest,
    session: AsyncSession = Depends(get_session),
    runner: BaseLLMRunner = Depends(get_runner),
) -> list[ScoredProperty]:
    """
    자연어로 매물 랭킹

    자연어에서 검색 조건을 추출하고,
    hard 조건으로 후보를 좁힌 뒤 soft 조건 일치도로 점수(0-10)를 매깁니다.
    """
    pipeline = RankingPipeline(PropertyRepository(session), runner)
    return await pipeline.rank(request.text)


@router.get("/properties/{property_id}", response_model=PropertyRead, tags=["properties"])
async def get_property(
    property_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> PropertyRead:
    prop = await PropertyRepository(session).get(str(property_id))
    return PropertyRead.model_validate(prop)


@router.patch("/properties/{property_id}", response_model=PropertyRead, tags=["properties"])
async def update_property(
    property_id: UUID,
    data: PropertyUpdate,
    session: AsyncSession = Depends(get_session),
) -> PropertyRead:
    """매물 수정 (입력된 필드만)"""
    prop = await PropertyRepository(session).update(str(property_id), data)
    return PropertyRead.model_validate(prop)


@router.delete(
    "/properties/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["properties"],
)
async def delete_property(
    property_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> Response:
    """매물 삭제 (노트/피처 포함 소프트 삭제)"""
    await PropertyRepository(session).delete(str(property_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =========================================================
# 노트
# =========================================================

@router.post(
    "/property-notes",
    response_model=NoteRead,
    status_code=status.HTTP_201_CREATED,
    tags=["property-notes"],
)
async def create_note(
    data: NoteCreate,
    background_tasks: BackgroundTasks,
    x_user_id: str = Header(..., min_length=1),
    session: AsyncSession = Depends(get_session),
    database: Database = Depends(get_db),
    runner: BaseLLMRunner = Depends(get_runner),
) -> NoteRead:
    """
    노트 등록

    응답 후 백그라운드에서 노트를 분석하고 매물 피처를 재집계합니다.
    분석 실패는 응답에 영향을 주지 않습니다.
    """
    note = await NoteRepository(session).create(
        property_id=str(data.property_id),
        user_id=x_user_id,
        note_text=data.note_text,
    )

    pipeline = NoteProcessingPipeline(database, runner)
    background_tasks.add_task(pipeline.process_note, note.id)

    return NoteRead.model_validate(note)


@router.get(
    "/property-notes/property/{property_id}",
    response_model=list[NoteRead],
    tags=["property-notes"],
)
async def list_notes_by_property(
    property_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> list[NoteRead]:
    """매물의 노트 목록 (최신순)"""
    notes = await NoteRepository(session).list_by_property(str(property_id))
    return [NoteRead.model_validate(n) for n in notes]


@router.get("/property-notes/{note_id}", response_model=NoteRead, tags=["property-notes"])
async def get_note(
    note_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> NoteRead:
    note = await NoteRepository(session).get(str(note_id))
    return NoteRead.model_validate(note)


@router.delete(
    "/property-notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["property-notes"],
)
async def delete_note(
    note_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> Response:
    """노트 삭제 (피처는 재집계하지 않음)"""
    await NoteRepository(session).delete(str(note_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =========================================================
# 피처
# =========================================================

@router.post(
    "/property-features",
    response_model=PropertyFeatureRead,
    status_code=status.HTTP_201_CREATED,
    tags=["property-features"],
)
async def create_feature(
    data: PropertyFeatureCreate,
    session: AsyncSession = Depends(get_session),
) -> PropertyFeatureRead:
    """피처 직접 등록 (이미 있으면 409)"""
    feature = await FeatureRepository(session).create(data)
    return PropertyFeatureRead.model_validate(feature)


@router.get(
    "/property-features/property/{property_id}",
    response_model=PropertyFeatureRead,
    tags=["property-features"],
)
async def get_feature_by_property(
    property_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> PropertyFeatureRead:
    feature = await FeatureRepository(session).get_by_property(str(property_id))
    return PropertyFeatureRead.model_validate(feature)


@router.get(
    "/property-features/{feature_id}",
    response_model=PropertyFeatureRead,
    tags=["property-features"],
)
async def get_feature(
    feature_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> PropertyFeatureRead:
    feature = await FeatureRepository(session).get(str(feature_id))
    return PropertyFeatureRead.model_validate(feature)
