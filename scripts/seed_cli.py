#!/usr/bin/env python
"""
PropNotes 데모 데이터 CLI

사용법:
    python scripts/seed_cli.py status   # 테이블별 행 수 확인
    python scripts/seed_cli.py seed     # 테이블 생성 + 데모 매물/피처 입력
    python scripts/seed_cli.py reset    # 테이블 삭제 후 다시 seed
"""

import asyncio
import sys
from pathlib import Path

# 프로젝트 루트를 path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select, func

from app.db import Database, Property, PropertyFeature, PropertyNote, get_database


# (id, title, city, neighborhood, price, area_m2, property_type)
DEMO_PROPERTIES = [
    ("a1b2c3d4-e5f6-4a5b-8c9d-0e1f2a3b4c5d", "Modern Downtown Office Space",
     "New York", "Midtown Manhattan", 850000.0, 250.0, "office"),
    ("b2c3d4e5-f6a7-5b6c-9d0e-1f2a3b4c5d6e", "Prime Retail Storefront",
     "Los Angeles", "Beverly Hills", 1200000.0, 180.0, "retail"),
    ("c3d4e5f6-a7b8-6c7d-0e1f-2a3b4c5d6e7f", "Industrial Warehouse Complex",
     "Chicago", "West Loop", 2500000.0, 1500.0, "warehouse"),
    ("d4e5f6a7-b8c9-7d8e-1f2a-3b4c5d6e7f8a", "Tech Startup Office Hub",
     "San Francisco", "SoMa", 1800000.0, 400.0, "office"),
    ("e5f6a7b8-c9d0-8e9f-2a3b-4c5d6e7f8a9b", "Boutique Shopping Space",
     "Miami", "Wynwood", 650000.0, 120.0, "retail"),
    ("f6a7b8c9-d0e1-9f0a-3b4c-5d6e7f8a9b0c", "Distribution Center Warehouse",
     "Dallas", "Deep Ellum", 3200000.0, 2500.0, "warehouse"),
    ("a7b8c9d0-e1f2-0a1b-4c5d-6e7f8a9b0c1d", "Creative Agency Office",
     "Austin", "East Austin", 550000.0, 200.0, "office"),
    ("b8c9d0e1-f2a3-1b2c-5d6e-7f8a9b0c1d2e", "Corner Retail Property",
     "Seattle", "Capitol Hill", 780000.0, 150.0, "retail"),
    ("c9d0e1f2-a3b4-2c3d-6e7f-8a9b0c1d2e3f", "Cold Storage Warehouse",
     "Denver", "RiNo District", 1900000.0, 1200.0, "warehouse"),
    ("d0e1f2a3-b4c5-3d4e-7f8a-9b0c1d2e3f4a", "Executive Office Suite",
     "Boston", "Back Bay", 1100000.0, 300.0, "office"),
]

# 일부 매물만 피처 보유 (노트 분석이 끝난 상태를 흉내냄)
# (id, property_id, near_subway, needs_renovation, capacity, recommended_use)
DEMO_FEATURES = [
    ("11111111-1111-1111-1111-111111111111", "a1b2c3d4-e5f6-4a5b-8c9d-0e1f2a3b4c5d",
     True, False, 50, "office"),
    ("22222222-2222-2222-2222-222222222222", "c3d4e5f6-a7b8-6c7d-0e1f-2a3b4c5d6e7f",
     False, True, 120, "warehouse"),
    ("33333333-3333-3333-3333-333333333333", "d4e5f6a7-b8c9-7d8e-1f2a-3b4c5d6e7f8a",
     True, False, 80, "office"),
    ("44444444-4444-4444-4444-444444444444", "f6a7b8c9-d0e1-9f0a-3b4c-5d6e7f8a9b0c",
     False, False, 200, "warehouse"),
    ("55555555-5555-5555-5555-555555555555", "b8c9d0e1-f2a3-1b2c-5d6e-7f8a9b0c1d2e",
     True, False, 25, "retail"),
    ("66666666-6666-6666-6666-666666666666", "c9d0e1f2-a3b4-2c3d-6e7f-8a9b0c1d2e3f",
     False, True, 100, "warehouse"),
    ("77777777-7777-7777-7777-777777777777", "d0e1f2a3-b4c5-3d4e-7f8a-9b0c1d2e3f4a",
     True, False, 60, "office"),
]


async def seed_demo_data(database: Database) -> tuple[int, int]:
    """
    데모 데이터 입력 (이미 있는 id는 건너뜀)

    Returns:
        (추가된 매물 수, 추가된 피처 수)
    """
    await database.init()

    added_properties = 0
    added_features = 0

    async with database.session() as session:
        for prop_id, title, city, neighborhood, price, area, prop_type in DEMO_PROPERTIES:
            if await session.get(Property, prop_id) is not None:
                continue
            session.add(Property(
                id=prop_id,
                title=title,
                city=city,
                neighborhood=neighborhood,
                price=price,
                area_m2=area,
                property_type=prop_type,
            ))
            added_properties += 1
        await session.flush()

        for feature_id, prop_id, subway, renovation, capacity, use in DEMO_FEATURES:
            existing = await session.execute(
                select(PropertyFeature.id).where(PropertyFeature.property_id == prop_id)
            )
            if existing.first() is not None:
                continue
            session.add(PropertyFeature(
                id=feature_id,
                property_id=prop_id,
                near_subway=subway,
                needs_renovation=renovation,
                estimated_capacity_people=capacity,
                recommended_use=use,
            ))
            added_features += 1

        await session.commit()

    return added_properties, added_features


async def count_rows(database: Database) -> dict[str, int]:
    """테이블별 (삭제되지 않은) 행 수"""
    counts = {}
    async with database.session() as session:
        for label, model in (
            ("properties", Property),
            ("property_notes", PropertyNote),
            ("property_features", PropertyFeature),
        ):
            result = await session.execute(
                select(func.count()).select_from(model).where(model.deleted_at.is_(None))
            )
            counts[label] = result.scalar_one()
    return counts


async def cmd_status(database: Database):
    """행 수 출력"""
    await database.init()
    counts = await count_rows(database)

    print("=" * 40)
    print("🗄️  PropNotes 데이터베이스 상태")
    print("=" * 40)
    print(f"  위치: {database.url}")
    for label, count in counts.items():
        print(f"  {label:<18} {count}개")
    print("=" * 40)


async def cmd_seed(database: Database):
    """데모 데이터 입력"""
    properties, features = await seed_demo_data(database)
    print(f"🌱 매물 {properties}개, 피처 {features}개 추가됨")


async def cmd_reset(database: Database):
    """전체 삭제 후 다시 입력"""
    await database.drop()
    print("🗑️  전체 테이블 삭제됨")
    await cmd_seed(database)


def print_help():
    """도움말 출력"""
    print(__doc__)
    print("DATABASE_URL 환경 변수(.env)로 대상 DB를 지정합니다.")


COMMANDS = {
    "status": cmd_status,
    "seed": cmd_seed,
    "reset": cmd_reset,
}


async def _run(command):
    database = get_database()
    try:
        await command(database)
    finally:
        await database.dispose()


def main():
    if len(sys.argv) < 2:
        print_help()
        return

    command = sys.argv[1].lower()

    if command in COMMANDS:
        asyncio.run(_run(COMMANDS[command]))
    elif command in ["help", "-h", "--help"]:
        print_help()
    else:
        print(f"❌ 알 수 없는 명령: {command}")
        print_help()


if __name__ == "__main__":
    main()
