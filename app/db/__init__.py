"""
데이터베이스 패키지
"""

from .models import Base, Property, PropertyNote, PropertyFeature
from .database import Database, create_engine, get_database
from .repositories import PropertyRepository, NoteRepository, FeatureRepository

__all__ = [
    "Base",
    "Property",
    "PropertyNote",
    "PropertyFeature",
    "Database",
    "create_engine",
    "get_database",
    "PropertyRepository",
    "NoteRepository",
    "FeatureRepository",
]
