"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the persistence layer using SQLModel.
"""

from __future__ import annotations

from pgvector.sqlalchemy import Vector
from pydantic import ConfigDict
from sqlalchemy import JSON
from sqlmodel import SQLModel

# Dimensions of OpenAI text-embedding-3-small
EMBEDDING_DIMENSIONS = 1536

# pgvector column on PostgreSQL, plain JSON array on SQLite (tests, local dev)
EmbeddingType = Vector(EMBEDDING_DIMENSIONS).with_variant(JSON(none_as_null=True), "sqlite")


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)
