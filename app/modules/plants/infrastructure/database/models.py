# 📄 File: app/modules/plants/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes how a plant is laid out inside the database: one row per plant, with its care
# settings kept as small documents and a "next due" time per kind of care for quick lookups.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy table for the Plant aggregate. Sub-configs and collections are JSON columns
# (SQL NULL when absent/cleared); next_*_at columns are maintained on every write so the
# due-for-care queries are a single indexed range scan.
#
# 🔗 Dependencies:
# - SQLAlchemy (Column types, JSON/JSONB variant)
# - app.shared.config.database (DatabaseBase)
# - app.shared.infrastructure.database.types (UTCDateTime)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plants.infrastructure.database.plant_repository_impl
# - app.shared.config.database (metadata.create_all)

from sqlalchemy import JSON, Boolean, Column, Float, Index, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB

from app.modules.plants.domain.services.slug import MAX_SLUG_LENGTH
from app.shared.config.database import DatabaseBase
from app.shared.infrastructure.database.types import UTCDateTime, utcnow


def _document():
    return JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


class PlantModel(DatabaseBase):
    """
    SQLAlchemy model for the Plant aggregate.

    Column names are snake_case; JSON documents keep the camelCase wire keys.
    """
    __tablename__ = "plants"
    __table_args__ = (
        UniqueConstraint("user_id", "slug", name="uq_plants_user_id_slug"),
        Index("ix_plants_user_id_created_at", "user_id", "created_at"),
    )

    # Identity
    id = Column(String(36), primary_key=True, comment="Opaque plant identifier (UUID)")
    user_id = Column(String(64), nullable=False, index=True, comment="Owner (identity provider subject)")
    slug = Column(String(MAX_SLUG_LENGTH), nullable=False, comment="URL label, unique per owner")

    # Scalars
    name = Column(String(100), nullable=False)
    species = Column(String(100), nullable=False, default="")
    is_toxic = Column(Boolean, nullable=False, default=False)
    sunlight = Column(String(32), nullable=True)
    preferred_temperature = Column(Float, nullable=True)

    # Sub-configs (NULL = not configured)
    location = Column(_document(), nullable=True)
    watering = Column(_document(), nullable=True)
    fertilizing = Column(_document(), nullable=True)
    humidity = Column(_document(), nullable=True)
    soil = Column(_document(), nullable=True)
    seasonality = Column(_document(), nullable=True)

    # Collections (NULL = empty)
    pest_history = Column(_document(), nullable=True)
    flags = Column(_document(), nullable=True)
    notes = Column(_document(), nullable=True)
    photo_ids = Column(_document(), nullable=True)
    growth_history = Column(_document(), nullable=True)

    # Derived scheduling state (NULL = category not schedulable)
    next_watering_at = Column(UTCDateTime(), nullable=True, index=True)
    next_fertilizing_at = Column(UTCDateTime(), nullable=True, index=True)
    next_misting_at = Column(UTCDateTime(), nullable=True, index=True)
    next_repotting_at = Column(UTCDateTime(), nullable=True, index=True)

    # Timestamps
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime(), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<PlantModel(id={self.id}, user_id={self.user_id}, slug={self.slug})>"
