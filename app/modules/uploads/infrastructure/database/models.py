# 📄 File: app/modules/uploads/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes how uploaded-photo records are laid out in the database.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy table for Upload records; (user_id, key) unique so registration is idempotent,
# created_at indexed for the orphan sweep.
#
# 🔗 Dependencies:
# - SQLAlchemy, app.shared.config.database (DatabaseBase)
# - app.shared.infrastructure.database.types (UTCDateTime)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.uploads.infrastructure.database.upload_repository_impl

from sqlalchemy import BigInteger, Column, Integer, String, UniqueConstraint

from app.shared.config.database import DatabaseBase
from app.shared.infrastructure.database.types import UTCDateTime, utcnow


class UploadModel(DatabaseBase):
    """
    SQLAlchemy model for registered uploads.
    """
    __tablename__ = "uploads"
    __table_args__ = (
        UniqueConstraint("user_id", "key", name="uq_uploads_user_id_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True, comment="Owner (identity provider subject)")
    key = Column(String(1024), nullable=False, comment="Object key under users/<user_id>/")
    size_bytes = Column(BigInteger, nullable=False, default=0)
    content_type = Column(String(100), nullable=False, default="")
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow, index=True)

    def __repr__(self) -> str:
        return f"<UploadModel(id={self.id}, user_id={self.user_id}, key={self.key})>"
