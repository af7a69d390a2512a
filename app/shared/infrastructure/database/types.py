# 📄 File: app/shared/infrastructure/database/types.py
#
# 🧭 Purpose (Layman Explanation):
# Makes sure every date and time we save comes back exactly as it went in, in UTC,
# whichever database engine is behind the app.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy TypeDecorator that normalises datetimes to timezone-aware UTC on write and
# re-attaches UTC on read (SQLite drops tzinfo; PostgreSQL keeps it).
#
# 🔗 Dependencies:
# - sqlalchemy.types
#
# 🔄 Connected Modules / Calls From:
# - Module table definitions (plants, uploads, notification configs)

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetime column."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        if dialect.name == "sqlite":
            # Stored as text; a naive UTC value keeps lexical and temporal order aligned
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
