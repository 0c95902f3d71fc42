"""Custom SQLAlchemy types for NoteStream models with cross-DB support."""

import json
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, String, Text, TypeDecorator

# column width of a single tag on PostgreSQL
TAG_MAX_LENGTH = 100


class StringListType(TypeDecorator):
    """
    Store an ordered list of strings in a DB-friendly way:

    - On PostgreSQL: uses ARRAY(String(TAG_MAX_LENGTH))
    - On SQLite (and others): stores JSON text in a TEXT column

    Order and duplicates are preserved; always returns List[str].
    """

    cache_ok = True
    impl = Text  # placeholder, real impl decided per-dialect

    def load_dialect_impl(self, dialect):
        # Choose storage strategy based on dialect
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import ARRAY

            return dialect.type_descriptor(ARRAY(String(TAG_MAX_LENGTH)))
        # Fallback (e.g., sqlite): JSON as TEXT
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value: Optional[List[str]], dialect):
        if value is None:
            return None
        values = [str(v) for v in value]
        if dialect.name == "postgresql":
            return values
        # JSON encode for TEXT storage
        return json.dumps(values)

    def process_result_value(self, value, dialect) -> Optional[List[str]]:
        if value is None:
            return None
        if dialect.name == "postgresql":
            return [str(v) for v in value]
        if isinstance(value, list):
            return [str(v) for v in value]
        return [str(v) for v in json.loads(value)]


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime that always comes back in UTC.

    SQLite drops tzinfo on storage, so values are normalized to UTC on the way
    in and naive values read back are marked as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class GUID(TypeDecorator):
    """
    Platform-independent GUID/UUID type.

    - Uses PostgreSQL UUID type when available
    - Falls back to CHAR(36) storing hex string form on other DBs (e.g., SQLite)
    """

    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID as PG_UUID

            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        # PostgreSQL expects uuid.UUID when as_uuid=True, others expect string
        if dialect.name == "postgresql":
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if dialect.name == "postgresql":
            # Already a uuid.UUID from PG when as_uuid=True
            return value
        # Coerce string back to uuid.UUID for SQLite/others
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
