from datetime import datetime, UTC
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

# Range of a signed 64-bit INTEGER column
DB_INT_MIN = -2 ** 63
DB_INT_MAX = 2 ** 63 - 1


def fits_db_int(value: int) -> bool:
    return DB_INT_MIN <= value <= DB_INT_MAX


class UTCDateTime(TypeDecorator):
    """
    Timestamp stored in UTC and always read back timezone-aware.

    SQLite keeps no offset, so values are converted to UTC on write and tagged
    with UTC on read.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
