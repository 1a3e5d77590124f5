"""Column types shared by the MySQL and SQLite backends."""

import uuid

from sqlalchemy import String, TypeDecorator


class UUID(TypeDecorator):
    """UUID stored as a 36-character string.

    Binds accept ``uuid.UUID`` or its string form; results come back as
    ``uuid.UUID``.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(value) if isinstance(value, uuid.UUID) else str(uuid.UUID(value))

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)
