"""Custom SQLAlchemy column types."""

import json

from sqlalchemy import Text, TypeDecorator


class JSONType(TypeDecorator):
    """JSON document stored as TEXT.

    Event and activity metadata is free-form: values that json cannot encode
    natively (datetimes, UUIDs) are stored as their string form.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(value, default=str, separators=(",", ":"))

    def process_result_value(self, value, dialect):
        if value is None or value == "":
            return None
        return json.loads(value)
