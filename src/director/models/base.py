from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Return current UTC time as an aware datetime.

    Nothing is written to a TIMESTAMP column, so tzinfo is kept and every
    timestamp in the store compares safely against every other.
    """
    return datetime.now(UTC)


def generate_id() -> str:
    return str(uuid4())


class CamelModel(BaseModel):
    """Base for models exchanged with the dashboard.

    Attributes are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
