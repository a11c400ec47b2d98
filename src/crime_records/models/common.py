"""
Shared model building blocks

The public JSON contract is camelCase; Python code uses snake_case names.
"""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

# Trimmed, must still contain at least one character
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _as_utc(value: datetime) -> datetime:
    # Columns hold naive UTC; responses carry the offset explicitly
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Aware UTC instant, serialised with a trailing "Z"
UtcDateTime = Annotated[datetime, AfterValidator(_as_utc)]


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys, accepting either form on input"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
