"""Common shared schemas used across multiple domains."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


def to_camel(name: str) -> str:
    """snake_case to camelCase; only the first letter of each word is raised.

    ``cb_gco2eq`` becomes ``cbGco2eq``, not ``cbGco2Eq``.
    """
    first, *rest = name.split("_")
    return first + "".join(word[:1].upper() + word[1:] for word in rest)


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys (``shipId``, ``cbBefore``).

    Snake_case field names are accepted on input as well.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(CamelModel):
    """Structured rejection returned for domain errors."""
    error: str
    detail: str
    ship_id: Optional[str] = None
