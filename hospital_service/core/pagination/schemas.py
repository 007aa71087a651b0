"""Page response schema for keyset pagination.

Wire format:
    {"items": [...], "nextCursor": "eyJwZXJzb25faWQiOjZ9"}

``nextCursor`` is omitted entirely on the last page: it is never sent as
null or as an empty string.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
)

T = TypeVar("T")

_CURSOR_KEYS = ("nextCursor", "next_cursor")


class Page(BaseModel, Generic[T]):
    """One page of search results.

    Usage:
        @router.get("/medications", response_model=Page[MedicationResponse])
        async def search_medications(...) -> Page[MedicationResponse]:
            return await repo.search(executor, request.query_params)

    Client navigation:
        # First page
        GET /medications?limit=20

        # Next page (pass nextCursor back unchanged)
        GET /medications?limit=20&cursor=eyJkcnVnX2V4cG9zdXJlX2lkIjozMjF9

        # Stop when the response has no nextCursor

    Attributes:
        items: Items on this page, in the entity's declared order
        next_cursor: Opaque cursor for the next page, None on the last page
    """

    model_config = ConfigDict(populate_by_name=True)

    items: list[T] = Field(
        default_factory=list,
        description="Items on this page",
    )
    next_cursor: str | None = Field(
        default=None,
        serialization_alias="nextCursor",
        validation_alias=AliasChoices("nextCursor", "next_cursor"),
        description="Cursor for the next page; absent on the last page",
    )

    @property
    def has_more(self) -> bool:
        """Whether another page exists."""
        return self.next_cursor is not None

    # Unannotated return keeps the field-derived JSON schema for OpenAPI
    @model_serializer(mode="wrap")
    def _omit_missing_cursor(self, handler: SerializerFunctionWrapHandler):  # noqa: ANN202
        data: dict[str, Any] = handler(self)
        if self.next_cursor is None:
            for key in _CURSOR_KEYS:
                data.pop(key, None)
        return data


__all__ = ["Page"]
