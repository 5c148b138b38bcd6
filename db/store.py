"""Generic entity store over a Beanie document class.

The sync services only need list / filter / get / create / update, so they
depend on this narrow interface instead of on Beanie query syntax. Tests
can hand the services any object with the same coroutine methods.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from beanie import Document, PydanticObjectId
from bson import ObjectId

from core.exceptions import ResourceNotFoundError

logger = logging.getLogger(__name__)

DocT = TypeVar("DocT", bound=Document)


class EntityStore(Generic[DocT]):
    def __init__(self, model: type[DocT]) -> None:
        self._model = model

    @property
    def model(self) -> type[DocT]:
        return self._model

    async def list(self) -> list[DocT]:
        return await self._model.find_all().to_list()

    async def filter(self, **criteria: Any) -> list[DocT]:
        return await self._model.find(criteria).to_list()

    async def get(self, entity_id: str | PydanticObjectId | None) -> DocT | None:
        if entity_id is None:
            return None
        if not isinstance(entity_id, ObjectId):
            if not ObjectId.is_valid(str(entity_id)):
                return None
            entity_id = PydanticObjectId(str(entity_id))
        return await self._model.get(entity_id)

    async def create(self, record: dict[str, Any]) -> DocT:
        document = self._model(**record)
        await document.insert()
        logger.debug(
            "Created %s %s",
            self._model.Settings.name,
            document.id,
        )
        return document

    async def update(
        self,
        entity_id: str | PydanticObjectId,
        partial: dict[str, Any],
    ) -> DocT:
        document = await self.get(entity_id)
        if document is None:
            msg = f"{self._model.__name__} not found"
            raise ResourceNotFoundError(msg, {"id": str(entity_id)})
        for field, value in partial.items():
            setattr(document, field, value)
        await document.save()
        return document


__all__ = ["EntityStore"]
