"""
Entity store interface.

An entity store owns one collection of entities (Documents or Questions):
it assigns ids and creation dates, enforces the entity's update rules and
serves ordered listings. Sort specs are field names with an optional
leading ``-`` for descending order, e.g. ``"-created_date"``.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar
from uuid import uuid4

from studymate.entities.base import Entity

E = TypeVar("E", bound=Entity)

DEFAULT_SORT = "-created_date"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SortSpec:
    field: str
    descending: bool = False

    def __str__(self) -> str:
        return f"-{self.field}" if self.descending else self.field


def parse_sort_spec(spec: str, entity_type: type[Entity] | None = None) -> SortSpec:
    """
    Parse ``"-created_date"`` style sort specs.

    Raises:
        ValueError: empty spec, or a field the entity type does not have
    """
    descending = spec.startswith("-")
    field = spec[1:] if descending else spec
    field = field.strip()
    if not field:
        raise ValueError(f"Invalid sort spec: {spec!r}")
    if entity_type is not None and field not in entity_type.model_fields:
        raise ValueError(f"Cannot sort {entity_type.__name__} by unknown field '{field}'")
    return SortSpec(field=field, descending=descending)


class BaseEntityStore(ABC, Generic[E]):
    """
    Abstract Base Class for entity stores.

    Args:
        entity_type: The Entity subclass this store holds.
        clock: Source of creation timestamps (timezone-aware UTC by default).
    """

    def __init__(self, entity_type: type[E], clock: Callable[[], datetime] = utc_now):
        self.entity_type = entity_type
        self.clock = clock

    @property
    def entity_name(self) -> str:
        return self.entity_type.__name__

    def _prepare_new(self, entity: E) -> E:
        """Stamp a new entity with its id and creation date."""
        return entity.model_copy(update={"id": uuid4().hex, "created_date": self.clock()})

    def _check_criteria(self, criteria: dict[str, Any]) -> None:
        unknown = sorted(set(criteria) - set(self.entity_type.model_fields))
        if unknown:
            raise ValueError(f"Cannot filter {self.entity_name} by unknown fields: {unknown}")

    @abstractmethod
    def create(self, entity: E) -> E:
        """Persist a new entity and return it with ``id`` and ``created_date`` set."""
        pass

    @abstractmethod
    def get(self, entity_id: str) -> E | None:
        """Fetch one entity, or None if it does not exist."""
        pass

    @abstractmethod
    def update(self, entity_id: str, changes: dict[str, Any]) -> E:
        """
        Apply ``changes`` to an entity.

        Raises:
            EntityNotFoundError: unknown id
            InvalidTransitionError: the entity refuses the change
        """
        pass

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """Delete an entity. Returns False (and does nothing) for unknown ids."""
        pass

    @abstractmethod
    def filter(
        self,
        criteria: dict[str, Any],
        sort: str = DEFAULT_SORT,
        limit: int | None = None
    ) -> list[E]:
        """Entities whose fields equal every value in ``criteria``, ordered by ``sort``."""
        pass

    def list(self, sort: str = DEFAULT_SORT, limit: int | None = None) -> list[E]:
        """All entities ordered by ``sort``."""
        return self.filter({}, sort=sort, limit=limit)

    def count(self, criteria: dict[str, Any] | None = None) -> int:
        return len(self.filter(criteria or {}))
