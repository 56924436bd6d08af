from typing import Any

from studymate.errors import EntityNotFoundError

from .base import DEFAULT_SORT, BaseEntityStore, E, parse_sort_spec


class InMemoryEntityStore(BaseEntityStore[E]):
    """
    Simple In-Memory Entity Store.
    Not persistent. Ties in the sort field keep insertion order.
    """

    def __init__(self, entity_type: type[E], **kwargs):
        super().__init__(entity_type, **kwargs)
        self._store: dict[str, E] = {}

    def create(self, entity: E) -> E:
        stored = self._prepare_new(entity)
        self._store[stored.id] = stored
        return stored.model_copy(deep=True)

    def get(self, entity_id: str) -> E | None:
        entity = self._store.get(entity_id)
        return entity.model_copy(deep=True) if entity else None

    def update(self, entity_id: str, changes: dict[str, Any]) -> E:
        current = self._store.get(entity_id)
        if current is None:
            raise EntityNotFoundError(self.entity_name, entity_id)
        updated = current.with_changes(changes)
        self._store[entity_id] = updated
        return updated.model_copy(deep=True)

    def delete(self, entity_id: str) -> bool:
        return self._store.pop(entity_id, None) is not None

    def filter(
        self,
        criteria: dict[str, Any],
        sort: str = DEFAULT_SORT,
        limit: int | None = None
    ) -> list[E]:
        self._check_criteria(criteria)
        spec = parse_sort_spec(sort, self.entity_type)

        matches = [
            e for e in self._store.values()
            if all(getattr(e, k) == v for k, v in criteria.items())
        ]
        # Python's sort is stable in both directions, so ties keep insertion order
        matches.sort(key=lambda e: getattr(e, spec.field), reverse=spec.descending)

        if limit is not None:
            matches = matches[:limit]
        return [e.model_copy(deep=True) for e in matches]
