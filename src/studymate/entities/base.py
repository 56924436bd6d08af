"""Base class for entities persisted through an entity store."""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel

from studymate.errors import InvalidTransitionError


class Entity(BaseModel):
    """
    A record owned by an entity store.

    ``id`` and ``created_date`` are left empty by callers and assigned by the
    store on ``create``. Subclasses list the fields that may never change
    afterwards in ``immutable_fields``.
    """

    immutable_fields: ClassVar[frozenset[str]] = frozenset({"id", "created_date"})

    id: str | None = None
    created_date: datetime | None = None

    def validate_changes(self, changes: dict[str, Any]) -> None:
        """Reject updates to unknown or immutable fields."""
        unknown = sorted(set(changes) - set(type(self).model_fields))
        if unknown:
            raise ValueError(f"Unknown {type(self).__name__} fields: {unknown}")

        blocked = sorted(
            name for name in set(changes) & self.immutable_fields
            if changes[name] != getattr(self, name)
        )
        if blocked:
            raise InvalidTransitionError(
                f"{type(self).__name__} fields are immutable: {blocked}",
                details={"id": self.id, "fields": blocked}
            )

    def with_changes(self, changes: dict[str, Any]) -> "Entity":
        """Return a validated copy with ``changes`` applied."""
        self.validate_changes(changes)
        return type(self).model_validate({**self.model_dump(), **changes})
