"""Entity store persisted through SQLModel tables."""

from datetime import timezone
from typing import Any

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, select

from studymate.datasource.base import DEFAULT_SORT, BaseEntityStore, E, parse_sort_spec
from studymate.errors import EntityNotFoundError


class SQLModelEntityStore(BaseEntityStore[E]):
    """
    Entity store backed by one SQLModel table.

    Every operation runs in its own session, so each create/update/delete is
    committed atomically and independently of other requests.

    Args:
        engine: SQLAlchemy engine
        table: SQLModel table class whose columns mirror the entity fields
        entity_type: Entity class returned to callers
    """

    def __init__(self, engine: Engine, table: type[SQLModel], entity_type: type[E], **kwargs):
        super().__init__(entity_type, **kwargs)
        self.engine = engine
        self.table = table

    def _to_entity(self, record: SQLModel) -> E:
        data = record.model_dump()
        created = data.get("created_date")
        if created is not None and created.tzinfo is None:
            # SQLite drops the offset; everything is stored in UTC
            data["created_date"] = created.replace(tzinfo=timezone.utc)
        return self.entity_type.model_validate(data)

    def _conditions(self, criteria: dict[str, Any]) -> list:
        self._check_criteria(criteria)
        return [getattr(self.table, name) == value for name, value in criteria.items()]

    def create(self, entity: E) -> E:
        stored = self._prepare_new(entity)
        record = self.table(**stored.model_dump())
        with Session(self.engine) as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            return self._to_entity(record)

    def get(self, entity_id: str) -> E | None:
        with Session(self.engine) as session:
            record = session.get(self.table, entity_id)
            return self._to_entity(record) if record else None

    def update(self, entity_id: str, changes: dict[str, Any]) -> E:
        with Session(self.engine) as session:
            record = session.get(self.table, entity_id)
            if record is None:
                raise EntityNotFoundError(self.entity_name, entity_id)

            updated = self._to_entity(record).with_changes(changes)
            for name in changes:
                setattr(record, name, getattr(updated, name))

            session.add(record)
            session.commit()
            session.refresh(record)
            return self._to_entity(record)

    def delete(self, entity_id: str) -> bool:
        with Session(self.engine) as session:
            record = session.get(self.table, entity_id)
            if record is None:
                return False
            session.delete(record)
            session.commit()
            return True

    def filter(
        self,
        criteria: dict[str, Any],
        sort: str = DEFAULT_SORT,
        limit: int | None = None
    ) -> list[E]:
        spec = parse_sort_spec(sort, self.entity_type)
        column = getattr(self.table, spec.field)

        statement = select(self.table).where(*self._conditions(criteria))
        statement = statement.order_by(column.desc() if spec.descending else column.asc())
        if limit is not None:
            statement = statement.limit(limit)

        with Session(self.engine) as session:
            return [self._to_entity(record) for record in session.exec(statement).all()]

    def count(self, criteria: dict[str, Any] | None = None) -> int:
        statement = select(func.count()).select_from(self.table).where(*self._conditions(criteria or {}))
        with Session(self.engine) as session:
            return session.exec(statement).one()
