"""Persistence interface used by the request handlers.

Handlers never touch ``db.session`` directly; they go through a
``Repository`` bound to one model. Uniqueness is enforced twice: by the
pre-checks in ``braids.rules`` and by unique constraints in the schema, so a
lost race surfaces as an ``IntegrityError`` instead of a duplicate row.
"""
from __future__ import annotations

from typing import Any, Generic, Iterable, TypeVar

from sqlalchemy import func, select
from sqlalchemy.sql import ColumnElement

from .extensions import db
from .models import utc_now

ModelT = TypeVar("ModelT", bound=db.Model)


class Page(Generic[ModelT]):
    def __init__(self, items: list[ModelT], page: int, limit: int, total: int) -> None:
        self.items = items
        self.page = page
        self.limit = limit
        self.total = total

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit

    def pagination(self) -> dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


class Repository(Generic[ModelT]):
    """get / list / insert / update / delete for a single model."""

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    @property
    def session(self):
        return db.session

    def get(self, record_id: str) -> ModelT | None:
        return self.session.get(self.model, record_id)

    def get_active(self, record_id: str) -> ModelT | None:
        record = self.get(record_id)
        if record is None or not getattr(record, "is_active", True):
            return None
        return record

    def find_one(self, *criteria: ColumnElement[bool]) -> ModelT | None:
        return self.session.scalars(select(self.model).where(*criteria).limit(1)).first()

    def find_by_name(self, column, value: str) -> ModelT | None:
        """Case-insensitive lookup on a unique text column."""
        return self.find_one(func.lower(column) == value.lower())

    def list(
        self,
        criteria: Iterable[ColumnElement[bool]] = (),
        order_by: Iterable[Any] = (),
    ) -> list[ModelT]:
        stmt = select(self.model).where(*criteria).order_by(*order_by)
        return list(self.session.scalars(stmt))

    def paginate(
        self,
        criteria: Iterable[ColumnElement[bool]] = (),
        order_by: Iterable[Any] = (),
        page: int = 1,
        limit: int = 20,
    ) -> Page[ModelT]:
        criteria = list(criteria)
        total = self.session.scalar(
            select(func.count()).select_from(self.model).where(*criteria)
        )
        stmt = (
            select(self.model)
            .where(*criteria)
            .order_by(*order_by)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        return Page(list(self.session.scalars(stmt)), page, limit, total or 0)

    def insert(self, commit: bool = True, **values: Any) -> ModelT:
        record = self.model(**values)
        self.session.add(record)
        if commit:
            self.session.commit()
        else:
            self.session.flush()
        return record

    def update(self, record: ModelT, values: dict[str, Any], commit: bool = True) -> ModelT:
        for key, value in values.items():
            setattr(record, key, value)
        record.updated_at = utc_now()
        if commit:
            self.session.commit()
        return record

    def soft_delete(self, record: ModelT) -> ModelT:
        return self.update(record, {"is_active": False})

    def delete(self, record: ModelT) -> None:
        self.session.delete(record)
        self.session.commit()

    def commit(self) -> None:
        self.session.commit()


def ordering(model, field: str, direction: str = "asc"):
    column = getattr(model, field)
    return column.desc() if direction == "desc" else column.asc()
