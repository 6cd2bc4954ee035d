"""
Typed filter fragments.

List queries are assembled from these small immutable pieces and compiled to a
SQLAlchemy WHERE clause against a mapped model only at the very end. Keeping
the fragments as plain values makes the composed filter comparable in tests.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import and_, false, or_, true
from sqlalchemy.sql.elements import ColumnElement


def _column(model: type, field: str):
    try:
        return getattr(model, field)
    except AttributeError:
        raise ValueError(f"{model.__name__} has no field {field!r}") from None


class Predicate:
    def compile(self, model: type) -> ColumnElement[bool]:
        raise NotImplementedError


@dataclass(frozen=True)
class Equals(Predicate):
    field: str
    value: Any

    def compile(self, model: type) -> ColumnElement[bool]:
        return _column(model, self.field) == self.value


@dataclass(frozen=True)
class In(Predicate):
    field: str
    values: tuple[Any, ...]

    def compile(self, model: type) -> ColumnElement[bool]:
        return _column(model, self.field).in_(self.values)


@dataclass(frozen=True)
class Contains(Predicate):
    """Case-insensitive substring match. The term is matched literally."""

    field: str
    term: str

    def compile(self, model: type) -> ColumnElement[bool]:
        return _column(model, self.field).icontains(self.term, autoescape=True)


@dataclass(frozen=True)
class Exists(Predicate):
    """``present=True`` matches non-null values, ``present=False`` matches nulls."""

    field: str
    present: bool = True

    def compile(self, model: type) -> ColumnElement[bool]:
        column = _column(model, self.field)
        return column.is_not(None) if self.present else column.is_(None)


@dataclass(frozen=True)
class FieldsNotEqual(Predicate):
    """Compares two fields of the same record."""

    left: str
    right: str

    def compile(self, model: type) -> ColumnElement[bool]:
        return _column(model, self.left) != _column(model, self.right)


@dataclass(frozen=True)
class And(Predicate):
    parts: tuple[Predicate, ...] = ()

    def compile(self, model: type) -> ColumnElement[bool]:
        if not self.parts:
            return true()
        return and_(*(part.compile(model) for part in self.parts))

    def also(self, *parts: Predicate) -> "And":
        return And(self.parts + parts)


@dataclass(frozen=True)
class Or(Predicate):
    parts: tuple[Predicate, ...] = ()

    def compile(self, model: type) -> ColumnElement[bool]:
        # An empty OR group matches nothing
        if not self.parts:
            return false()
        return or_(*(part.compile(model) for part in self.parts))


def from_mapping(filters: dict[str, Any] | None) -> And:
    """Turn a ``{field: value}`` mapping into an AND of equality fragments."""
    if not filters:
        return And()
    return And(tuple(Equals(field, value) for field, value in filters.items()))
