"""
Paginated, filtered list queries shared by every listing endpoint.

A request's pagination/search/filter parameters are combined with a caller
supplied base filter into one predicate, always in the same order:

1. base filter
2. soft-delete visibility (collections that support the trash only)
3. status filter
4. role filter (comma separated, single value or membership)
5. free-text search over the collection's search fields (OR group)
6. self-authored exclusion (only when searching, only where configured)

The result is counted and a single page is fetched, newest first.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.predicates import (
    And,
    Contains,
    Equals,
    Exists,
    FieldsNotEqual,
    In,
    Or,
    Predicate,
    from_mapping,
)
from app.models.report import Report
from app.models.user_profile import UserProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Collection:
    """How list queries behave for one model."""

    name: str
    model: type
    search_fields: tuple[str, ...]
    filter_fields: frozenset[str] = frozenset()
    soft_delete_field: str | None = None
    sort_field: str | None = None
    # Pair of fields that must differ in search results
    search_exclusion: tuple[str, str] | None = None


REPORTS = Collection(
    name="userReports",
    model=Report,
    search_fields=("name", "facebook_link", "phone"),
    filter_fields=frozenset({"status"}),
    soft_delete_field="deleted_at",
    sort_field="timestamp",
    search_exclusion=("name", "reporter_name"),
)

USER_PROFILES = Collection(
    name="userProfiles",
    model=UserProfile,
    search_fields=("email", "fb_name"),
    filter_fields=frozenset({"status", "role"}),
    sort_field="registration_date",
)


@dataclass
class ListParams:
    page: int = 1
    limit: int = 25
    search: str | None = None
    status: str | None = None
    role: str | None = None
    include_deleted: bool = False


@dataclass
class Page:
    items: list[Any] = field(default_factory=list)
    current_page: int = 1
    items_per_page: int = 25
    total_items: int = 0
    total_pages: int = 0

    def to_envelope(self, serialize) -> dict[str, Any]:
        return {
            "data": [serialize(item) for item in self.items],
            "current_page": self.current_page,
            "items_per_page": self.items_per_page,
            "total_items": self.total_items,
            "total_pages": self.total_pages,
        }


def _to_positive_int(raw: Any, default: int) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def parse_list_params(
    page: Any = None,
    limit: Any = None,
    search: str | None = None,
    status: str | None = None,
    role: str | None = None,
    include_deleted: bool = False,
) -> ListParams:
    """Lenient parsing: absent, non-numeric or non-positive values fall back to defaults."""
    limit_value = _to_positive_int(limit, settings.DEFAULT_PAGE_SIZE)
    if settings.MAX_PAGE_SIZE > 0:
        limit_value = min(limit_value, settings.MAX_PAGE_SIZE)

    return ListParams(
        page=_to_positive_int(page, 1),
        limit=limit_value,
        search=search.strip() if search and search.strip() else None,
        status=status.strip() if status and status.strip() else None,
        role=role.strip() if role and role.strip() else None,
        include_deleted=include_deleted,
    )


def split_roles(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def build_filter(
    collection: Collection,
    base_filter: dict[str, Any] | Predicate | None,
    params: ListParams,
) -> And:
    """Compose the full predicate for a list query."""
    if isinstance(base_filter, And):
        query = base_filter
    elif isinstance(base_filter, Predicate):
        query = And((base_filter,))
    else:
        query = from_mapping(base_filter)

    if collection.soft_delete_field:
        query = query.also(Exists(collection.soft_delete_field, present=params.include_deleted))

    if params.status and "status" in collection.filter_fields:
        query = query.also(Equals("status", params.status))

    if params.role and "role" in collection.filter_fields:
        roles = split_roles(params.role)
        if len(roles) == 1:
            query = query.also(Equals("role", roles[0]))
        elif roles:
            query = query.also(In("role", tuple(roles)))

    if params.search:
        query = query.also(
            Or(tuple(Contains(name, params.search) for name in collection.search_fields))
        )
        if collection.search_exclusion:
            query = query.also(FieldsNotEqual(*collection.search_exclusion))

    return query


async def fetch_paginated(
    db: AsyncSession,
    collection: Collection,
    base_filter: dict[str, Any] | Predicate | None,
    params: ListParams,
) -> Page:
    predicate = build_filter(collection, base_filter, params)
    where_clause = predicate.compile(collection.model)

    count_result = await db.execute(
        select(func.count()).select_from(collection.model).where(where_clause)
    )
    total = count_result.scalar() or 0

    query = select(collection.model).where(where_clause)
    if collection.sort_field:
        query = query.order_by(getattr(collection.model, collection.sort_field).desc())
    # Primary key breaks ties so offset pages stay stable
    query = query.order_by(*(column.desc() for column in inspect(collection.model).primary_key))
    offset = (params.page - 1) * params.limit
    query = query.offset(offset).limit(params.limit)

    result = await db.execute(query)
    items = list(result.scalars().all())

    logger.debug(
        "Fetched %d of %d %s (page=%d, limit=%d)",
        len(items),
        total,
        collection.name,
        params.page,
        params.limit,
    )

    return Page(
        items=items,
        current_page=params.page,
        items_per_page=params.limit,
        total_items=total,
        total_pages=math.ceil(total / params.limit),
    )
