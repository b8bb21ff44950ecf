"""Post listing query builder and paginator.

Each filter is an independent predicate; the builder ANDs whichever ones are
active. The search term is a single OR-group over title, author name and
category. Ordering always ends with ``id`` ascending so that pages stay
stable when the primary sort key has ties.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from math import ceil
from typing import Any, Optional
from uuid import UUID

from fastapi.datastructures import URL
from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.orm import Session, selectinload

from blog_backend.config import settings
from blog_backend.core.exceptions import ValidationError
from blog_backend.models.post import Post
from blog_backend.models.user import User

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "id": Post.id,
    "title": Post.title,
    "category": Post.category,
    "author_id": Post.author_id,
    "created_at": Post.created_at,
    "updated_at": Post.updated_at,
}
DEFAULT_SORT = "-created_at"
LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class PostFilters:
    """Optional filters for listing posts. ``None`` or blank means inactive."""

    search: Optional[str] = None
    category: Optional[str] = None
    author_id: Optional[UUID] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    sort: Optional[str] = None


@dataclass(frozen=True)
class PageRequest:
    """1-based page number and page size."""

    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass
class Page:
    """One page of results plus the numbers needed for pagination metadata."""

    items: list[Any]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, ceil(self.total / self.per_page))

    @property
    def first_item(self) -> Optional[int]:
        if not self.items:
            return None
        return (self.page - 1) * self.per_page + 1

    @property
    def last_item(self) -> Optional[int]:
        if not self.items:
            return None
        return (self.page - 1) * self.per_page + len(self.items)


def _blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def _escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def search_clause(term: str) -> ColumnElement[bool]:
    """Title, author name or category contains ``term``, ignoring case."""
    pattern = f"%{_escape_like(term.strip())}%"
    return or_(
        Post.title.ilike(pattern, escape=LIKE_ESCAPE),
        Post.author.has(User.name.ilike(pattern, escape=LIKE_ESCAPE)),
        Post.category.ilike(pattern, escape=LIKE_ESCAPE),
    )


def category_clause(category: str) -> ColumnElement[bool]:
    return Post.category == category


def author_clause(author_id: UUID) -> ColumnElement[bool]:
    return Post.author_id == author_id


def created_from_clause(day: date) -> ColumnElement[bool]:
    """Created on or after the start of ``day`` (UTC)."""
    return Post.created_at >= _day_start(day)


def created_to_clause(day: date) -> ColumnElement[bool]:
    """Created on or before the end of ``day`` (UTC)."""
    return Post.created_at < _day_start(day + timedelta(days=1))


def filter_clauses(filters: PostFilters) -> list[ColumnElement[bool]]:
    """Build the list of active predicates, to be combined with AND."""
    clauses: list[ColumnElement[bool]] = []
    if not _blank(filters.search):
        clauses.append(search_clause(filters.search))
    if not _blank(filters.category):
        clauses.append(category_clause(filters.category))
    if filters.author_id is not None:
        clauses.append(author_clause(filters.author_id))
    if filters.date_from is not None:
        clauses.append(created_from_clause(filters.date_from))
    if filters.date_to is not None:
        clauses.append(created_to_clause(filters.date_to))
    return clauses


def order_clauses(sort: Optional[str]) -> list[ColumnElement[Any]]:
    """Translate ``sort`` into ORDER BY clauses with an ``id`` tie-break.

    A leading ``-`` means descending. Without ``sort`` the newest posts come
    first.

    Raises:
        ValidationError: If the field is not sortable
    """
    sort_key = DEFAULT_SORT if _blank(sort) else sort.strip()
    descending = sort_key.startswith("-")
    field_name = sort_key[1:] if descending else sort_key

    column = SORTABLE_FIELDS.get(field_name)
    if column is None:
        allowed = ", ".join(sorted(SORTABLE_FIELDS))
        raise ValidationError({"sort": [f"Cannot sort by '{field_name}'. Allowed fields: {allowed}."]})

    clauses = [column.desc() if descending else column.asc()]
    if field_name != "id":
        clauses.append(Post.id.asc())
    return clauses


class PostQuery:
    """Composable listing query over posts."""

    def __init__(self, filters: PostFilters):
        self.filters = filters
        self._order = order_clauses(filters.sort)

    def where(self) -> list[ColumnElement[bool]]:
        return filter_clauses(self.filters)

    def count_statement(self) -> Select:
        return select(func.count(Post.id)).where(*self.where())

    def statement(self) -> Select:
        """Ordered SELECT returning posts with their author loaded."""
        return (
            select(Post)
            .where(*self.where())
            .order_by(*self._order)
            .options(selectinload(Post.author))
        )


def parse_page_number(raw: Optional[str], default: int, maximum: Optional[int] = None) -> int:
    """Parse a positive integer query value, falling back to ``default``.

    Missing, non-numeric and non-positive values yield the default; values
    above ``maximum`` are capped.
    """
    try:
        value = int(raw) if raw is not None else default
    except (TypeError, ValueError):
        value = default
    if value < 1:
        value = default
    if maximum is not None:
        value = min(value, maximum)
    return value


def page_request(page: Optional[str], per_page: Optional[str]) -> PageRequest:
    """Build a PageRequest from raw query values using the configured defaults."""
    return PageRequest(
        page=parse_page_number(page, 1),
        per_page=parse_page_number(per_page, settings.default_per_page, settings.max_per_page),
    )


def paginate(db: Session, query: PostQuery, request: PageRequest) -> Page:
    """Run ``query`` and return the requested page.

    Pages past the end are empty; their offset is never sent to the database.
    """
    total = db.scalar(query.count_statement()) or 0
    result = Page(items=[], total=total, page=request.page, per_page=request.per_page)
    if request.page <= result.last_page:
        result.items = list(
            db.scalars(
                query.statement().offset(request.offset).limit(request.per_page)
            ).all()
        )
    logger.debug(f"Listed {len(result.items)} of {total} posts (page {request.page}, per_page {request.per_page})")
    return result


def page_links(url: URL, page: Page) -> dict[str, Optional[str]]:
    """Links to the first, last, previous and next pages.

    The caller's query parameters are kept and only ``page`` is replaced.
    """

    def link(number: int) -> str:
        return str(url.include_query_params(page=number))

    return {
        "first": link(1),
        "last": link(page.last_page),
        "prev": link(page.page - 1) if page.page > 1 else None,
        "next": link(page.page + 1) if page.page < page.last_page else None,
    }


def page_meta(url: URL, page: Page) -> dict[str, Any]:
    """Pagination metadata describing ``page``."""
    return {
        "current_page": page.page,
        "from": page.first_item,
        "to": page.last_item,
        "last_page": page.last_page,
        "per_page": page.per_page,
        "total": page.total,
        "path": str(url.replace(query="")),
    }
