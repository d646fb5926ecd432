"""Generic search, filter, sort and paginate facility shared by all listings."""

import math
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from ..config import CatalogConfig, catalog_config
from ..models.query import Page, PageParams

T = TypeVar('T')

Predicate = Callable[[T], bool]
TextField = Callable[[T], Optional[str]]


class QueryEngine:
    """Search, filter, order newest first and slice a page."""

    def __init__(self, config: CatalogConfig = catalog_config):
        self.config = config

    def page_params(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        default_limit: Optional[int] = None,
    ) -> PageParams:
        """Build page parameters, clamping ``page`` to >= 1 and ``limit`` to [1, max]."""
        if default_limit is None:
            default_limit = self.config.default_page_size
        page = 1 if page is None else page
        limit = default_limit if limit is None else limit
        return PageParams(
            page=max(1, page),
            limit=max(1, min(self.config.max_page_size, limit)),
        )

    @staticmethod
    def search(items: Iterable[T], term: Optional[str], fields: Sequence[TextField]) -> List[T]:
        """Keep items where any field contains ``term``, case-insensitively."""
        items = list(items)
        if not term:
            return items
        needle = term.lower()
        return [
            item for item in items
            if any(needle in (field(item) or "").lower() for field in fields)
        ]

    @staticmethod
    def newest_first(items: Iterable[T]) -> List[T]:
        """Order by ``created_at`` descending.

        Ties keep reverse insertion order, so the most recently inserted
        record comes first.
        """
        return sorted(reversed(list(items)), key=lambda item: item.created_at, reverse=True)

    @staticmethod
    def paginate(items: Sequence[T], params: PageParams) -> Page:
        """Slice one page. Pages past the end come back empty."""
        total = len(items)
        start = params.offset
        return Page(
            items=list(items[start:start + params.limit]),
            total=total,
            page=params.page,
            limit=params.limit,
            total_pages=math.ceil(total / params.limit),
        )

    def run(
        self,
        items: Iterable[T],
        params: PageParams,
        predicates: Sequence[Predicate] = (),
        search: Optional[str] = None,
        search_fields: Sequence[TextField] = (),
    ) -> Page:
        """Search, apply every predicate, sort newest first, then paginate."""
        matched = self.search(items, search, search_fields)
        for predicate in predicates:
            matched = [item for item in matched if predicate(item)]
        return self.paginate(self.newest_first(matched), params)
