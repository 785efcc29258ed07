"""Client-side search, sort and pagination over a record collection.

The engine never changes the collection it is given.  The visible page is
recomputed from ``items`` plus the view state (search term, sort column and
direction, current page) every time it is asked for.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, is_dataclass, replace
from functools import cmp_to_key, lru_cache
from numbers import Number
from typing import Any, Iterable, Optional, Sequence

from PySide6.QtCore import QCollator, QLocale, Qt

from models.records import plain_value

ASC = "asc"
DESC = "desc"


@dataclass(frozen=True)
class TableViewState:
    search_term: str = ""
    sort_column: Optional[str] = None
    sort_direction: str = ASC
    current_page: int = 1
    page_size: int = 10


def _row_values(row: Any) -> Iterable[Any]:
    if is_dataclass(row):
        return (getattr(row, f.name) for f in fields(row))
    if isinstance(row, dict):
        return row.values()
    return vars(row).values()


def _cell(row: Any, column: str) -> Any:
    if isinstance(row, dict):
        value = row.get(column)
    else:
        value = getattr(row, column, None)
    return plain_value(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


@lru_cache(maxsize=1)
def _collator() -> QCollator:
    collator = QCollator(QLocale())
    collator.setCaseSensitivity(Qt.CaseInsensitive)
    return collator


def compare_values(a: Any, b: Any) -> int:
    """Numbers compare numerically, anything else as collated text.

    Text uses the system locale's collation, ignoring case, so "alice"
    sorts before "Charlie" even when the process runs in the C locale.
    """

    a, b = plain_value(a), plain_value(b)
    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)
    a_text = "" if a is None else str(a)
    b_text = "" if b is None else str(b)
    result = _collator().compare(a_text, b_text)
    return (result > 0) - (result < 0)


def matches(row: Any, term: str) -> bool:
    if not term:
        return True
    needle = term.casefold()
    for value in _row_values(row):
        value = plain_value(value)
        if value is None:
            continue
        if needle in str(value).casefold():
            return True
    return False


class TableEngine:
    def __init__(
        self,
        items: Sequence[Any] = (),
        *,
        page_size: int = 10,
        searchable: bool = True,
        sortable: bool = True,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be greater than zero")
        self._items: tuple[Any, ...] = tuple(items)
        self._searchable = searchable
        self._sortable = sortable
        self._view = TableViewState(page_size=page_size)

    # ----- View state --------------------------------------------------
    @property
    def view(self) -> TableViewState:
        return self._view

    @property
    def items(self) -> tuple[Any, ...]:
        return self._items

    @property
    def search_term(self) -> str:
        return self._view.search_term

    @property
    def sort_column(self) -> Optional[str]:
        return self._view.sort_column

    @property
    def sort_direction(self) -> str:
        return self._view.sort_direction

    @property
    def page_size(self) -> int:
        return self._view.page_size

    @property
    def current_page(self) -> int:
        return self._clamped(self._view.current_page)

    def set_items(self, items: Sequence[Any]) -> None:
        self._items = tuple(items)
        self._store_page(self._view.current_page)

    def set_search(self, term: str) -> None:
        if not self._searchable:
            return
        self._view = replace(self._view, search_term=term or "", current_page=1)

    def toggle_sort(self, column: str) -> None:
        if not self._sortable:
            return
        if self._view.sort_column == column:
            direction = DESC if self._view.sort_direction == ASC else ASC
        else:
            direction = ASC
        self._view = replace(self._view, sort_column=column, sort_direction=direction)
        self._store_page(self._view.current_page)

    def set_page(self, page: int) -> None:
        self._store_page(page)

    def next_page(self) -> None:
        self._store_page(self.current_page + 1)

    def previous_page(self) -> None:
        self._store_page(self.current_page - 1)

    # ----- Derived rows ------------------------------------------------
    def filtered(self) -> list[Any]:
        term = self._view.search_term if self._searchable else ""
        return [row for row in self._items if matches(row, term)]

    def sorted_rows(self) -> list[Any]:
        rows = self.filtered()
        column = self._view.sort_column
        if not self._sortable or column is None:
            return rows
        key = cmp_to_key(lambda a, b: compare_values(_cell(a, column), _cell(b, column)))
        # sorted() is stable in both directions, so ties keep server order.
        return sorted(rows, key=key, reverse=self._view.sort_direction == DESC)

    @property
    def filtered_count(self) -> int:
        return len(self.filtered())

    @property
    def page_count(self) -> int:
        return math.ceil(self.filtered_count / self._view.page_size)

    @property
    def has_pager(self) -> bool:
        return self.page_count > 1

    @property
    def page_label(self) -> str:
        return f"{self.current_page} / {max(1, self.page_count)}"

    def paginate(self) -> list[Any]:
        self._store_page(self._view.current_page)
        page = self._view.current_page
        size = self._view.page_size
        return self.sorted_rows()[(page - 1) * size : page * size]

    @property
    def visible_rows(self) -> list[Any]:
        return self.paginate()

    # ----- Internal utilities -----------------------------------------
    def _clamped(self, page: int) -> int:
        last = max(1, self.page_count)
        return min(max(1, int(page)), last)

    def _store_page(self, page: int) -> None:
        clamped = self._clamped(page)
        if clamped != self._view.current_page:
            self._view = replace(self._view, current_page=clamped)


__all__ = ["ASC", "DESC", "TableViewState", "TableEngine", "compare_values", "matches"]
