# storefront/repos/query.py
"""
Budowanie zapytan dla list w panelu admina: search, filtry, sort, paginacja.

ListQuery -> (select z where/order/offset/limit, select count(*)).
Pola sortowania i filtrow musza byc na allow-liscie danego widoku.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from storefront.domain.schemas import ListQuery


@dataclass
class ListView:
    sortable: Dict[str, Any]
    searchable: List[Any] = field(default_factory=list)
    filterable: Dict[str, Any] = field(default_factory=dict)
    # unikalna kolumna (pk) jako drugi klucz sortu, strony sie nie nakladaja
    tiebreak: Any = None


def build_list_statements(base: Select, query: ListQuery, view: ListView) -> Tuple[Select, Select]:
    column = view.sortable.get(query.sort_field)
    if column is None:
        raise ValueError(f"Cannot sort by '{query.sort_field}'")

    stmt = base

    if query.search and view.searchable:
        pattern = f"%{query.search}%"
        stmt = stmt.where(or_(*(col.ilike(pattern) for col in view.searchable)))

    for name, value in query.filters.items():
        #"all" / puste = brak filtra, tak jak w selectach UI
        if value is None or value == "" or value == "all":
            continue
        col = view.filterable.get(name)
        if col is None:
            raise ValueError(f"Cannot filter by '{name}'")
        stmt = stmt.where(col == value)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())

    columns = [column]
    if view.tiebreak is not None and view.tiebreak is not column:
        columns.append(view.tiebreak)
    ordering = [c.asc() if query.sort_direction == "asc" else c.desc() for c in columns]
    page_stmt = stmt.order_by(*ordering).offset(query.offset).limit(query.page_size)

    return page_stmt, count_stmt


def run_list_query(
    db: Session,
    base: Select,
    query: ListQuery,
    view: ListView,
    options: Sequence[Any] = (),
) -> Tuple[Sequence[Any], int]:
    page_stmt, count_stmt = build_list_statements(base, query, view)
    if options:
        #loader options tylko na stronie, count idzie po czystym select
        page_stmt = page_stmt.options(*options)
    rows = db.execute(page_stmt).scalars().all()
    total = db.execute(count_stmt).scalar_one()
    return rows, total
