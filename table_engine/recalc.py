"""
Recalculation Loop

One recompute pass evaluates every derived cell against the current rows and
product snapshot and reports only the cells that actually change. A pass
that changes nothing reports `changed=False`, which is what lets the owner
skip emitting an update and keeps repeated triggers from looping.
"""

import logging
from typing import Any, List, NamedTuple, Sequence, Tuple

from .dag_recalc import DependencyGraph
from .dependency_engine import Products, evaluate_dependency
from .model import ColumnDefinition, Row
from .utils import EMPTY, ProductCatalog

logger = logging.getLogger(__name__)


class CellChange(NamedTuple):
    row_index: int
    column_id: str
    old: Any
    new: str


class RecalcResult(NamedTuple):
    rows: List[Row]
    changed: bool
    changes: Tuple[CellChange, ...] = ()


def collect_changes(
    graph: DependencyGraph, rows: Sequence[Row], catalog: ProductCatalog
) -> List[CellChange]:
    """Evaluate every accepted derived column on every row and diff against stored values"""
    order = graph.evaluation_order()
    changes = []
    for row_index, row in enumerate(rows):
        row = row or {}
        for column in order:
            value = evaluate_dependency(column, row, graph.columns, catalog)
            if value != EMPTY and row.get(column.id) != value:
                changes.append(CellChange(row_index, column.id, row.get(column.id), value))
    return changes


def recalculate_table(
    columns: Sequence[ColumnDefinition], rows: Sequence[Row], products: Products
) -> RecalcResult:
    """
    Bring every derived cell in line with its source.

    Args:
        columns: All table columns in declaration order
        rows: Current row snapshot; never mutated
        products: Product snapshot or prebuilt ProductCatalog

    Returns:
        RecalcResult with a new row list when anything changed, otherwise the
        original rows and changed=False
    """
    graph = DependencyGraph(columns)
    for rejected in graph.rejected:
        logger.warning("Skipping derived column '%s': %s", rejected.column_id, rejected.reason)

    if not graph.dependent_columns:
        return RecalcResult(rows=list(rows), changed=False)

    changes = collect_changes(graph, rows, ProductCatalog.coerce(products))
    if not changes:
        return RecalcResult(rows=list(rows), changed=False)

    new_rows = [dict(row or {}) for row in rows]
    for change in changes:
        new_rows[change.row_index][change.column_id] = change.new

    logger.debug("Recalculation updated %d cells across %d rows", len(changes), len(new_rows))
    return RecalcResult(rows=new_rows, changed=True, changes=tuple(changes))
