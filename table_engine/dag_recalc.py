"""
Column dependency graph.

Dependencies are single-hop: a derived column reads one source column that
holds user input. This module builds the graph of those links for a table,
rejects configurations that break the rule (self references, unknown
sources, chains through another derived column, cycles), and yields the
columns that are safe to evaluate in a deterministic order.
"""

from collections import defaultdict
from typing import Dict, List, NamedTuple, Sequence, Set

from .model import ColumnDefinition


class RejectedColumn(NamedTuple):
    column_id: str
    reason: str


class DependencyGraph:
    """
    Tracks which columns derive from which.

    forward_deps maps a source column to the derived columns reading it;
    reverse_deps maps a derived column to its source.
    """

    def __init__(self, columns: Sequence[ColumnDefinition]):
        self.columns = list(columns)
        self.column_ids = [column.id for column in self.columns]
        self.forward_deps: Dict[str, Set[str]] = defaultdict(set)
        self.reverse_deps: Dict[str, str] = {}
        self.dependent_columns: List[ColumnDefinition] = []

        for column in self.columns:
            if not column.is_dependent:
                continue
            source = column.dependency.source_column_id
            self.dependent_columns.append(column)
            self.forward_deps[source].add(column.id)
            self.reverse_deps[column.id] = source

        self.rejected: List[RejectedColumn] = self._find_rejected()

    def _find_cycle_members(self) -> Set[str]:
        """Columns that sit on a cycle of the derived -> source links."""
        on_cycle: Set[str] = set()
        for start in self.reverse_deps:
            seen = [start]
            current = self.reverse_deps.get(start)
            while current is not None and current not in seen:
                seen.append(current)
                current = self.reverse_deps.get(current)
            if current == start:
                on_cycle.update(seen)
        return on_cycle

    def _find_rejected(self) -> List[RejectedColumn]:
        known = set(self.column_ids)
        cycle_members = self._find_cycle_members()
        rejected = []
        for column in self.dependent_columns:
            source = self.reverse_deps[column.id]
            if source == column.id:
                rejected.append(RejectedColumn(column.id, "references itself"))
            elif source not in known:
                rejected.append(RejectedColumn(column.id, f"references unknown column '{source}'"))
            elif column.id in cycle_members:
                rejected.append(RejectedColumn(column.id, "is part of a dependency cycle"))
            elif source in self.reverse_deps:
                rejected.append(
                    RejectedColumn(column.id, f"reads derived column '{source}' (chained dependency)")
                )
        return rejected

    def evaluation_order(self) -> List[ColumnDefinition]:
        """
        Derived columns that can be evaluated, in declaration order.

        Single-hop links never depend on each other's results, so declaration
        order is already a valid topological order.
        """
        rejected_ids = {r.column_id for r in self.rejected}
        return [column for column in self.dependent_columns if column.id not in rejected_ids]

    def is_derived(self, column_id: str) -> bool:
        return column_id in self.reverse_deps
