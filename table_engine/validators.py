"""
Validator functions for table configurations.

The engine itself tolerates bad configurations (derived cells just stay
empty); these checks let the form designer and strict hosts surface the
mistakes instead.
"""
from collections import Counter
from typing import List

from .dag_recalc import DependencyGraph
from .dependency_engine import first_quantity_column
from .model import Calculation, SourceKind, TableConfig


class TableConfigError(ValueError):
    """Raised when a table configuration violates the dependency rules."""

    def __init__(self, issues: List[str]):
        self.issues = issues
        super().__init__("Invalid table configuration: " + "; ".join(issues))


def validate_table_config(config: TableConfig) -> List[str]:
    """
    Check a table configuration against the dependency rules.

    Rules:
    1. Column ids are unique across the whole table
    2. A column with a dependency is read-only
    3. The source column exists, is another column, and is not itself derived
    4. A product-sourced `total` needs a plain number column holding the quantity

    Returns:
        A list of human-readable problems; empty when the configuration is valid
    """
    issues = []
    columns = config.columns

    duplicates = [cid for cid, count in Counter(c.id for c in columns).items() if count > 1]
    for cid in duplicates:
        issues.append(f"Column id '{cid}' is used more than once")

    graph = DependencyGraph(columns)
    for column in graph.dependent_columns:
        if not column.read_only:
            issues.append(f"Column '{column.id}' has a dependency but is not read-only")
        if column.dependency.source_kind is None or column.dependency.calculation is None:
            issues.append(f"Column '{column.id}' has an incomplete dependency")
        # A quantity-sourced total reads its quantity from the source column
        if (
            column.dependency.source_kind == SourceKind.PRODUCT
            and column.dependency.calculation == Calculation.TOTAL
            and first_quantity_column(columns) is None
        ):
            issues.append(f"Column '{column.id}' computes a total but the table has no quantity column")

    for rejected in graph.rejected:
        issues.append(f"Column '{rejected.column_id}' {rejected.reason}")

    return issues


def check_table_config(config: TableConfig) -> None:
    """Raise TableConfigError if the configuration has any problem"""
    issues = validate_table_config(config)
    if issues:
        raise TableConfigError(issues)
