import json
import hashlib
from typing import Dict, Any, Optional

from . import settings
from .table import DynamicTable


def table_summary(table: DynamicTable, sample_rows: Optional[int] = None) -> Dict[str, Any]:
    """
    Create a compact summary of a table instead of full serialization.

    Args:
        table: The table to summarize
        sample_rows: Number of rows to sample (default from SUMMARY_SAMPLE_ROWS)

    Returns:
        Dict with table dimensions, headers, sample rows, and a hash
    """
    if sample_rows is None:
        sample_rows = settings.SUMMARY_SAMPLE_ROWS

    sample_rows = max(0, min(sample_rows, table.n_rows))

    # Hash of the row content for easy change detection
    hash_str = hashlib.sha256(
        json.dumps(table.rows, default=str, sort_keys=True).encode()
    ).hexdigest()[:12]

    return {
        "name": table.name,
        "n_rows": table.n_rows,
        "n_cols": table.n_cols,
        "headers": table.headers,
        "sample": table.rows[:sample_rows],
        "derived_columns": sum(1 for c in table.config.columns if c.is_dependent),
        "hash": hash_str,
        "non_empty_cells": sum(
            1 for row in table.rows for value in row.values()
            if value not in (None, "", False)
        ),
    }
