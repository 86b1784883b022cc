from __future__ import annotations
import logging
import uuid
from typing import Dict, List, Optional, Sequence

from table_engine.model import ProductRecord, Row, TableConfig
from table_engine.table import DynamicTable

logger = logging.getLogger(__name__)

# In-memory tables keyed by id, plus the product snapshot they all share
tables: Dict[str, DynamicTable] = {}
_products: List[ProductRecord] = []


def get_products() -> List[ProductRecord]:
    return list(_products)


def set_products(products: Sequence[ProductRecord]) -> List[str]:
    """
    Replace the shared product snapshot.

    Every stored table gets exactly one recompute pass.

    Returns:
        Ids of the tables whose derived cells changed
    """
    global _products
    _products = list(products)
    changed = []
    for tid, table in tables.items():
        if table.replace_products(_products).changed:
            changed.append(tid)
    logger.info("Product snapshot replaced: %d products, %d tables changed", len(_products), len(changed))
    return changed


def create_table(
    config: TableConfig,
    rows: Optional[Sequence[Row]] = None,
    name: str = "Table1",
    tid: Optional[str] = None,
) -> tuple[str, DynamicTable]:
    tid = tid or uuid.uuid4().hex
    if tid in tables:
        raise ValueError(f"Table {tid} already exists")
    tables[tid] = DynamicTable(config, rows=rows, products=_products, name=name)
    return tid, tables[tid]


def get_table(tid: str) -> DynamicTable:
    if tid not in tables:
        raise KeyError(f"Table {tid} not found")
    return tables[tid]


def delete_table(tid: str) -> None:
    tables.pop(tid, None)


def clear() -> None:
    """Drop every table and the product snapshot"""
    global _products
    tables.clear()
    _products = []
