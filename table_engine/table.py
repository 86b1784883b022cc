import copy
import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from . import settings
from .anchors import resolve_scaling_anchors
from .dag_recalc import DependencyGraph
from .formula_catalog import lookup_formula
from .model import ColumnKind, ProductRecord, Row, TableConfig
from .recalc import RecalcResult, recalculate_table
from .scaling import apply_scaling_to_rows_with_count
from .utils import ProductCatalog, is_empty, parse_number
from .validators import check_table_config

logger = logging.getLogger(__name__)

RowsListener = Callable[[List[Row]], None]


class FormulaOutcome(NamedTuple):
    status: str  # "success" or "error"
    updated: int
    message: str


class DynamicTable:
    def __init__(
        self,
        config: TableConfig,
        rows: Optional[Sequence[Row]] = None,
        products: Optional[Sequence[ProductRecord]] = None,
        on_change: Optional[RowsListener] = None,
        name: str = "Table1",
    ):
        """
        Initialize a dynamic table for data entry.

        Args:
            config: Sections, columns and row settings from the form designer
            rows: Saved row data; blank rows are created when empty
            products: Product snapshot used by derived columns
            on_change: Called with a full copy of the rows after every update
            name: Name of the table (the form field it belongs to)
        """
        if settings.STRICT_TABLE_CONFIG:
            check_table_config(config)

        self.name = name
        self.config = config
        self.catalog = ProductCatalog(products or ())
        self.on_change = on_change
        self.anchors = resolve_scaling_anchors(config.sections)
        self._graph = DependencyGraph(config.columns)
        self.rows: List[Row] = self._initial_rows(rows)

        # Bring saved data in line with the current catalog without notifying
        self.rows = recalculate_table(self.config.columns, self.rows, self.catalog).rows

    def _initial_rows(self, rows: Optional[Sequence[Row]]) -> List[Row]:
        template = self.config.row_template()
        if rows:
            return [{**template, **(row or {})} for row in rows]
        if self.config.initial_data:
            return [{**template, **row} for row in self.config.initial_data]
        return [dict(template) for _ in range(max(self.config.rows, 0))]

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def n_cols(self) -> int:
        return len(self.config.columns)

    @property
    def headers(self) -> List[str]:
        return [column.header or column.id for column in self.config.columns]

    def _emit(self) -> None:
        if self.on_change is not None:
            self.on_change(copy.deepcopy(self.rows))

    def _commit(self, rows: List[Row]) -> RecalcResult:
        """Recalculate derived cells on `rows`, store them and emit once."""
        result = recalculate_table(self.config.columns, rows, self.catalog)
        self.rows = result.rows
        self._emit()
        return result

    def _coerce_input(self, column_id: str, value: Any) -> Any:
        column = self.config.column(column_id)
        if column.kind != ColumnKind.NUMBER or not isinstance(value, str):
            return value
        number = parse_number(value)
        if number is None:
            return value
        return int(number) if number.is_integer() and "." not in value else number

    def resolve_product_name(self, value: Any) -> Optional[str]:
        """
        Turn a product-column value into a formula catalog name.

        Product columns may hold a catalog id or the product name itself.
        """
        if is_empty(value):
            return None
        product = self.catalog.find(value)
        if product is not None and product.name:
            return product.name
        return str(value)

    def set_cell(self, row_index: int, column_id: str, value: Any) -> RecalcResult:
        """Set the value of a cell typed by the user"""
        if row_index < 0 or row_index >= self.n_rows:
            raise ValueError(f"Row index out of bounds: {row_index}")
        if self.config.column(column_id) is None:
            raise ValueError(f"Unknown column: {column_id}")
        if self._graph.is_derived(column_id):
            raise ValueError(f"Column {column_id} is computed and cannot be edited")

        new_rows = [dict(row) for row in self.rows]
        new_rows[row_index][column_id] = self._coerce_input(column_id, value)

        anchors = self.anchors
        if (
            settings.AUTO_SCALE_ON_EDIT
            and anchors is not None
            and column_id in (anchors.product_column_id, anchors.quantity_column_id)
        ):
            process_row = new_rows[0]
            product_name = self.resolve_product_name(process_row.get(anchors.product_column_id))
            if product_name:
                new_rows, _ = apply_scaling_to_rows_with_count(
                    new_rows, anchors, product_name, process_row.get(anchors.quantity_column_id)
                )

        return self._commit(new_rows)

    def add_row(self, values: Optional[Row] = None) -> None:
        """Add a new row at the bottom of the table"""
        if not self.config.dynamic_rows:
            raise ValueError(f"Table {self.name} has a fixed number of rows")
        row = {**self.config.row_template(), **(values or {})}
        self._commit([dict(r) for r in self.rows] + [row])

    def delete_row(self, index: int) -> None:
        """Delete a row by its index (0-based)"""
        if not self.config.dynamic_rows:
            raise ValueError(f"Table {self.name} has a fixed number of rows")
        if index < 0 or index >= self.n_rows:
            raise ValueError(f"Row index out of bounds: {index}")
        self._commit([dict(r) for i, r in enumerate(self.rows) if i != index])

    def recalculate(self) -> RecalcResult:
        """Run one recompute pass; emits only when a derived cell changed"""
        result = recalculate_table(self.config.columns, self.rows, self.catalog)
        if result.changed:
            self.rows = result.rows
            self._emit()
        return result

    def replace_products(self, products: Sequence[ProductRecord]) -> RecalcResult:
        """Swap in a refreshed product snapshot and recompute once"""
        self.catalog = ProductCatalog(products)
        logger.info("Table %s: product snapshot replaced (%d products)", self.name, len(self.catalog))
        return self.recalculate()

    def apply_formula(self, product_name: Optional[str] = None, quantity: Any = None) -> FormulaOutcome:
        """
        Fill the raw-material rows from the product formula.

        Product and litres default to the values in the first row. The
        outcome message is meant to be shown to the user as is.
        """
        anchors = self.anchors
        if anchors is None:
            return FormulaOutcome("error", 0, "This table has no product, litres and raw material columns")

        process_row = self.rows[0] if self.rows else {}
        if product_name is None:
            product_name = self.resolve_product_name(process_row.get(anchors.product_column_id))
        if quantity is None:
            quantity = process_row.get(anchors.quantity_column_id)
        liters = parse_number(quantity)

        if not product_name or liters is None or liters <= 0:
            return FormulaOutcome("error", 0, "Select a product and enter the litres to produce")
        if lookup_formula(product_name) is None:
            return FormulaOutcome("error", 0, f'No formula found for product "{product_name}"')

        new_rows, updated = apply_scaling_to_rows_with_count(self.rows, anchors, product_name, liters)
        if updated == 0:
            logger.warning("Table %s: no ingredient rows match the %s formula", self.name, product_name)
            return FormulaOutcome("error", 0, "No ingredient rows match the formula")

        self._commit(new_rows)
        return FormulaOutcome(
            "success", updated, f"Updated {updated} ingredients from the {product_name} formula ({liters:g} litres)"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the table to a dictionary representation"""
        return {
            "name": self.name,
            "config": self.config.model_dump(mode="json", by_alias=True, exclude_none=True),
            "rows": copy.deepcopy(self.rows),
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], products: Optional[Sequence[ProductRecord]] = None
    ) -> "DynamicTable":
        """Create a table from a dictionary representation"""
        return cls(
            TableConfig.model_validate(data["config"]),
            rows=data.get("rows"),
            products=products,
            name=data.get("name", "Table1"),
        )
