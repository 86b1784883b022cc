"""
Dependency Evaluator

Computes the value of a read-only, dependency-bearing column from the row it
sits in and the product catalog snapshot. Every failure (missing source,
unknown product, malformed number, unsupported combination) yields EMPTY
instead of raising, so partially filled rows never interrupt data entry.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from .model import (
    Calculation,
    ColumnDefinition,
    ColumnKind,
    ProductRecord,
    Row,
    SourceKind,
)
from .utils import EMPTY, ProductCatalog, format_fixed, is_empty, parse_number

PRICE_PLACES = 2

Products = Union[Sequence[ProductRecord], ProductCatalog]


@dataclass(frozen=True)
class _Context:
    product: ProductRecord
    row: Row
    columns: Sequence[ColumnDefinition]
    factor: float
    # Only set for quantity-sourced dependencies
    quantity: Optional[float] = None


def first_quantity_column(columns: Sequence[ColumnDefinition]) -> Optional[ColumnDefinition]:
    """First plain number column that carries no dependency of its own"""
    for column in columns:
        if column.kind == ColumnKind.NUMBER and column.dependency is None:
            return column
    return None


def first_product_column(columns: Sequence[ColumnDefinition]) -> Optional[ColumnDefinition]:
    for column in columns:
        if column.kind == ColumnKind.PRODUCT:
            return column
    return None


def _scaled(value: Optional[float], *multipliers: float) -> str:
    if value is None:
        return EMPTY
    for multiplier in multipliers:
        value *= multiplier
    return format_fixed(value, PRICE_PLACES)


# --- product-sourced strategies -------------------------------------------

def _product_price(ctx: _Context) -> str:
    return _scaled(ctx.product.price, ctx.factor)


def _product_weight(ctx: _Context) -> str:
    return _scaled(ctx.product.weight, ctx.factor)


def _product_tax(ctx: _Context) -> str:
    # Tax is a price-scaled surcharge: same arithmetic as price
    return _scaled(ctx.product.price, ctx.factor)


def _product_total(ctx: _Context) -> str:
    quantity_column = first_quantity_column(ctx.columns)
    if quantity_column is None:
        return EMPTY
    raw = ctx.row.get(quantity_column.id)
    quantity = 0.0 if is_empty(raw) else parse_number(raw)
    if quantity is None:
        return EMPTY
    return _scaled(ctx.product.price, quantity, ctx.factor)


# --- quantity-sourced strategies ------------------------------------------

def _quantity_total(ctx: _Context) -> str:
    return _scaled(ctx.product.price, ctx.quantity, ctx.factor)


def _quantity_weight(ctx: _Context) -> str:
    return _scaled(ctx.product.weight, ctx.quantity, ctx.factor)


STRATEGIES: Dict[Tuple[SourceKind, Calculation], Callable[[_Context], str]] = {
    (SourceKind.PRODUCT, Calculation.PRICE): _product_price,
    (SourceKind.PRODUCT, Calculation.WEIGHT): _product_weight,
    (SourceKind.PRODUCT, Calculation.TAX): _product_tax,
    (SourceKind.PRODUCT, Calculation.TOTAL): _product_total,
    (SourceKind.QUANTITY, Calculation.TOTAL): _quantity_total,
    (SourceKind.QUANTITY, Calculation.WEIGHT): _quantity_weight,
}


def evaluate_dependency(
    column: ColumnDefinition,
    row: Optional[Row],
    columns: Sequence[ColumnDefinition],
    products: Products,
) -> str:
    """
    Evaluate a dependency-bearing column for one row.

    Args:
        column: The column whose value is derived
        row: The row being evaluated
        columns: Every column of the table, in declaration order; used to
            find the quantity and product columns by convention
        products: Product snapshot, or a prebuilt ProductCatalog

    Returns:
        The derived value formatted with 2 decimals, or EMPTY
    """
    dependency = column.dependency
    if dependency is None or dependency.source_column_id is None:
        return EMPTY
    strategy = STRATEGIES.get((dependency.source_kind, dependency.calculation))
    if strategy is None:
        return EMPTY

    row = row or {}
    source_value = row.get(dependency.source_column_id)
    if is_empty(source_value):
        return EMPTY

    factor = dependency.factor if dependency.factor is not None else 1.0
    catalog = ProductCatalog.coerce(products)

    quantity = None
    if dependency.source_kind == SourceKind.PRODUCT:
        product = catalog.find(source_value)
    else:
        quantity = parse_number(source_value)
        if quantity is None:
            return EMPTY
        product_column = first_product_column(columns)
        if product_column is None:
            return EMPTY
        product = catalog.find(row.get(product_column.id))

    if product is None:
        return EMPTY

    return strategy(_Context(product=product, row=row, columns=columns, factor=factor, quantity=quantity))
