"""
Scale an ingredient formula to a production quantity and write the result
into the raw-material rows of a table.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Sequence, Tuple

from .anchors import ScalingAnchors
from .formula_catalog import lookup_formula
from .model import Row
from .utils import parse_number, round_half_up

logger = logging.getLogger(__name__)

AMOUNT_PLACES = 3


def scale_formula(product_name: str, quantity: Any) -> Dict[str, Decimal]:
    """
    Multiply every ingredient ratio of a product by a quantity.

    Args:
        product_name: Exact product name as listed in the formula catalog
        quantity: Production quantity in the formula's base unit (litres)

    Returns:
        Ingredient name -> amount, rounded half-up to 3 decimals. Empty when
        the product has no formula or the quantity is not a positive number.
    """
    liters = parse_number(quantity)
    if liters is None or liters <= 0:
        return {}

    formula = lookup_formula(product_name)
    if formula is None:
        return {}

    return {
        ingredient.name: round_half_up(ingredient.amount_per_unit * liters, AMOUNT_PLACES)
        for ingredient in formula.ingredients
    }


def apply_scaling_to_rows_with_count(
    rows: Sequence[Row], anchors: ScalingAnchors, product_name: str, quantity: Any
) -> Tuple[List[Row], int]:
    """
    Write scaled ingredient amounts into matching rows.

    The first row holds the process data (product and litres) and is never
    treated as an ingredient row. Rows whose ingredient name is not in the
    formula keep their current amount.

    Returns:
        A new row list and the number of rows that were updated
    """
    amounts = scale_formula(product_name, quantity)
    new_rows = [dict(row or {}) for row in rows]
    if not amounts:
        return new_rows, 0

    updated = 0
    for row in new_rows[1:]:
        ingredient = row.get(anchors.name_column_id)
        if isinstance(ingredient, str) and ingredient in amounts:
            row[anchors.amount_column_id] = str(amounts[ingredient])
            updated += 1

    logger.info(
        "Scaled formula '%s' to %s: %d ingredient rows updated", product_name, quantity, updated
    )
    return new_rows, updated


def apply_scaling_to_rows(
    rows: Sequence[Row], anchors: ScalingAnchors, product_name: str, quantity: Any
) -> List[Row]:
    """Return a copy of `rows` with scaled ingredient amounts applied"""
    new_rows, _ = apply_scaling_to_rows_with_count(rows, anchors, product_name, quantity)
    return new_rows
