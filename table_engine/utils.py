"""
Utility functions shared by the dependency evaluator and the scaling calculator.
"""
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Dict, Iterable, Optional, Sequence

from .model import ProductRecord

EMPTY = ""


def is_empty(value: Any) -> bool:
    """Check if a cell value counts as empty (None or a blank string)"""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a cell value as a finite float.

    Args:
        value: A number or a numeric string as typed into a form

    Returns:
        The float value, or None if the value is not a finite number
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def round_half_up(value: float, places: int) -> Decimal:
    """
    Round a float half-up to a fixed number of decimal places.

    The float goes through its shortest repr, so a product such as
    0.0016 * 500 that lands a hair off 0.8 in binary still rounds to 0.800.
    Precision grows with the magnitude so any finite float can be quantized.
    """
    number = Decimal(repr(value))
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + places + 2)
        return number.quantize(quantum, rounding=ROUND_HALF_UP)


def format_fixed(value: Optional[float], places: int = 2) -> str:
    """Format a number with exactly `places` fraction digits, or EMPTY if unusable"""
    if value is None or not math.isfinite(value):
        return EMPTY
    return str(round_half_up(value, places))


def identifier_key(identifier: Any) -> str:
    """
    Normalise a product identifier for comparison.

    Catalog ids are numeric but forms serialise them as strings, and a form
    may turn "7" into 7.0 when it coerces numeric input.
    """
    if isinstance(identifier, float) and identifier.is_integer():
        return str(int(identifier))
    return str(identifier).strip()


def find_product(products: Iterable[ProductRecord], identifier: Any) -> Optional[ProductRecord]:
    """Find a product by stringified id equality; None when not found"""
    if is_empty(identifier):
        return None
    key = identifier_key(identifier)
    for product in products:
        if identifier_key(product.id) == key:
            return product
    return None


class ProductCatalog:
    """
    Read-only index over a product snapshot.

    Built once per recompute pass so each row resolves its product without
    rescanning the snapshot.
    """

    def __init__(self, products: Sequence[ProductRecord] = ()):
        self.products = list(products)
        self._by_id: Dict[str, ProductRecord] = {}
        for product in self.products:
            # First occurrence wins, matching a linear scan
            self._by_id.setdefault(identifier_key(product.id), product)

    @classmethod
    def coerce(cls, products) -> "ProductCatalog":
        if isinstance(products, ProductCatalog):
            return products
        return cls(products or ())

    def find(self, identifier: Any) -> Optional[ProductRecord]:
        if is_empty(identifier):
            return None
        return self._by_id.get(identifier_key(identifier))

    def __len__(self) -> int:
        return len(self.products)
