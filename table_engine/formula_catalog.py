"""
Ingredient formulas for each plant product.

Amounts are kilograms of ingredient per litre of production. The catalog is
static; scaling a formula to a batch size lives in `scaling.py`.
"""

from typing import List, NamedTuple, Optional, Tuple


class Ingredient(NamedTuple):
    name: str
    amount_per_unit: float
    unit: str = "kg"


class FormulaEntry(NamedTuple):
    product_name: str
    ingredients: Tuple[Ingredient, ...]
    base_unit: str = "litros"


# Every product lists the same raw materials in the same order so the
# "Materia Prima" section of a production sheet can be pre-filled once.
_RAW_MATERIALS = (
    ("leche_vaca", "Leche de Vaca"),
    ("leche_cabra", "Leche de Cabra"),
    ("azucar", "Azúcar"),
    ("glucosa", "Glucosa"),
    ("malto", "Malto"),
    ("bicarbonato", "Bicarbonato"),
    ("sorbato", "Sorbato"),
    ("lecitina", "Lecitina"),
    ("carragenina", "Carragenina"),
    ("grasa", "Grasa"),
    ("pasta", "Pasta"),
    ("antiespumante", "Antiespumante"),
    ("nuez", "Nuez"),
)


def _formula(product_name: str, **ratios: float) -> FormulaEntry:
    """Build an entry from the non-zero ratios; other raw materials are 0."""
    unknown = set(ratios) - {key for key, _ in _RAW_MATERIALS}
    if unknown:
        raise ValueError(f"Unknown raw materials for {product_name}: {sorted(unknown)}")
    return FormulaEntry(
        product_name=product_name,
        ingredients=tuple(Ingredient(name, ratios.get(key, 0)) for key, name in _RAW_MATERIALS),
    )


# Ratios come from the 500 L reference batches (e.g. 90 kg sugar / 500 L = 0.18)
FORMULA_CATALOG: Tuple[FormulaEntry, ...] = (
    _formula("Mielmex 65° Brix", leche_cabra=1, azucar=0.18, bicarbonato=0.0016, sorbato=0.00062),
    _formula("Coro 68° Brix", leche_vaca=0.2, leche_cabra=0.8, azucar=0.18, bicarbonato=0.0016),
    _formula("Cajeton Tradicional", leche_cabra=1, azucar=0.2, glucosa=0.27, malto=0.05,
             bicarbonato=0.0016, sorbato=0.001),
    _formula("Cajeton Espesa", leche_cabra=1, azucar=0.2, glucosa=0.27, malto=0.05,
             bicarbonato=0.0016, sorbato=0.001),
    _formula("Cajeton Esp Chepo", leche_cabra=1, azucar=0.2, glucosa=0.27, malto=0.05,
             bicarbonato=0.0018),
    _formula("Cabri Tradicional", azucar=0.2, glucosa=0.45, malto=0.05, bicarbonato=0.0016,
             sorbato=0.001),
    _formula("Cabri Espesa", azucar=0.2, glucosa=0.45, malto=0.05, bicarbonato=0.0016,
             sorbato=0.001),
    _formula("Horneable", leche_vaca=1, azucar=0.2, glucosa=0.026, malto=0.02, bicarbonato=0.001,
             sorbato=0.0006, lecitina=0.0006, carragenina=0.0036),
    # No ratios yet for these products; every ingredient scales to 0
    _formula("Gloria untable 78° Brix"),
    _formula("Gloria untable 80° Brix"),
    _formula("Pasta Oblea Coro"),
    _formula("Pasta Oblea Cajeton"),
)


def lookup_formula(product_name: str) -> Optional[FormulaEntry]:
    """
    Find the formula for a product by exact, case-sensitive name.

    Returns None when the product has no formula; callers treat that as
    "no scaling available", not as an error.
    """
    if not isinstance(product_name, str):
        return None
    for entry in FORMULA_CATALOG:
        if entry.product_name == product_name:
            return entry
    return None


def list_formulas() -> List[FormulaEntry]:
    """Return every formula in catalog order"""
    return list(FORMULA_CATALOG)
