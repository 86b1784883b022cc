"""
Locate the anchor columns that drive table-wide formula scaling.

Production sheets do not link their columns explicitly. The scaling action
finds them by convention instead: the product column by type, the litres
column and the kilos column by header substrings, and the raw-material
section by its title. Any anchor that cannot be found makes scaling a no-op.
"""

from typing import Iterable, NamedTuple, Optional, Sequence

from . import settings
from .model import ColumnDefinition, ColumnKind, TableSection


class ScalingAnchors(NamedTuple):
    product_column_id: str
    quantity_column_id: str
    name_column_id: str
    amount_column_id: str


def _contains_marker(text: Optional[str], markers: Iterable[str]) -> bool:
    lowered = (text or "").lower()
    return any(marker in lowered for marker in markers)


def _all_columns(sections: Sequence[TableSection]):
    for section in sections:
        for column in section.columns:
            yield column


def find_quantity_column(
    sections: Sequence[TableSection], markers: Optional[Iterable[str]] = None
) -> Optional[ColumnDefinition]:
    """First column whose header or id mentions litres, scanning all sections"""
    markers = tuple(markers or settings.QUANTITY_MARKERS)
    for column in _all_columns(sections):
        if _contains_marker(column.header, markers) or _contains_marker(column.id, markers):
            return column
    return None


def find_product_column(sections: Sequence[TableSection]) -> Optional[ColumnDefinition]:
    """First product-reference column, scanning all sections"""
    for column in _all_columns(sections):
        if column.kind == ColumnKind.PRODUCT:
            return column
    return None


def find_ingredient_section(
    sections: Sequence[TableSection], markers: Optional[Iterable[str]] = None
) -> Optional[TableSection]:
    """First section whose title names the raw materials"""
    markers = tuple(markers or settings.INGREDIENT_SECTION_MARKERS)
    for section in sections:
        if _contains_marker(section.title, markers):
            return section
    return None


def find_name_column(section: TableSection) -> Optional[ColumnDefinition]:
    return section.columns[0] if section.columns else None


def find_amount_column(
    section: TableSection, markers: Optional[Iterable[str]] = None
) -> Optional[ColumnDefinition]:
    """First column of the section whose header or id mentions kilos"""
    markers = tuple(markers or settings.AMOUNT_MARKERS)
    for column in section.columns:
        if _contains_marker(column.header, markers) or _contains_marker(column.id, markers):
            return column
    return None


def resolve_scaling_anchors(sections: Sequence[TableSection]) -> Optional[ScalingAnchors]:
    """
    Resolve all four anchors of a production table.

    Args:
        sections: The table sections in display order

    Returns:
        The anchors, or None when any of them is missing
    """
    product_column = find_product_column(sections)
    quantity_column = find_quantity_column(sections)
    section = find_ingredient_section(sections)
    if product_column is None or quantity_column is None or section is None:
        return None

    name_column = find_name_column(section)
    amount_column = find_amount_column(section)
    if name_column is None or amount_column is None or name_column.id == amount_column.id:
        return None

    return ScalingAnchors(
        product_column_id=product_column.id,
        quantity_column_id=quantity_column.id,
        name_column_id=name_column.id,
        amount_column_id=amount_column.id,
    )
