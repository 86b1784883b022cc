from .model import (
    Calculation,
    ColumnDefinition,
    ColumnKind,
    Dependency,
    ProductRecord,
    Row,
    SourceKind,
    TableConfig,
    TableSection,
)
from .formula_catalog import FormulaEntry, Ingredient, list_formulas, lookup_formula
from .scaling import apply_scaling_to_rows, apply_scaling_to_rows_with_count, scale_formula
from .utils import EMPTY, ProductCatalog, find_product
from .dependency_engine import evaluate_dependency
from .recalc import CellChange, RecalcResult, recalculate_table
from .anchors import (
    ScalingAnchors,
    find_amount_column,
    find_ingredient_section,
    find_name_column,
    find_product_column,
    find_quantity_column,
    resolve_scaling_anchors,
)
from .validators import TableConfigError, check_table_config, validate_table_config
from .table import DynamicTable, FormulaOutcome
from .summary import table_summary
from .settings import get_engine_info

__all__ = [
    'Calculation',
    'ColumnDefinition',
    'ColumnKind',
    'Dependency',
    'ProductRecord',
    'Row',
    'SourceKind',
    'TableConfig',
    'TableSection',
    'FormulaEntry',
    'Ingredient',
    'list_formulas',
    'lookup_formula',
    'scale_formula',
    'apply_scaling_to_rows',
    'apply_scaling_to_rows_with_count',
    'EMPTY',
    'ProductCatalog',
    'find_product',
    'evaluate_dependency',
    'CellChange',
    'RecalcResult',
    'recalculate_table',
    'ScalingAnchors',
    'find_amount_column',
    'find_ingredient_section',
    'find_name_column',
    'find_product_column',
    'find_quantity_column',
    'resolve_scaling_anchors',
    'TableConfigError',
    'check_table_config',
    'validate_table_config',
    'DynamicTable',
    'FormulaOutcome',
    'table_summary',
    'get_engine_info',
]
