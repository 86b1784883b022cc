from decimal import Decimal
from typing import List, Dict, Any, Optional

from pydantic import BaseModel, Field

from table_engine.model import ProductRecord, Row, TableConfig


class IngredientSchema(BaseModel):
    name: str
    amount_per_unit: float
    unit: str


class FormulaSchema(BaseModel):
    product_name: str
    base_unit: str
    ingredients: List[IngredientSchema]


class ScaleRequest(BaseModel):
    product_name: str
    quantity: Any


class ScaleResponse(BaseModel):
    product_name: str
    quantity: Any
    amounts: Dict[str, Decimal]


class EvaluateRequest(BaseModel):
    config: TableConfig
    column_id: str
    row: Row = Field(default_factory=dict)
    products: List[ProductRecord] = Field(default_factory=list)


class EvaluateResponse(BaseModel):
    value: str


class RecalculateRequest(BaseModel):
    config: TableConfig
    rows: List[Row] = Field(default_factory=list)
    products: List[ProductRecord] = Field(default_factory=list)


class CellChangeSchema(BaseModel):
    row_index: int
    column_id: str
    old: Any = None
    new: str


class RecalculateResponse(BaseModel):
    rows: List[Row]
    changed: bool
    changes: List[CellChangeSchema] = []


class ApplyScalingRequest(BaseModel):
    config: TableConfig
    rows: List[Row] = Field(default_factory=list)
    product_name: str
    quantity: Any


class ApplyScalingResponse(BaseModel):
    rows: List[Row]
    updated: int


class ValidateRequest(BaseModel):
    config: TableConfig


class ValidateResponse(BaseModel):
    valid: bool
    issues: List[str]


class NewTableRequest(BaseModel):
    config: TableConfig
    rows: Optional[List[Row]] = None
    name: Optional[str] = "Table1"
    id: Optional[str] = None


class TableResponse(BaseModel):
    id: str
    table: Dict[str, Any]


class CellUpdateRequest(BaseModel):
    row: int
    column_id: str
    value: Any = None


class AddRowRequest(BaseModel):
    values: Optional[Row] = None


class ApplyFormulaRequest(BaseModel):
    product_name: Optional[str] = None
    quantity: Any = None


class FormulaOutcomeResponse(BaseModel):
    status: str
    updated: int
    message: str
    rows: List[Row]


class ProductsRequest(BaseModel):
    products: List[ProductRecord]


class ProductsResponse(BaseModel):
    products: int
    changed_tables: List[str]
