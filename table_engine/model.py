"""
Data model for dynamic tables.

The host form layer stores table configurations as JSON using camelCase keys
(`type`, `readOnly`, `sourceColumn` ...). The models accept those keys as
aliases and also the snake_case field names, so Python callers can build
configurations directly.
"""

import math
from enum import Enum
from typing import List, Dict, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# A row maps column ids to scalar cell values; missing keys are empty.
Row = Dict[str, Any]

DEFAULT_ROWS = 1


class ColumnKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"
    DATE = "date"
    EMPLOYEE = "employee"
    PRODUCT = "product"


class SourceKind(str, Enum):
    PRODUCT = "product"
    QUANTITY = "quantity"


class Calculation(str, Enum):
    PRICE = "price"
    TOTAL = "total"
    WEIGHT = "weight"
    TAX = "tax"


class _HostModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Dependency(_HostModel):
    """Declares how a read-only column derives its value from another column."""

    source_column_id: Optional[str] = Field(default=None, alias="sourceColumn")
    source_kind: Optional[SourceKind] = Field(default=None, alias="sourceType")
    calculation: Optional[Calculation] = Field(default=None, alias="calculationType")
    factor: Optional[float] = None

    @field_validator("source_column_id", mode="before")
    @classmethod
    def _blank_source_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("factor", mode="before")
    @classmethod
    def _malformed_factor_is_absent(cls, value):
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None


class ColumnOption(_HostModel):
    label: str
    value: str


class ColumnDefinition(_HostModel):
    id: str
    header: str = ""
    kind: ColumnKind = Field(default=ColumnKind.TEXT, alias="type")
    read_only: bool = Field(default=False, alias="readOnly")
    dependency: Optional[Dependency] = None
    # Presentation-only settings; carried through untouched
    width: Optional[str] = None
    employee_type: Optional[str] = Field(default=None, alias="employeeType")
    options: Optional[List[ColumnOption]] = None
    validation: Optional[Dict[str, Any]] = None

    @property
    def is_dependent(self) -> bool:
        return self.dependency is not None and self.dependency.source_column_id is not None

    def default_value(self) -> Any:
        """Blank value used when a row is created or normalised."""
        if self.kind == ColumnKind.NUMBER:
            return None
        if self.kind == ColumnKind.CHECKBOX:
            return False
        return ""


class TableSection(_HostModel):
    title: str = ""
    colspan: Optional[int] = None
    columns: List[ColumnDefinition] = Field(default_factory=list)


class TableConfig(_HostModel):
    rows: int = DEFAULT_ROWS
    dynamic_rows: bool = Field(default=False, alias="dynamicRows")
    sections: List[TableSection] = Field(default_factory=list)
    initial_data: Optional[List[Row]] = Field(default=None, alias="initialData")

    @property
    def columns(self) -> List[ColumnDefinition]:
        """All columns of all sections, in declaration order."""
        return [column for section in self.sections for column in section.columns]

    def column(self, column_id: str) -> Optional[ColumnDefinition]:
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    def row_template(self) -> Row:
        return {column.id: column.default_value() for column in self.columns}


class ProductRecord(_HostModel):
    """Reference product as served by the product catalog; never mutated."""

    id: Union[int, str]
    name: str = ""
    price: Optional[float] = None
    weight: Optional[float] = None
