"""Shared table configurations and product snapshots for the engine tests."""

import pytest

from table_engine.model import ProductRecord, TableConfig


SALES_CONFIG = {
    "rows": 2,
    "dynamicRows": True,
    "sections": [
        {
            "title": "Venta",
            "columns": [
                {"id": "producto", "header": "Producto", "type": "product"},
                {"id": "cantidad", "header": "Cantidad", "type": "number"},
                {
                    "id": "precio", "header": "Precio", "type": "number", "readOnly": True,
                    "dependency": {"sourceColumn": "producto", "sourceType": "product", "calculationType": "price"},
                },
                {
                    "id": "total", "header": "Total", "type": "number", "readOnly": True,
                    "dependency": {"sourceColumn": "producto", "sourceType": "product", "calculationType": "total"},
                },
                {
                    "id": "peso", "header": "Peso", "type": "number", "readOnly": True,
                    "dependency": {"sourceColumn": "cantidad", "sourceType": "quantity", "calculationType": "weight"},
                },
            ],
        }
    ],
}

# Mirrors the "Ficha Técnica con Litros" template of the form designer
PRODUCTION_CONFIG = {
    "rows": 5,
    "dynamicRows": False,
    "sections": [
        {
            "title": "Proceso general",
            "columns": [
                {"id": "proceso", "header": "Proceso", "type": "product"},
                {"id": "litros", "header": "Litros", "type": "number", "validation": {"min": 0}},
            ],
        },
        {
            "title": "Materia Prima",
            "columns": [
                {"id": "materia", "header": "Materia Prima", "type": "text", "readOnly": True},
                {
                    "id": "kilos", "header": "Kilos", "type": "number",
                    "dependency": {"sourceType": "product", "calculationType": "weight"},
                },
            ],
        },
    ],
}


@pytest.fixture
def sales_config():
    return TableConfig.model_validate(SALES_CONFIG)


@pytest.fixture
def production_config():
    return TableConfig.model_validate(PRODUCTION_CONFIG)


@pytest.fixture
def products():
    return [
        ProductRecord(id=7, name="Cajeta", price=12.5, weight=0.5),
        ProductRecord(id=8, name="Oblea", price=3.2),
        ProductRecord(id=3, name="Mielmex 65° Brix", price=40.0, weight=1.2),
    ]


@pytest.fixture
def production_rows():
    return [
        {"proceso": "Mielmex 65° Brix", "litros": 500, "materia": "", "kilos": None},
        {"materia": "Leche de Cabra", "kilos": None},
        {"materia": "Azúcar", "kilos": None},
        {"materia": "Bicarbonato", "kilos": None},
        {"materia": "Agua", "kilos": "7"},
    ]
