import pytest

from table_engine.dependency_engine import evaluate_dependency
from table_engine.model import ColumnDefinition, ProductRecord
from table_engine.utils import EMPTY, ProductCatalog, find_product


def derived(column_id, source, source_kind, calculation, factor=None):
    return ColumnDefinition.model_validate({
        "id": column_id,
        "type": "number",
        "readOnly": True,
        "dependency": {
            "sourceColumn": source,
            "sourceType": source_kind,
            "calculationType": calculation,
            "factor": factor,
        },
    })


def evaluate(config, column_id, row, products):
    return evaluate_dependency(config.column(column_id), row, config.columns, products)


def test_price_copies_product_price(sales_config, products):
    assert evaluate(sales_config, "precio", {"producto": 7}, products) == "12.50"


def test_price_with_factor(sales_config, products):
    column = derived("precio2", "producto", "product", "price", factor=2)
    assert evaluate_dependency(column, {"producto": 7}, sales_config.columns, products) == "25.00"


def test_zero_factor_is_kept(sales_config, products):
    column = derived("precio0", "producto", "product", "price", factor=0)
    assert evaluate_dependency(column, {"producto": 7}, sales_config.columns, products) == "0.00"


def test_tax_matches_price(sales_config, products):
    column = derived("iva", "producto", "product", "tax", factor=2)
    assert evaluate_dependency(column, {"producto": 7}, sales_config.columns, products) == "25.00"


def test_product_weight(sales_config, products):
    column = derived("peso_unit", "producto", "product", "weight")
    assert evaluate_dependency(column, {"producto": 3}, sales_config.columns, products) == "1.20"


def test_product_total_uses_quantity_column(sales_config, products):
    row = {"producto": 7, "cantidad": 4}
    assert evaluate(sales_config, "total", row, products) == "50.00"


def test_product_total_missing_quantity_is_zero(sales_config, products):
    assert evaluate(sales_config, "total", {"producto": 7}, products) == "0.00"
    assert evaluate(sales_config, "total", {"producto": 7, "cantidad": ""}, products) == "0.00"


def test_product_total_malformed_quantity_is_empty(sales_config, products):
    assert evaluate(sales_config, "total", {"producto": 7, "cantidad": "abc"}, products) == EMPTY


def test_product_total_without_quantity_column(products):
    column = derived("total", "producto", "product", "total")
    columns = [ColumnDefinition(id="producto", kind="product"), column]
    assert evaluate_dependency(column, {"producto": 7}, columns, products) == EMPTY


def test_quantity_weight(sales_config, products):
    row = {"producto": 7, "cantidad": 4}
    assert evaluate(sales_config, "peso", row, products) == "2.00"


def test_quantity_total(sales_config, products):
    column = derived("importe", "cantidad", "quantity", "total")
    row = {"producto": "8", "cantidad": "2.5"}
    assert evaluate_dependency(column, row, sales_config.columns, products) == "8.00"


def test_quantity_zero_is_computed(sales_config, products):
    assert evaluate(sales_config, "peso", {"producto": 7, "cantidad": 0}, products) == "0.00"


def test_quantity_without_product_is_empty(sales_config, products):
    assert evaluate(sales_config, "peso", {"cantidad": 4}, products) == EMPTY


def test_missing_weight_is_empty(sales_config, products):
    assert evaluate(sales_config, "peso", {"producto": 8, "cantidad": 4}, products) == EMPTY


@pytest.mark.parametrize("row", [{}, {"producto": ""}, {"producto": "   "}, {"producto": None}])
def test_empty_source_is_empty(sales_config, products, row):
    assert evaluate(sales_config, "precio", row, products) == EMPTY


def test_unknown_product_is_empty(sales_config, products):
    assert evaluate(sales_config, "precio", {"producto": 999}, products) == EMPTY


def test_unsupported_combination_is_empty(sales_config, products):
    column = derived("raro", "cantidad", "quantity", "price")
    row = {"producto": 7, "cantidad": 4}
    assert evaluate_dependency(column, row, sales_config.columns, products) == EMPTY


def test_incomplete_dependency_is_empty(production_config, products):
    # The kilos column declares a dependency without a source column
    row = {"proceso": 3, "kilos": None}
    assert evaluate(production_config, "kilos", row, products) == EMPTY


def test_column_without_dependency_is_empty(sales_config, products):
    assert evaluate(sales_config, "cantidad", {"cantidad": 4}, products) == EMPTY


def test_rounding_is_half_up(sales_config):
    products = [ProductRecord(id=1, name="Dulce", price=2.675)]
    assert evaluate(sales_config, "precio", {"producto": 1}, products) == "2.68"


def test_identifiers_compare_as_strings(sales_config, products):
    assert evaluate(sales_config, "precio", {"producto": "7"}, products) == "12.50"
    assert evaluate(sales_config, "precio", {"producto": 7.0}, products) == "12.50"


def test_string_catalog_ids(sales_config):
    products = [ProductRecord(id="A-1", name="Cajeta", price=10)]
    assert evaluate(sales_config, "precio", {"producto": "A-1"}, products) == "10.00"


def test_accepts_prebuilt_catalog(sales_config, products):
    catalog = ProductCatalog(products)
    assert evaluate(sales_config, "precio", {"producto": 8}, catalog) == "3.20"


def test_zero_price_is_formatted(sales_config):
    products = [ProductRecord(id=1, name="Muestra", price=0)]
    assert evaluate(sales_config, "precio", {"producto": 1}, products) == "0.00"


def test_missing_row_is_empty(sales_config, products):
    assert evaluate(sales_config, "precio", None, products) == EMPTY


def test_find_product_matches_stringified_ids(products):
    assert find_product(products, 7).name == "Cajeta"
    assert find_product(products, "7").name == "Cajeta"
    assert find_product(products, " 8 ").name == "Oblea"


def test_find_product_integral_float_matches(products):
    assert find_product(products, 7.0).name == "Cajeta"
    assert find_product([ProductRecord(id="7", name="Cajeta")], 7.0).name == "Cajeta"
    assert find_product(products, 7.5) is None


@pytest.mark.parametrize("identifier", [None, "", "   "])
def test_find_product_empty_identifier(products, identifier):
    assert find_product(products, identifier) is None
    assert ProductCatalog(products).find(identifier) is None


def test_find_product_unknown_id(products):
    assert find_product(products, 999) is None
    assert find_product([], 7) is None


def test_find_product_first_match_wins():
    duplicates = [
        ProductRecord(id=5, name="Primero", price=1),
        ProductRecord(id="5", name="Segundo", price=2),
    ]
    assert find_product(duplicates, 5).name == "Primero"
    assert ProductCatalog(duplicates).find(5) is find_product(duplicates, 5)
    assert ProductCatalog(duplicates).find("5.0") is None


def test_huge_price_is_formatted(sales_config):
    products = [ProductRecord(id=1, name="Lote", price=1e30)]
    assert evaluate(sales_config, "precio", {"producto": 1}, products) == "1" + "0" * 30 + ".00"
