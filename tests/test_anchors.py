from table_engine.anchors import (
    ScalingAnchors,
    find_amount_column,
    find_ingredient_section,
    find_name_column,
    find_quantity_column,
    resolve_scaling_anchors,
)
from table_engine.model import TableConfig
from table_engine.scaling import apply_scaling_to_rows, apply_scaling_to_rows_with_count

ANCHORS = ScalingAnchors(
    product_column_id="proceso",
    quantity_column_id="litros",
    name_column_id="materia",
    amount_column_id="kilos",
)


def test_resolve_production_anchors(production_config):
    assert resolve_scaling_anchors(production_config.sections) == ANCHORS


def test_sales_table_has_no_anchors(sales_config):
    assert resolve_scaling_anchors(sales_config.sections) is None


def test_markers_are_case_insensitive():
    config = TableConfig.model_validate({
        "sections": [
            {"title": "Datos", "columns": [
                {"id": "p", "type": "product"},
                {"id": "vol", "header": "LITROS A PRODUCIR", "type": "number"},
            ]},
            {"title": "MATERIAS PRIMAS utilizadas", "columns": [
                {"id": "ing", "header": "Ingrediente"},
                {"id": "cant", "header": "Cantidad (KG)", "type": "number"},
            ]},
        ]
    })
    anchors = resolve_scaling_anchors(config.sections)

    assert anchors == ScalingAnchors("p", "vol", "ing", "cant")


def test_custom_markers(production_config):
    assert find_quantity_column(production_config.sections, markers=["galon"]) is None
    section = find_ingredient_section(production_config.sections, markers=["proceso"])
    assert section.title == "Proceso general"
    assert find_amount_column(section, markers=["litro"]).id == "litros"


def test_name_column_is_first_of_section(production_config):
    section = find_ingredient_section(production_config.sections)
    assert find_name_column(section).id == "materia"


def test_amount_column_must_differ_from_name_column():
    config = TableConfig.model_validate({
        "sections": [
            {"title": "Proceso", "columns": [
                {"id": "p", "type": "product"},
                {"id": "litros", "type": "number"},
            ]},
            {"title": "Materia prima", "columns": [{"id": "kilos", "header": "Kilos"}]},
        ]
    })
    assert resolve_scaling_anchors(config.sections) is None


def test_apply_scaling_fills_matching_rows(production_rows):
    rows, updated = apply_scaling_to_rows_with_count(production_rows, ANCHORS, "Mielmex 65° Brix", 500)

    assert updated == 3
    assert rows[1]["kilos"] == "500.000"
    assert rows[2]["kilos"] == "90.000"
    assert rows[3]["kilos"] == "0.800"
    # Not part of the formula
    assert rows[4]["kilos"] == "7"
    # The process row is never treated as an ingredient
    assert rows[0]["kilos"] is None


def test_apply_scaling_skips_process_row_even_when_it_matches(production_rows):
    production_rows[0]["materia"] = "Azúcar"
    rows = apply_scaling_to_rows(production_rows, ANCHORS, "Mielmex 65° Brix", 500)
    assert rows[0]["kilos"] is None


def test_apply_scaling_does_not_mutate(production_rows):
    apply_scaling_to_rows(production_rows, ANCHORS, "Mielmex 65° Brix", 500)
    assert production_rows[2]["kilos"] is None


def test_apply_scaling_name_match_is_exact(production_rows):
    production_rows[2]["materia"] = "azúcar"
    rows, updated = apply_scaling_to_rows_with_count(production_rows, ANCHORS, "Mielmex 65° Brix", 500)
    assert updated == 2
    assert rows[2]["kilos"] is None


def test_apply_scaling_unknown_product(production_rows):
    rows, updated = apply_scaling_to_rows_with_count(production_rows, ANCHORS, "Nonexistent", 500)
    assert updated == 0
    assert rows == production_rows


def test_apply_scaling_invalid_quantity(production_rows):
    rows, updated = apply_scaling_to_rows_with_count(production_rows, ANCHORS, "Mielmex 65° Brix", "")
    assert updated == 0
    assert rows == production_rows
