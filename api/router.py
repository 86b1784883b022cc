"""
HTTP routes for the table engine.

Stateless routes take the configuration, rows and products in the request
body. Stateful routes work on tables kept in `table_store`.
"""
import logging
import traceback

from fastapi import APIRouter, HTTPException

import table_store
from table_engine import (
    TableConfigError,
    apply_scaling_to_rows_with_count,
    evaluate_dependency,
    list_formulas,
    lookup_formula,
    recalculate_table,
    resolve_scaling_anchors,
    scale_formula,
    table_summary,
    validate_table_config,
)
from api.schemas import (
    AddRowRequest,
    ApplyFormulaRequest,
    ApplyScalingRequest,
    ApplyScalingResponse,
    CellUpdateRequest,
    EvaluateRequest,
    EvaluateResponse,
    FormulaOutcomeResponse,
    FormulaSchema,
    IngredientSchema,
    NewTableRequest,
    ProductsRequest,
    ProductsResponse,
    RecalculateRequest,
    RecalculateResponse,
    ScaleRequest,
    ScaleResponse,
    TableResponse,
    ValidateRequest,
    ValidateResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _formula_schema(entry) -> FormulaSchema:
    return FormulaSchema(
        product_name=entry.product_name,
        base_unit=entry.base_unit,
        ingredients=[IngredientSchema(**ingredient._asdict()) for ingredient in entry.ingredients],
    )


def _get_table_or_404(tid: str):
    try:
        return table_store.get_table(tid)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Table {tid} not found")


def _run(action, *args, **kwargs):
    """Call a store/table operation and translate its errors to HTTP errors"""
    try:
        return action(*args, **kwargs)
    except TableConfigError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "issues": e.issues})
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error in %s: %s\n%s", action.__name__, e, traceback.format_exc())
        raise HTTPException(status_code=500, detail=f"Error: {str(e)}")


# Formula catalog -------------------------------------------------------

@router.get("/formulas")
async def get_formulas():
    """List every product formula"""
    return [_formula_schema(entry) for entry in list_formulas()]


@router.get("/formulas/{product_name}", response_model=FormulaSchema)
async def get_formula(product_name: str):
    entry = lookup_formula(product_name)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No formula for product {product_name}")
    return _formula_schema(entry)


@router.post("/formulas/scale", response_model=ScaleResponse)
async def scale(request: ScaleRequest):
    """Scale a product formula to a production quantity"""
    return ScaleResponse(
        product_name=request.product_name,
        quantity=request.quantity,
        amounts=scale_formula(request.product_name, request.quantity),
    )


# Stateless engine calls ----------------------------------------------

@router.post("/dependencies/evaluate", response_model=EvaluateResponse)
async def evaluate(request: EvaluateRequest):
    column = request.config.column(request.column_id)
    if column is None:
        raise HTTPException(status_code=404, detail=f"Unknown column: {request.column_id}")
    value = evaluate_dependency(column, request.row, request.config.columns, request.products)
    return EvaluateResponse(value=value)


@router.post("/tables/recalculate", response_model=RecalculateResponse)
async def recalculate(request: RecalculateRequest):
    """Run one recompute pass over the rows sent by the host"""
    result = recalculate_table(request.config.columns, request.rows, request.products)
    return RecalculateResponse(
        rows=result.rows,
        changed=result.changed,
        changes=[change._asdict() for change in result.changes],
    )


@router.post("/tables/apply-scaling", response_model=ApplyScalingResponse)
async def apply_scaling(request: ApplyScalingRequest):
    anchors = resolve_scaling_anchors(request.config.sections)
    if anchors is None:
        # Nothing to scale into; hand the rows back untouched
        return ApplyScalingResponse(rows=request.rows, updated=0)
    rows, updated = apply_scaling_to_rows_with_count(
        request.rows, anchors, request.product_name, request.quantity
    )
    return ApplyScalingResponse(rows=rows, updated=updated)


@router.post("/tables/validate", response_model=ValidateResponse)
async def validate(request: ValidateRequest):
    issues = validate_table_config(request.config)
    return ValidateResponse(valid=not issues, issues=issues)


# Stored tables -------------------------------------------------------

@router.post("/tables", response_model=TableResponse)
async def create_table(request: NewTableRequest):
    tid, table = _run(
        table_store.create_table, request.config, rows=request.rows, name=request.name or "Table1", tid=request.id
    )
    return TableResponse(id=tid, table=table.to_dict())


@router.get("/tables/{tid}", response_model=TableResponse)
async def get_table(tid: str):
    table = _get_table_or_404(tid)
    return TableResponse(id=tid, table=table.to_dict())


@router.delete("/tables/{tid}")
async def delete_table(tid: str):
    _get_table_or_404(tid)
    table_store.delete_table(tid)
    return {"status": "deleted", "id": tid}


@router.get("/tables/{tid}/summary")
async def get_table_summary(tid: str):
    return table_summary(_get_table_or_404(tid))


@router.post("/tables/{tid}/cells", response_model=RecalculateResponse)
async def update_cell(tid: str, request: CellUpdateRequest):
    """Apply a user edit, then recompute derived cells"""
    table = _get_table_or_404(tid)
    result = _run(table.set_cell, request.row, request.column_id, request.value)
    return RecalculateResponse(
        rows=table.rows,
        changed=True,
        changes=[change._asdict() for change in result.changes],
    )


@router.post("/tables/{tid}/rows", response_model=TableResponse)
async def add_row(tid: str, request: AddRowRequest):
    table = _get_table_or_404(tid)
    _run(table.add_row, request.values)
    return TableResponse(id=tid, table=table.to_dict())


@router.delete("/tables/{tid}/rows/{index}", response_model=TableResponse)
async def delete_row(tid: str, index: int):
    table = _get_table_or_404(tid)
    _run(table.delete_row, index)
    return TableResponse(id=tid, table=table.to_dict())


@router.post("/tables/{tid}/apply-formula", response_model=FormulaOutcomeResponse)
async def apply_formula(tid: str, request: ApplyFormulaRequest):
    """Fill the raw-material rows from the selected product formula"""
    table = _get_table_or_404(tid)
    outcome = table.apply_formula(request.product_name, request.quantity)
    return FormulaOutcomeResponse(
        status=outcome.status, updated=outcome.updated, message=outcome.message, rows=table.rows
    )


# Reference data --------------------------------------------------------

@router.put("/products", response_model=ProductsResponse)
async def replace_products(request: ProductsRequest):
    """Replace the product snapshot; each stored table is recomputed once"""
    changed = table_store.set_products(request.products)
    return ProductsResponse(products=len(request.products), changed_tables=changed)
