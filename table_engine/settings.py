"""
Feature flags and structural markers for the table engine.

Values are read from the environment once, on import. `main.py` loads a
`.env` file before importing the engine so local overrides apply.
"""

import os
from typing import Dict, Any, Tuple


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _markers(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(m.strip().lower() for m in raw.split(",") if m.strip())


# Feature flags
STRICT_TABLE_CONFIG = _flag("STRICT_TABLE_CONFIG", "0")
AUTO_SCALE_ON_EDIT = _flag("AUTO_SCALE_ON_EDIT", "1")

# Header/title substrings used to locate anchor columns
QUANTITY_MARKERS = _markers("TABLE_QUANTITY_MARKERS", "litro,liter")
INGREDIENT_SECTION_MARKERS = _markers(
    "TABLE_INGREDIENT_SECTION_MARKERS", "materia prima,materias primas,raw material"
)
AMOUNT_MARKERS = _markers("TABLE_AMOUNT_MARKERS", "kilo,kg")

SUMMARY_SAMPLE_ROWS = int(os.getenv("SUMMARY_SAMPLE_ROWS", "5"))


def get_engine_info() -> Dict[str, Any]:
    """Return the active engine configuration for debugging"""
    return {
        "strict_table_config": STRICT_TABLE_CONFIG,
        "auto_scale_on_edit": AUTO_SCALE_ON_EDIT,
        "quantity_markers": list(QUANTITY_MARKERS),
        "ingredient_section_markers": list(INGREDIENT_SECTION_MARKERS),
        "amount_markers": list(AMOUNT_MARKERS),
        "summary_sample_rows": SUMMARY_SAMPLE_ROWS,
    }
