"""Import actual daily intake from a diet-tracker .xlsx export.

The first row is the header. Columns are found by name (Date, Calories,
Protein, Carbs, Fat; case-insensitive, any order). Multiple rows for the
same date, e.g. one per meal, are summed.
"""

from datetime import date, datetime
from pathlib import Path

import openpyxl

from fuelbase.models import IntakeLog

COLUMN_ALIASES = {
    "date": {"date", "day"},
    "calories": {"calories", "kcal", "energy"},
    "protein": {"protein", "protein (g)"},
    "carbs": {"carbs", "carbohydrates", "carbs (g)", "carbohydrates (g)"},
    "fat": {"fat", "fat (g)"},
}


def _map_columns(header_row) -> dict[str, int]:
    columns = {}
    for idx, cell in enumerate(header_row):
        label = str(cell).strip().lower() if cell is not None else ""
        for key, aliases in COLUMN_ALIASES.items():
            if label in aliases and key not in columns:
                columns[key] = idx
    if "date" not in columns:
        raise ValueError("Nutrition log has no Date column")
    return columns


def _parse_date(value) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    for fmt in ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y"):
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    return None


def _number(value) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(str(value).replace(",", ""))
    except ValueError:
        return 0.0


def load_nutrition_log(path) -> dict[str, IntakeLog]:
    """Return {YYYY-MM-DD: IntakeLog} summed per date."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Nutrition log not found: {path}")

    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        rows = wb.active.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return {}
        columns = _map_columns(header)

        logs: dict[str, IntakeLog] = {}
        for row in rows:
            if row is None or all(v is None for v in row):
                continue
            day = _parse_date(row[columns["date"]] if columns["date"] < len(row) else None)
            if day is None:
                continue
            log = logs.setdefault(day, IntakeLog(date=day))
            for macro in ("calories", "protein", "carbs", "fat"):
                idx = columns.get(macro)
                if idx is not None and idx < len(row):
                    setattr(log, macro, getattr(log, macro) + _number(row[idx]))
        return logs
    finally:
        wb.close()
