import csv
import io
import logging
import math
from dataclasses import dataclass
from typing import List

from django.db import transaction

from .models import InspectionParameter, TOLERANCE_TYPE_CHOICES
from .services.checklist import build_parameter, next_position
from .services.signoff import ensure_open

logger = logging.getLogger(__name__)

ALLOWED_TOLERANCE_TYPES = {c for c, _ in TOLERANCE_TYPE_CHOICES}

COLUMNS = ["description", "nominal", "tolerance_type", "tolerance_value", "gdt_symbol"]


@dataclass
class ImportResult:
    created: int = 0
    removed: int = 0
    errors: List[str] = None

    def __post_init__(self):
        if self.errors is None:
            self.errors = []


def checklist_template_csv() -> str:
    buf = io.StringIO()
    w = csv.writer(buf)
    w.writerow(COLUMNS)
    w.writerow(["Overall Length", "150.00", "+/-", "0.05", ""])
    w.writerow(["Hole Diameter #1", "3.00", "+/-", "0.01", "⌀"])
    w.writerow(["Perpendicularity", "0", "+", "0.03", "⟂"])
    return buf.getvalue()


def _number(raw, line, column, errors):
    try:
        value = float(raw)
    except ValueError:
        value = None
    if value is None or not math.isfinite(value):
        errors.append(f"Line {line}: {column} must be a number (got '{raw}')")
        return None
    return value


def import_checklist_csv(report, file_obj, replace=False) -> ImportResult:
    """
    CSV columns:
    description,nominal,tolerance_type,tolerance_value,gdt_symbol

    replace=True drops the current checklist first.
    """
    ensure_open(report)
    result = ImportResult()

    try:
        content = file_obj.read().decode("utf-8-sig")
    except UnicodeDecodeError:
        result.errors.append("Could not read file. Please upload a UTF-8 CSV.")
        return result

    reader = csv.DictReader(io.StringIO(content))

    required_cols = set(COLUMNS) - {"gdt_symbol"}
    missing = required_cols - set(reader.fieldnames or [])
    if missing:
        result.errors.append(f"Missing CSV columns: {', '.join(sorted(missing))}")
        return result

    rows = list(reader)
    if not rows:
        result.errors.append("CSV is empty.")
        return result

    # Basic validation first (collect all errors)
    cleaned = []
    for i, r in enumerate(rows, start=2):  # header is line 1
        description = (r.get("description") or "").strip()
        tolerance_type = (r.get("tolerance_type") or "").strip()
        gdt_symbol = (r.get("gdt_symbol") or "").strip()

        if not description:
            result.errors.append(f"Line {i}: description is required")
        if tolerance_type not in ALLOWED_TOLERANCE_TYPES:
            result.errors.append(
                f"Line {i}: tolerance_type must be one of {sorted(ALLOWED_TOLERANCE_TYPES)} (got '{tolerance_type}')"
            )

        nominal = _number((r.get("nominal") or "").strip(), i, "nominal", result.errors)
        tolerance_value = _number((r.get("tolerance_value") or "").strip(), i, "tolerance_value", result.errors)
        if tolerance_value is not None and tolerance_value < 0:
            result.errors.append(f"Line {i}: tolerance_value cannot be negative")

        cleaned.append((description, nominal, tolerance_type, tolerance_value, gdt_symbol))

    # stop if errors
    if result.errors:
        return result

    # Import atomically
    with transaction.atomic():
        if replace:
            result.removed = report.parameters.count()
            report.parameters.all().delete()

        start = next_position(report)
        params = [
            build_parameter(report, start + offset, description, nominal, tolerance_type, tolerance_value, gdt_symbol)
            for offset, (description, nominal, tolerance_type, tolerance_value, gdt_symbol) in enumerate(cleaned)
        ]
        InspectionParameter.objects.bulk_create(params)
        result.created = len(params)

    logger.info("Imported %s checklist rows into %s (removed %s)", result.created, report.id, result.removed)
    return result
