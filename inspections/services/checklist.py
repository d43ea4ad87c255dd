# inspections/services/checklist.py
"""
Checklist definitions and edits for an inspection report.

New reports start from a turbine-blade first-article checklist
(DEFAULT_PARAMETERS); inspectors then edit, add or remove rows.
"""
import logging

from django.db import transaction
from django.db.models import Max

from inspections.models import (
    InspectionParameter,
    TOL_BILATERAL,
    TOL_PLUS,
)
from inspections.services.signoff import ensure_open
from inspections.services.tolerance import apply_parameter_update, tolerance_limits

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT = {
    "product_name": "Turbine Blade",
    "part_number": "TB-789-A",
    "drawing_number": "DRW-TB-789-A-01",
    "revision": "B",
    "uom": "mm",
}

PRODUCT_FIELDS = tuple(DEFAULT_PRODUCT)

DEFAULT_PARAMETERS = [
    {"description": "Overall Length", "nominal": 150.00, "tolerance_type": TOL_BILATERAL, "tolerance_value": 0.05},
    {"description": "Blade Width at Base", "nominal": 25.00, "tolerance_type": TOL_BILATERAL, "tolerance_value": 0.02},
    {"description": "Blade Thickness", "nominal": 5.00, "tolerance_type": TOL_BILATERAL, "tolerance_value": 0.01},
    {"description": "Root Fillet Radius", "nominal": 2.00, "tolerance_type": TOL_BILATERAL, "tolerance_value": 0.05},
    {"description": "Surface Roughness (Ra)", "nominal": 0.8, "tolerance_type": TOL_BILATERAL, "tolerance_value": 0.2},
    {"description": "Hole Diameter #1", "gdt_symbol": "⌀", "nominal": 3.00, "tolerance_type": TOL_BILATERAL, "tolerance_value": 0.01},
    {"description": "Hole Position X", "gdt_symbol": "⌖", "nominal": 10.00, "tolerance_type": TOL_BILATERAL, "tolerance_value": 0.05},
    {"description": "Hole Position Y", "gdt_symbol": "⌖", "nominal": 15.00, "tolerance_type": TOL_BILATERAL, "tolerance_value": 0.05},
    {"description": "Profile of a Surface", "gdt_symbol": "⌓", "nominal": 0, "tolerance_type": TOL_PLUS, "tolerance_value": 0.05},
    {"description": "Perpendicularity", "gdt_symbol": "⟂", "nominal": 0, "tolerance_type": TOL_PLUS, "tolerance_value": 0.03},
]

GDT_SYMBOLS = [
    {"symbol": "⌖", "name": "Position"},
    {"symbol": "⌀", "name": "Diameter"},
    {"symbol": "⟂", "name": "Perpendicularity"},
    {"symbol": "∠", "name": "Angularity"},
    {"symbol": "∥", "name": "Parallelism"},
    {"symbol": "─", "name": "Straightness"},
    {"symbol": "⌓", "name": "Profile of a Surface"},
    {"symbol": "○", "name": "Circularity"},
    {"symbol": "⌭", "name": "Symmetry"},
    {"symbol": "⏥", "name": "Flatness"},
    {"symbol": "◎", "name": "Concentricity"},
]


def build_parameter(report, position, description, nominal, tolerance_type, tolerance_value, gdt_symbol=""):
    """Unsaved parameter row with limits filled in."""
    utl, ltl = tolerance_limits(nominal, tolerance_type, tolerance_value)
    return InspectionParameter(
        report=report,
        position=position,
        description=description,
        nominal=nominal,
        tolerance_type=tolerance_type,
        tolerance_value=tolerance_value,
        utl=utl,
        ltl=ltl,
        gdt_symbol=gdt_symbol or "",
    )


def next_position(report):
    current = report.parameters.aggregate(m=Max("position"))["m"]
    return (current or 0) + 1


def add_parameter(report):
    ensure_open(report)
    param = build_parameter(report, next_position(report), "New Parameter", 0, TOL_BILATERAL, 0)
    param.save()
    return param


def remove_parameter(report, position):
    ensure_open(report)
    deleted, _ = report.parameters.filter(position=position).delete()
    return deleted > 0


@transaction.atomic
def update_parameter(param, changes):
    ensure_open(param.report)
    updated = apply_parameter_update(param, changes)
    param.save(update_fields=sorted(set(updated)))
    logger.debug("Parameter %s #%s -> %s", param.report_id, param.position, param.status)
    return param


def update_product_details(report, changes):
    ensure_open(report)
    fields = [f for f in PRODUCT_FIELDS if f in changes]
    for field in fields:
        setattr(report, field, changes[field])
    if fields:
        report.save(update_fields=fields)
    return report


def remove_parameter_evidence(param, evidence_id):
    ensure_open(param.report)
    item = param.evidence.filter(id=evidence_id).first()
    if item is None:
        return False
    item.image.delete(save=False)
    item.delete()
    return True
