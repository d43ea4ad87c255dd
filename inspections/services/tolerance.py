# inspections/services/tolerance.py
"""
Tolerance evaluation for checklist parameters.

- Limits (utl/ltl) come from nominal + tolerance type/value.
- Deviation and Pass/Fail come from the actual measurement against the limits.
- A parameter without an actual measurement is Pending.
"""
from django.core.exceptions import ValidationError

from inspections.models import (
    STATUS_FAIL,
    STATUS_PASS,
    STATUS_PENDING,
    TOL_BILATERAL,
    TOL_MINUS,
    TOL_PLUS,
)

# Fields an inspector may change on a parameter row.
EDITABLE_FIELDS = ("description", "nominal", "tolerance_type", "tolerance_value", "actual", "gdt_symbol", "comment")

# Changing any of these moves the limits.
LIMIT_FIELDS = ("nominal", "tolerance_type", "tolerance_value")

# float sums are rounded so 0.8 - 0.2 is stored as 0.6
PRECISION = 10


def tolerance_limits(nominal, tolerance_type, tolerance_value):
    """Return (utl, ltl) for the given nominal and tolerance."""
    tolerance_value = tolerance_value or 0

    if tolerance_type == TOL_BILATERAL:
        utl, ltl = nominal + tolerance_value, nominal - tolerance_value
    elif tolerance_type == TOL_PLUS:
        utl, ltl = nominal + tolerance_value, nominal
    elif tolerance_type == TOL_MINUS:
        utl, ltl = nominal, nominal - tolerance_value
    else:
        raise ValidationError(f"Unknown tolerance type '{tolerance_type}'.", code="invalid_tolerance")

    return round(utl, PRECISION), round(ltl, PRECISION)


def evaluate(actual, nominal, utl, ltl):
    """Return (deviation, status) for a measurement."""
    if actual is None:
        return None, STATUS_PENDING

    deviation = round(actual - nominal, PRECISION)
    status = STATUS_PASS if ltl <= actual <= utl else STATUS_FAIL
    return deviation, status


def apply_parameter_update(parameter, changes):
    """
    Merge a partial update into an (unsaved) parameter and recompute the
    derived fields. Returns the list of touched field names for save().
    """
    unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Cannot update: {', '.join(unknown)}", code="unknown_field")

    for field, value in changes.items():
        setattr(parameter, field, value)

    if parameter.tolerance_value is not None and parameter.tolerance_value < 0:
        raise ValidationError("Tolerance value cannot be negative.", code="invalid_tolerance")

    updated = list(changes)

    if any(field in changes for field in LIMIT_FIELDS):
        parameter.utl, parameter.ltl = tolerance_limits(
            parameter.nominal, parameter.tolerance_type, parameter.tolerance_value
        )
        updated += ["utl", "ltl"]

    # status always follows the current actual + limits
    parameter.deviation, parameter.status = evaluate(
        parameter.actual, parameter.nominal, parameter.utl, parameter.ltl
    )
    updated += ["deviation", "status"]

    return updated


def refresh_derived(parameter):
    """Recompute limits, deviation and status from the stored inputs."""
    parameter.utl, parameter.ltl = tolerance_limits(
        parameter.nominal, parameter.tolerance_type, parameter.tolerance_value
    )
    parameter.deviation, parameter.status = evaluate(
        parameter.actual, parameter.nominal, parameter.utl, parameter.ltl
    )
    return parameter
