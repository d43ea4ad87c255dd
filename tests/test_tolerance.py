import pytest
from django.core.exceptions import ValidationError

from inspections.models import (
    InspectionParameter,
    STATUS_FAIL,
    STATUS_PASS,
    STATUS_PENDING,
    TOL_BILATERAL,
    TOL_MINUS,
    TOL_PLUS,
)
from inspections.services.tolerance import apply_parameter_update, evaluate, refresh_derived, tolerance_limits


@pytest.mark.parametrize("nominal,value", [(150.0, 0.05), (0.0, 0.03), (-4.0, 1.5), (25.0, 0.0)])
def test_bilateral_band_is_twice_the_tolerance(nominal, value):
    utl, ltl = tolerance_limits(nominal, TOL_BILATERAL, value)
    assert utl - ltl == pytest.approx(2 * value)
    assert utl == pytest.approx(nominal + value)
    assert ltl == pytest.approx(nominal - value)


def test_plus_tolerance_keeps_lower_limit_on_nominal():
    assert tolerance_limits(10.0, TOL_PLUS, 0.5) == (10.5, 10.0)


def test_minus_tolerance_keeps_upper_limit_on_nominal():
    assert tolerance_limits(10.0, TOL_MINUS, 0.5) == (10.0, 9.5)


def test_unknown_tolerance_type_is_rejected():
    with pytest.raises(ValidationError) as exc:
        tolerance_limits(10.0, "~", 0.5)
    assert exc.value.code == "invalid_tolerance"


def test_missing_actual_is_pending():
    assert evaluate(None, 10.0, 10.5, 9.5) == (None, STATUS_PENDING)


@pytest.mark.parametrize("actual,expected", [
    (9.5, STATUS_PASS),
    (10.5, STATUS_PASS),
    (10.0, STATUS_PASS),
    (10.75, STATUS_FAIL),
    (9.25, STATUS_FAIL),
])
def test_status_is_pass_only_inside_limits(actual, expected):
    deviation, status = evaluate(actual, 10.0, 10.5, 9.5)
    assert status == expected
    assert deviation == pytest.approx(actual - 10.0)


def test_overall_length_example():
    utl, ltl = tolerance_limits(150, TOL_BILATERAL, 0.05)
    assert utl == pytest.approx(150.05)
    assert ltl == pytest.approx(149.95)

    deviation, status = evaluate(150.06, 150, utl, ltl)
    assert deviation == pytest.approx(0.06)
    assert status == STATUS_FAIL


def _param(**kwargs):
    defaults = dict(
        position=1, description="Length", nominal=10.0, tolerance_type=TOL_BILATERAL,
        tolerance_value=0.5, utl=10.5, ltl=9.5,
    )
    defaults.update(kwargs)
    return InspectionParameter(**defaults)


def test_update_recomputes_limits_when_tolerance_changes():
    param = _param()
    updated = apply_parameter_update(param, {"tolerance_type": TOL_PLUS})
    assert (param.utl, param.ltl) == (10.5, 10.0)
    assert "utl" in updated and "ltl" in updated


def test_update_without_limit_fields_keeps_limits():
    param = _param(utl=99.0, ltl=-99.0)
    updated = apply_parameter_update(param, {"comment": "checked twice"})
    assert (param.utl, param.ltl) == (99.0, -99.0)
    assert "utl" not in updated


def test_setting_actual_evaluates_the_row():
    param = _param()
    apply_parameter_update(param, {"actual": 10.75})
    assert param.status == STATUS_FAIL
    assert param.deviation == pytest.approx(0.75)


def test_clearing_actual_resets_to_pending():
    param = _param(actual=10.0, deviation=0.0, status=STATUS_PASS)
    apply_parameter_update(param, {"actual": None})
    assert param.status == STATUS_PENDING
    assert param.deviation is None


def test_moving_nominal_reevaluates_existing_actual():
    param = _param()
    apply_parameter_update(param, {"actual": 10.25})
    assert param.status == STATUS_PASS

    apply_parameter_update(param, {"nominal": 11.0})
    assert (param.utl, param.ltl) == (11.5, 10.5)
    assert param.status == STATUS_FAIL
    assert param.deviation == pytest.approx(-0.75)


def test_negative_tolerance_is_rejected():
    with pytest.raises(ValidationError) as exc:
        apply_parameter_update(_param(), {"tolerance_value": -0.1})
    assert exc.value.code == "invalid_tolerance"


def test_unknown_fields_are_rejected():
    with pytest.raises(ValidationError) as exc:
        apply_parameter_update(_param(), {"status": STATUS_PASS})
    assert exc.value.code == "unknown_field"


def test_refresh_derived_from_stored_inputs():
    param = _param(tolerance_type=TOL_MINUS, utl=0, ltl=0, actual=9.75)
    refresh_derived(param)
    assert (param.utl, param.ltl) == (10.0, 9.5)
    assert param.status == STATUS_PASS


def test_limits_are_the_decimal_values():
    assert tolerance_limits(0.8, TOL_BILATERAL, 0.2) == (1.0, 0.6)
    assert tolerance_limits(0.1, TOL_PLUS, 0.2) == (0.3, 0.1)
    assert evaluate(0.6, 0.8, 1.0, 0.6) == (-0.2, STATUS_PASS)
