import pytest

from efield_sim.compare import FieldMismatch, compare_field_models, format_mismatches, values_equal
from efield_sim.models import FieldModel


def _model() -> FieldModel:
    model = FieldModel()
    model.set_field_term(0, 0.5, 150.0, 0.05, 0.01)
    model.set_field_term(1, -1.0, 0.0, 0.0, 0.0)
    return model


@pytest.mark.unit
def test_identical_models_match_at_zero_tolerance() -> None:
    assert compare_field_models(_model(), _model(), reltol=0.0, abstol=0.0) == []


@pytest.mark.unit
def test_one_entry_per_differing_parameter() -> None:
    other = _model()
    other.set_field_term(0, 0.5, 151.0, 0.05, 0.02)
    other.set_field_term(2, 0.0, 0.0, 1e-9, 0.0)

    mismatches = compare_field_models(_model(), other, reltol=0.0, abstol=1e-6)

    assert mismatches == [
        FieldMismatch(axis="x", parameter="omega", value_a=150.0, value_b=151.0),
        FieldMismatch(axis="x", parameter="sigma", value_a=0.01, value_b=0.02),
    ]


@pytest.mark.unit
def test_relative_tolerance_scales_with_magnitude() -> None:
    assert values_equal(1000.0, 1000.5, reltol=1e-3, abstol=0.0)
    assert not values_equal(1.0, 1.5, reltol=1e-3, abstol=0.0)
    assert values_equal(0.0, 1e-12, reltol=0.0, abstol=1e-9)


@pytest.mark.unit
def test_format_mismatches() -> None:
    text = format_mismatches(
        [FieldMismatch(axis="y", parameter="E0", value_a=1.0, value_b=2.0)]
    )

    assert text == "electric-field[y].E0: 1 - 2\n"
