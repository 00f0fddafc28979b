import math

import numpy as np
import pytest

from efield_sim.force import calculate_forces
from efield_sim.models import FieldModel
from efield_sim.physics import FIELDFAC
from efield_sim.trace import FieldTrace, read_trace


@pytest.mark.unit
def test_fieldfac_is_faraday_over_kilo() -> None:
    assert FIELDFAC == pytest.approx(96.485332123, rel=1e-10)


@pytest.mark.unit
def test_static_field_on_x_adds_q_times_field() -> None:
    model = FieldModel()
    model.set_field_term(0, 0.25, 0.0, 0.0, 0.0)
    charges = np.array([-0.8])
    force = np.zeros((1, 3))

    calculate_forces(model, charges, 1, force, t=3.0)

    assert force[0, 0] == pytest.approx(FIELDFAC * 0.25 * -0.8)
    assert force[0, 1] == 0.0
    assert force[0, 2] == 0.0


@pytest.mark.unit
def test_forces_accumulate_and_skip_non_local_particles() -> None:
    model = FieldModel()
    model.set_field_term(2, 1.0, 2.0, 0.0, 0.0)
    charges = np.array([1.0, -2.0, 5.0])
    force = np.full((3, 3), 10.0)
    t = 0.4

    calculate_forces(model, charges, 2, force, t, field_fac=1.0)

    expected_z = math.cos(2.0 * t)
    np.testing.assert_allclose(force[:, 2], [10.0 + expected_z, 10.0 - 2.0 * expected_z, 10.0])
    np.testing.assert_array_equal(force[:, :2], 10.0)


@pytest.mark.unit
def test_inactive_field_leaves_buffer_and_trace_untouched(tmp_path) -> None:
    model = FieldModel()
    model.set_field_term(0, 0.0, 5.0, 1.0, 0.1)
    force = np.ones((2, 3))
    trace = FieldTrace(tmp_path / "field.xvg").open()

    calculate_forces(model, np.array([1.0, 1.0]), 2, force, 0.0, trace=trace)
    trace.close()

    np.testing.assert_array_equal(force, 1.0)
    assert read_trace(tmp_path / "field.xvg") == []


@pytest.mark.unit
def test_only_coordinator_writes_trace(tmp_path) -> None:
    model = FieldModel()
    model.set_field_term(1, 0.5, 0.0, 0.0, 0.0)
    force = np.zeros((1, 3))
    trace = FieldTrace(tmp_path / "field.xvg").open()

    calculate_forces(model, np.array([1.0]), 1, force, 0.0, trace=trace, is_coordinator=True)
    calculate_forces(model, np.array([1.0]), 1, force, 0.5, trace=trace, is_coordinator=False)
    trace.close()

    assert read_trace(tmp_path / "field.xvg") == [(0.0, 0.0, 0.5, 0.0)]
