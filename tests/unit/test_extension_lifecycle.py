import io

import numpy as np
import pytest

from efield_sim.citations import cited_keys, please_cite, reset_citations
from efield_sim.config_transform import TransformRules
from efield_sim.extensions import ElectricField, InputRecExtension, build_extension
from efield_sim.models import ElectricFieldCfg
from efield_sim.physics import FIELDFAC
from efield_sim.trace import read_trace


@pytest.fixture(autouse=True)
def _fresh_citations():
    reset_citations()
    yield
    reset_citations()


def _cfg() -> ElectricFieldCfg:
    return ElectricFieldCfg.model_validate({"x": {"E0": 0.5}, "z": {"E0": 0.1, "omega": 2.0}})


@pytest.mark.unit
def test_registry_builds_electric_field() -> None:
    ext = build_extension("electric-field")

    assert isinstance(ext, InputRecExtension)
    assert isinstance(ext, ElectricField)
    with pytest.raises(ValueError, match="Unknown input-record extension"):
        build_extension("pull")


@pytest.mark.unit
def test_forces_before_broadcast_are_refused() -> None:
    ext = ElectricField()
    ext.bind_options(_cfg())

    with pytest.raises(RuntimeError, match="broadcast"):
        ext.calculate_forces(np.ones(1), 1, np.zeros((1, 3)), 0.0, is_coordinator=True)


@pytest.mark.unit
def test_full_lifecycle_writes_trace_and_cites_once(tmp_path) -> None:
    ext = ElectricField()
    ext.bind_options(_cfg())
    assert ext.lifecycle == "configured"
    ext.broadcast(None)
    assert ext.lifecycle == "distributed"

    log = io.StringIO()
    ext.init_output(log, is_coordinator=True, trace_path=tmp_path / "field.xvg")
    force = np.zeros((1, 3))
    ext.calculate_forces(np.array([2.0]), 1, force, 0.0, is_coordinator=True)
    ext.finish_output()
    ext.finish_output()

    assert ext.lifecycle == "closed"
    assert ext.trace is None
    assert force[0, 0] == pytest.approx(FIELDFAC * 0.5 * 2.0)
    assert force[0, 2] == pytest.approx(FIELDFAC * 0.1 * 2.0)
    assert read_trace(tmp_path / "field.xvg") == [(0.0, 0.5, 0.0, 0.1)]
    assert "Caleman" in log.getvalue()
    assert cited_keys() == {"Caleman2008a"}

    second = io.StringIO()
    please_cite(second, "Caleman2008a")
    assert second.getvalue() == ""


@pytest.mark.unit
def test_output_cannot_be_initialized_twice(tmp_path) -> None:
    ext = ElectricField()
    ext.bind_options(_cfg())
    ext.broadcast(None)
    ext.init_output(io.StringIO(), is_coordinator=True, trace_path=tmp_path / "field.xvg")
    first = ext.trace
    assert first is not None

    with pytest.raises(RuntimeError, match="opened once"):
        ext.init_output(io.StringIO(), is_coordinator=True, trace_path=tmp_path / "other.xvg")

    assert ext.trace is first
    assert not (tmp_path / "other.xvg").exists()
    ext.finish_output()
    assert not first.is_open


@pytest.mark.unit
def test_output_refused_after_close(tmp_path) -> None:
    ext = ElectricField()
    ext.bind_options(_cfg())
    ext.broadcast(None)
    ext.init_output(io.StringIO(), is_coordinator=True, trace_path=tmp_path / "field.xvg")
    ext.finish_output()

    with pytest.raises(RuntimeError, match="'closed'"):
        ext.init_output(io.StringIO(), is_coordinator=True, trace_path=tmp_path / "field.xvg")


@pytest.mark.unit
def test_non_coordinator_opens_no_output(tmp_path) -> None:
    ext = ElectricField()
    ext.bind_options(_cfg())
    ext.broadcast(None)

    log = io.StringIO()
    ext.init_output(log, is_coordinator=False, trace_path=tmp_path / "field.xvg")

    assert ext.trace is None
    assert not (tmp_path / "field.xvg").exists()
    assert log.getvalue() == ""


@pytest.mark.unit
def test_inactive_field_neither_cites_nor_traces(tmp_path) -> None:
    ext = ElectricField()
    with pytest.warns(UserWarning, match="inactive"):
        ext.bind_options(ElectricFieldCfg.model_validate({"y": {"omega": 3.0}}))
    ext.broadcast(None)
    ext.init_output(io.StringIO(), is_coordinator=True, trace_path=tmp_path / "field.xvg")

    assert not ext.provides_forces()
    assert cited_keys() == frozenset()
    assert not (tmp_path / "field.xvg").exists()


@pytest.mark.unit
def test_archive_io_and_compare_through_extension() -> None:
    source = ElectricField()
    source.bind_options(_cfg())
    buf = io.BytesIO()
    source.write_archive(buf)
    buf.seek(0)

    restored = ElectricField()
    restored.read_archive(buf)

    assert restored.lifecycle == "configured"
    assert restored.compare(source, reltol=0.0, abstol=0.0) == []


@pytest.mark.unit
def test_init_mdp_transform_registers_legacy_keys() -> None:
    rules = TransformRules()
    ElectricField().init_mdp_transform(rules)

    assert "E-yt" in rules
    assert rules.transform({"E-y": "1 0.3 0"}) == {"electric-field": {"y": {"E0": 0.3}}}


@pytest.mark.unit
def test_print_parameters() -> None:
    ext = ElectricField()
    ext.bind_options(_cfg())
    out = io.StringIO()

    ext.print_parameters(out)

    assert "-X E0 = 0.5" in out.getvalue()
