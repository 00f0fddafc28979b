from __future__ import annotations

import argparse
import io
import json
import logging
import sys
from pathlib import Path
from typing import Any

import numpy as np
import yaml  # type: ignore[import-untyped]

from efield_sim.codec import read_field_archive, write_field_archive
from efield_sim.compare import compare_field_models, format_mismatches
from efield_sim.config_transform import SECTION, parse_mdp
from efield_sim.models import ElectricFieldCfg, SimulationConfig, format_parameters
from efield_sim.parallel import is_coordinator, world_communicator
from efield_sim.pipeline import FieldRunResult, resolve_config, run_field_simulation


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="efield-sim", description="Applied electric field tools"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run the field over a particle set")
    run_parser.add_argument("config", type=Path, help="Path to YAML config")
    run_parser.add_argument("--out", type=Path, required=True, help="Output directory")
    run_parser.add_argument(
        "--append", action="store_true", help="Append to an existing field trace."
    )
    run_parser.add_argument(
        "--mpi", action="store_true", help="Distribute parameters over MPI.COMM_WORLD."
    )

    dump_parser = subparsers.add_parser("dump", help="Print the parameters of an archive")
    dump_parser.add_argument("archive", type=Path)
    dump_parser.add_argument("--precision", choices=["single", "double"], default="double")

    cmp_parser = subparsers.add_parser("compare", help="Compare two archives")
    cmp_parser.add_argument("archive_a", type=Path)
    cmp_parser.add_argument("archive_b", type=Path)
    cmp_parser.add_argument("--reltol", type=float, default=0.001)
    cmp_parser.add_argument("--abstol", type=float, default=0.0)
    cmp_parser.add_argument("--precision", choices=["single", "double"], default="double")

    convert_parser = subparsers.add_parser("convert", help="Convert legacy mdp input to an archive")
    convert_parser.add_argument("mdp", type=Path)
    convert_parser.add_argument("--out", type=Path, required=True, help="Archive path")
    convert_parser.add_argument("--precision", choices=["single", "double"], default="double")

    return parser.parse_args(argv)


def _load_config(path: Path) -> SimulationConfig:
    with path.open("r", encoding="utf-8") as fh:
        payload = yaml.safe_load(fh) or {}
    if not isinstance(payload, dict):
        msg = "Config file root must be a mapping/object."
        raise ValueError(msg)
    return resolve_config(payload)


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def _summary_payload(result: FieldRunResult) -> dict[str, Any]:
    peak = float(np.max(np.abs(result.forces))) if result.forces.size else 0.0
    return {
        "schema_version": "efield.run.v1",
        "active": result.active,
        "n_steps": int(result.times.size),
        "n_particles": int(result.forces.shape[1]) if result.forces.ndim == 3 else 0,
        "peak_abs_force_kj_mol_nm": peak,
        "field_max_abs_v_per_nm": {
            axis: float(np.max(np.abs(result.field[:, m]))) if result.field.size else 0.0
            for m, axis in enumerate(("x", "y", "z"))
        },
    }


def _run(args: argparse.Namespace) -> int:
    cfg = _load_config(args.config)
    if args.append:
        cfg = cfg.model_copy(update={"output": cfg.output.model_copy(update={"append": True})})
    comm = world_communicator() if args.mpi else None
    coordinator = is_coordinator(comm)

    out_dir: Path = args.out
    if coordinator:
        out_dir.mkdir(parents=True, exist_ok=True)
    trace_path = out_dir / cfg.output.trace_file if cfg.output.trace_file else None

    log = io.StringIO()
    result = run_field_simulation(cfg, comm=comm, log=log, trace_path=trace_path)
    if not coordinator:
        return 0

    (out_dir / "run.log").write_text(log.getvalue(), encoding="utf-8")
    model = result.electric_field.model
    (out_dir / "parameters.txt").write_text(format_parameters(model), encoding="utf-8")
    write_field_archive(out_dir / "archive.bin", model, precision=cfg.output.archive_precision)
    np.savez_compressed(
        out_dir / "forces.npz",
        times=result.times,
        field=result.field,
        forces=result.forces,
    )
    _write_json(out_dir / "summary.json", _summary_payload(result))
    return 0


def _dump(args: argparse.Namespace) -> int:
    model = read_field_archive(args.archive, precision=args.precision)
    sys.stdout.write(format_parameters(model))
    return 0


def _compare(args: argparse.Namespace) -> int:
    model_a = read_field_archive(args.archive_a, precision=args.precision)
    model_b = read_field_archive(args.archive_b, precision=args.precision)
    mismatches = compare_field_models(model_a, model_b, args.reltol, args.abstol)
    sys.stdout.write(format_mismatches(mismatches))
    return 1 if mismatches else 0


def _convert(args: argparse.Namespace) -> int:
    legacy = parse_mdp(args.mdp.read_text(encoding="utf-8"))
    cfg = resolve_config({"legacy": legacy})
    section: ElectricFieldCfg = getattr(cfg, SECTION.replace("-", "_"))
    write_field_archive(args.out, section.to_field_model(), precision=args.precision)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    handlers = {"run": _run, "dump": _dump, "compare": _compare, "convert": _convert}
    return handlers[args.command](args)


if __name__ == "__main__":
    raise SystemExit(main())
