"""Unit constants shared by the field model and force path."""

from efield_sim.physics.units import FARADAY_C_PER_MOL, FIELDFAC

__all__ = ["FARADAY_C_PER_MOL", "FIELDFAC"]
