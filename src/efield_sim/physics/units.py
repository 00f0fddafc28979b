from __future__ import annotations

# SI 2019 exact values.
E_CHARGE_C = 1.602176634e-19
AVOGADRO_PER_MOL = 6.02214076e23
KILO = 1e3

FARADAY_C_PER_MOL = E_CHARGE_C * AVOGADRO_PER_MOL
# (V/nm) * e -> kJ mol^-1 nm^-1
FIELDFAC = FARADAY_C_PER_MOL / KILO

