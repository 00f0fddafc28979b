# this doc specifies units and conventions (backend and API) for efield-sim

# internal units
# time: ps
# length: nm
# charge: e (elementary charge)
# energy: kJ/mol, so forces are kJ mol^-1 nm^-1
# field: V/nm; FIELDFAC = Faraday/1000 turns (V/nm * e) into kJ mol^-1 nm^-1

# field terms
# omega is an angular frequency (rad/ps), not a frequency in 1/ps
# sigma == 0: E(t) = E0 cos(omega t), no envelope; t0 is ignored
# sigma > 0:  E(t) = E0 cos(omega (t - t0)) exp(-(t - t0)^2 / (2 sigma^2))

# archive
# per axis: n, nt, E0[n], t0[n], omega[nt], sigma[nt] (big-endian)
# the E0, t0, omega, sigma order on disk is historical; do not reorder

# charges
# only the unperturbed (state A) charge is used; perturbed-charge runs get the wrong force
