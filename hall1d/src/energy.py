"""
Electron energy equation.

    d(n_eps)/dt + d/dz (5/3 ue n_eps - 10/9 mu n_eps d(eps)/dz)
        = ne ue grad_phi - ne W - sum_r E_iz,r k_r(Te) ne n_r

with eps = n_eps / ne = 3/2 Te [eV]. The equation is advanced with one
backward-Euler step: convection is upwinded with the edge-averaged electron
velocity, the conductivity 10/9 mu n_eps is frozen at the previous energy,
and ne is frozen over the step, which makes the system tridiagonal.
"""

import numpy as np
from scipy.linalg import solve_banded

from .ionization import species_indices


def ohmic_heating(cache) -> np.ndarray:
    """Ohmic heating ne * ue * grad_phi [eV/(m³·s)]."""
    return cache.ne * cache.ue * cache.grad_phi


def wall_power_loss(eps: np.ndarray, z: np.ndarray, channel_length: float,
                    loss_coeff_in: float, loss_coeff_out: float,
                    sheath_potential: float = 20.0, nu_eps: float = 1e7) -> np.ndarray:
    """
    Energy lost per electron per unit time to the walls [eV/s].

        W = alpha * nu_eps * eps * exp(-U_w / eps)

    with alpha = loss_coeff_in inside the channel and loss_coeff_out outside.
    """
    alpha = np.where(z <= channel_length, loss_coeff_in, loss_coeff_out)
    return alpha * nu_eps * eps * np.exp(-sheath_potential / eps)


def ionization_power_loss(U: np.ndarray, params) -> np.ndarray:
    """Energy spent on ionization, sum of E_iz * k * ne * n_reactant [eV/(m³·s)]."""
    loss = np.zeros(U.shape[1])
    if not params.reactions:
        return loss
    index = params.index
    cache = params.cache
    reactant_rows, _ = species_indices(params.reactions, index)
    mass_of_row = {index.density_row(i): f.m for i, f in enumerate(index.fluids)}
    for reaction, r_row in zip(params.reactions, reactant_rows):
        n_reactant = U[r_row] / mass_of_row[r_row]
        loss += reaction.ionization_energy * reaction.rate_coeff(cache.Tev) * cache.ne * n_reactant
    return loss


def electron_energy_source(U: np.ndarray, params) -> np.ndarray:
    """Net electron energy source [eV/(m³·s)]."""
    cache = params.cache
    config = params.config
    eps = 1.5 * cache.Tev
    W = wall_power_loss(eps, params.grid.cell_centers, params.channel_length,
                        config.wall_loss_coeff_in, config.wall_loss_coeff_out)
    return ohmic_heating(cache) - cache.ne * W - ionization_power_loss(U, params)


def update_electron_energy(U: np.ndarray, params, dt: float) -> np.ndarray:
    """
    Advance the electron energy density row of U by one implicit step.

    Boundary cells are set by the energy boundary conditions before and
    after the solve and enter the system as fixed values.
    """
    index = params.index
    grid = params.grid
    cache = params.cache
    config = params.config
    n_eps = index.n_eps
    n = grid.n_cells

    params.energy_bc_left.apply(U, 'left', index)
    params.energy_bc_right.apply(U, 'right', index)

    ne = cache.ne
    n_eps_old = U[n_eps].copy()
    Q = electron_energy_source(U, params)

    # Edge coefficients: flux_k = AL_k * n_eps_k + AR_k * n_eps_{k+1}
    ue_edge = 0.5 * (cache.ue[:-1] + cache.ue[1:])
    mu_edge = 0.5 * (cache.mu[:-1] + cache.mu[1:])
    n_eps_edge = 0.5 * (n_eps_old[:-1] + n_eps_old[1:])
    kappa = 10 / 9 * mu_edge * n_eps_edge
    dz = grid.dz_edge

    a = 5 / 3 * ue_edge
    AL = np.maximum(a, 0.0) + kappa / (dz * ne[:-1])
    AR = np.minimum(a, 0.0) - kappa / (dz * ne[1:])

    ab = np.zeros((3, n))       # banded storage (upper, diag, lower)
    b = np.zeros(n)

    # Fixed boundary values
    ab[1, 0] = 1.0
    ab[1, -1] = 1.0
    b[0] = n_eps_old[0]
    b[-1] = n_eps_old[-1]

    i = np.arange(1, n - 1)
    h = grid.dz_cell[i]
    ab[1, i] = 1 / dt + (AL[i] - AR[i - 1]) / h
    ab[0, i + 1] = AR[i] / h
    ab[2, i - 1] = -AL[i - 1] / h
    b[i] = n_eps_old[i] / dt + Q[i]

    U[n_eps] = solve_banded((1, 1), ab, b)

    # Floor at the minimum temperature
    U[n_eps] = np.maximum(U[n_eps], 1.5 * ne * config.min_electron_temperature)

    params.energy_bc_left.apply(U, 'left', index)
    params.energy_bc_right.apply(U, 'right', index)
    return U
