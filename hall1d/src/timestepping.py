"""
Right-hand side assembly, stable time step and explicit time integration.
"""

import numpy as np

from .reconstruction import reconstruct_first_order, reconstruct_muscl
from .thermodynamics import sound_speed, velocity
from .update import apply_boundary_conditions


def compute_rhs(U: np.ndarray, params) -> np.ndarray:
    """
    Compute the right-hand side of dU/dt = RHS.

    Uses finite volume formulation on interior cells:
        dU_i/dt = -(F_i - F_{i-1}) / dz_i + S_i

    where F_k is the flux at edge k, evaluated once and shared by the two
    cells around it. Boundary cells and the electron energy row have zero
    RHS: they are set by the boundary conditions, applied here to the
    stage state, and by the energy update.
    The largest stable time step is stored in params.cache.max_timestep.

    Args:
        U: State array (n_vars, n_cells)
        params: Solver parameters

    Returns:
        RHS: Time derivative (n_vars, n_cells)
    """
    # Boundary cells of the stage state are filled on a copy, U is not modified
    U = apply_boundary_conditions(U.copy(), params)

    index = params.index
    dz = params.grid.dz_cell[1:-1]
    RHS = np.zeros_like(U)

    for i, fluid in enumerate(index.fluids):
        rows = index.ranges[i]
        Ui = U[rows]

        # Reconstruct states at edges
        if params.limiter is None:
            UL, UR = reconstruct_first_order(Ui)
        else:
            UL, UR = reconstruct_muscl(Ui, params.limiter)

        F = params.flux_scheme.compute_flux_vectorized(UL, UR, fluid)
        RHS[rows, 1:-1] = -(F[:, 1:] - F[:, :-1]) / dz

    if params.source_terms is not None and params.source_terms.sources:
        S = params.source_terms.compute(U, params)
        RHS[:index.n_eps, 1:-1] += S[:index.n_eps, 1:-1]

    params.cache.max_timestep = compute_max_timestep(U, params)
    return RHS


def compute_max_timestep(U: np.ndarray, params) -> float:
    """
    Largest stable explicit time step, min(dz / (|u| + a)) over all fluids
    and interior cells.
    """
    index = params.index
    dz = params.grid.dz_cell[1:-1]
    dt_max = np.inf
    for i, fluid in enumerate(index.fluids):
        Ui = U[index.ranges[i], 1:-1]
        wave_speed = np.abs(velocity(Ui, fluid)) + sound_speed(Ui, fluid)
        dt_max = min(dt_max, np.min(dz / wave_speed))
    return dt_max


def forward_euler_step(U: np.ndarray, dt: float, params) -> np.ndarray:
    """
    Forward Euler time step - simplest and fastest (1 RHS evaluation).

    Args:
        U: State array (n_vars, n_cells)
        dt: Time step
        params: Solver parameters

    Returns:
        U_new: Updated state array
    """
    return U + dt * compute_rhs(U, params)


def rk2_ssp_step(U: np.ndarray, dt: float, params) -> np.ndarray:
    """
    2nd-order Strong Stability Preserving (SSP) Runge-Kutta (RK2).

    Args:
        U: State array (n_vars, n_cells)
        dt: Time step
        params: Solver parameters

    Returns:
        U_new: Updated state array
    """
    U1 = U + dt * compute_rhs(U, params)
    return 0.5 * U + 0.5 * (U1 + dt * compute_rhs(U1, params))


def rk4_step(U: np.ndarray, dt: float, params) -> np.ndarray:
    """
    Classic 4-stage Runge-Kutta step.

    Args:
        U: State array (n_vars, n_cells)
        dt: Time step
        params: Solver parameters

    Returns:
        U_new: Updated state array
    """
    k1 = compute_rhs(U, params)
    k2 = compute_rhs(U + 0.5 * dt * k1, params)
    k3 = compute_rhs(U + 0.5 * dt * k2, params)
    k4 = compute_rhs(U + dt * k3, params)

    return U + (dt / 6.0) * (k1 + 2*k2 + 2*k3 + k4)


TIME_SCHEMES = {
    'rk4': rk4_step,
    'rk2': rk2_ssp_step,
    'euler': forward_euler_step,
}
