"""
Per-step update of the boundary cells, electron closures, potential and
electron energy.

update_step is the single entry point a time integrator calls after each
step (or stage). It rejects non-finite states, proposes the next time step
and runs update_values, whose ordering matters:

    1. fluid boundary conditions
    2. per-cell electron closures and ion current density
    3. discharge current (global reduction over all cells)
    4. electron velocity and kinetic energy
    5. potential on edges
    6. potential and pressure gradients
    7. electron energy
"""

import logging
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .electrons import (
    compute_Z_eff, discharge_current, electron_density, electron_kinetic_energy,
    electron_mobility, electron_pressure, electron_velocity, freq_electron_ion,
    freq_electron_neutral, freq_electron_wall, ion_current_density, neutral_density,
)
from .energy import update_electron_energy
from .potential import compute_gradients
from .sources import ionization_frequency

logger = logging.getLogger(__name__)


class TerminationReason(Enum):
    NAN_DETECTED = 'NaNDetected'
    INF_DETECTED = 'InfDetected'


@dataclass
class StepResult:
    """Outcome of update_step: the state, the proposed next time step and a termination reason."""
    U: np.ndarray
    dt: float
    reason: Optional[TerminationReason] = None

    @property
    def terminated(self) -> bool:
        return self.reason is not None


def check_state(U: np.ndarray, t: float = 0.0) -> Optional[TerminationReason]:
    """
    Scan the state array for NaN or Inf.

    Returns:
        None if every value is finite, otherwise the reason for the first
        non-finite value found, scanning cell by cell.
    """
    finite = np.isfinite(U)
    if finite.all():
        return None

    cell, var = np.argwhere(~finite.T)[0]
    if np.isnan(U[var, cell]):
        logger.warning("NaN detected in variable %d in cell %d at time %g", var, cell, t)
        return TerminationReason.NAN_DETECTED
    logger.warning("Inf detected in variable %d in cell %d at time %g", var, cell, t)
    return TerminationReason.INF_DETECTED


def electron_temperature(U: np.ndarray, ne: np.ndarray, params) -> np.ndarray:
    """Electron temperature [eV] from the energy density, floored."""
    return np.maximum(params.config.min_electron_temperature,
                      2 / 3 * U[params.index.n_eps] / ne)


def apply_boundary_conditions(U: np.ndarray, params) -> np.ndarray:
    """Apply the left and right fluid boundary conditions in place."""
    config = params.config
    ne = np.maximum(config.min_number_density, electron_density(U, params.index))
    Tev = electron_temperature(U, ne, params)
    m_ion = params.ion_mass

    params.bc_left.apply(U, 'left', params.index, Tev[1], m_ion, params.constants)
    params.bc_right.apply(U, 'right', params.index, Tev[-2], m_ion, params.constants)
    return U


def update_electron_closures(U: np.ndarray, params):
    """Per-cell electron density, temperature, pressure, collision frequencies, mobility and currents."""
    index = params.index
    config = params.config
    cache = params.cache
    constants = params.constants
    z = params.grid.cell_centers

    cache.ne[:] = np.maximum(config.min_number_density, electron_density(U, index))
    cache.Tev[:] = electron_temperature(U, cache.ne, params)
    cache.pe[:] = electron_pressure(cache.ne, cache.Tev, config.landmark)

    nn = neutral_density(U, index)
    cache.Z_eff[:] = compute_Z_eff(U, index)
    cache.nu_en[:] = freq_electron_neutral(nn, cache.Tev, config.landmark, constants)
    cache.nu_ei[:] = freq_electron_ion(cache.ne, cache.Tev, cache.Z_eff, config.landmark)
    cache.nu_w[:] = freq_electron_wall(z, params.channel_length, config.wall_collision_freq)
    cache.nu_an[:] = params.anom_model(z, cache.B, params.channel_length, constants)
    cache.nu_iz[:] = ionization_frequency(U, params)

    cache.nu_c[:] = cache.nu_en + cache.nu_ei
    if config.landmark:
        cache.nu_c += cache.nu_iz
    cache.nu_e[:] = cache.nu_c + cache.nu_an + cache.nu_w

    cache.mu[:] = electron_mobility(cache.nu_e, cache.B, constants)
    cache.ji[:] = ion_current_density(U, index, constants)


def update_values(U: np.ndarray, params, t: float = 0.0, advance_energy: bool = True) -> np.ndarray:
    """
    Update boundary cells, electron quantities, potential and electron energy.

    Args:
        U: State array, modified in place
        params: Solver parameters; params.cache is rewritten
        t: Current time [s]
        advance_energy: If False, only the energy boundary conditions are
            applied and n_eps is not advanced by params.dt

    Returns:
        U
    """
    config = params.config
    cache = params.cache
    constants = params.constants
    V_L = config.discharge_voltage
    V_R = config.cathode_potential

    apply_boundary_conditions(U, params)

    update_electron_closures(U, params)

    # Compute the discharge current by integrating the momentum equation over the whole domain
    cache.Id = discharge_current(params.grid, cache, params.channel_area, V_L, V_R, constants)
    logger.debug("t = %.4e s, Id = %.4f A", t, cache.Id)

    # je + ji = Id / A_ch
    cache.ue[:] = electron_velocity(cache.ji, cache.Id, cache.ne, params.channel_area, constants)
    cache.K[:] = electron_kinetic_energy(cache.ue, cache.nu_e, cache.B, constants)

    params.potential_solver.solve(params.grid, cache, V_L, V_R, constants)

    compute_gradients(params.grid, cache)

    if advance_energy:
        update_electron_energy(U, params, params.dt)
    else:
        params.energy_bc_left.apply(U, 'left', params.index)
        params.energy_bc_right.apply(U, 'right', params.index)

    return U


def update_step(U: np.ndarray, params, t: float = 0.0, dt: Optional[float] = None,
                advance_energy: bool = True) -> StepResult:
    """
    Validate the state, propose the next time step and run the physics update.

    Args:
        U: State array after the latest step, modified in place if valid
        params: Solver parameters
        t: Current time [s]
        dt: Time step just taken; defaults to params.dt
        advance_energy: Passed to update_values

    Returns:
        StepResult carrying U and the proposed time step, or a termination
        reason if U contains NaN or Inf. In that case U is left untouched
        and must be discarded by the caller.
    """
    config = params.config
    if dt is not None:
        params.dt = dt

    reason = check_state(U, t)
    if reason is not None:
        return StepResult(U, params.dt, reason)

    # Update the timestep
    if config.adaptive and np.isfinite(params.cache.max_timestep):
        proposed_dt = config.cfl * params.cache.max_timestep
    else:
        proposed_dt = config.dt

    params.iteration += 1
    update_values(U, params, t, advance_energy)

    return StepResult(U, proposed_dt)
