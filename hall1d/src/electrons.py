"""
Electron closures: density, collision frequencies, mobility and currents.

All functions act on every cell at once. Temperatures are in eV and the
electron pressure in eV/m³, so pe / ne is a potential in volts.
"""

import numpy as np
from abc import ABC, abstractmethod

from .gas import CONSTANTS, PhysicalConstants
from .state import StateIndex
from .thermodynamics import number_density, velocity


# --- Plasma composition ---

def electron_density(U: np.ndarray, index: StateIndex) -> np.ndarray:
    """Quasineutral electron density ne = sum(Z * n_i) [1/m³]."""
    ne = np.zeros(U.shape[1])
    for i in index.ions:
        fluid = index.fluids[i]
        ne += fluid.Z * number_density(U[index.ranges[i]], fluid)
    return ne


def ion_density(U: np.ndarray, index: StateIndex) -> np.ndarray:
    """Total ion number density sum(n_i) [1/m³]."""
    ni = np.zeros(U.shape[1])
    for i in index.ions:
        ni += number_density(U[index.ranges[i]], index.fluids[i])
    return ni


def neutral_density(U: np.ndarray, index: StateIndex) -> np.ndarray:
    """Total neutral number density [1/m³]."""
    nn = np.zeros(U.shape[1])
    for i in index.neutrals:
        nn += number_density(U[index.ranges[i]], index.fluids[i])
    return nn


def compute_Z_eff(U: np.ndarray, index: StateIndex) -> np.ndarray:
    """Effective ion charge state ne / sum(n_i), 1 where no ions are present."""
    ne = electron_density(U, index)
    ni = ion_density(U, index)
    has_ions = ni > 0
    return np.where(has_ions, ne / np.where(has_ions, ni, 1.0), 1.0)


def ion_current_density(U: np.ndarray, index: StateIndex,
                        constants: PhysicalConstants = CONSTANTS) -> np.ndarray:
    """Ion current density ji = sum(Z * e * n_i * u_i) [A/m²]."""
    ji = np.zeros(U.shape[1])
    for i in index.ions:
        fluid = index.fluids[i]
        Ui = U[index.ranges[i]]
        ji += fluid.Z * constants.e * number_density(Ui, fluid) * velocity(Ui, fluid)
    return ji


def electron_pressure(ne: np.ndarray, Tev: np.ndarray, landmark: bool = False) -> np.ndarray:
    """Electron pressure [eV/m³]; the LANDMARK convention carries a 3/2 factor."""
    if landmark:
        return 1.5 * ne * Tev
    return ne * Tev


# --- Collision frequencies ---

def freq_electron_neutral(nn: np.ndarray, Tev: np.ndarray, landmark: bool = False,
                          constants: PhysicalConstants = CONSTANTS) -> np.ndarray:
    """
    Electron-neutral momentum transfer frequency [1/s].

    LANDMARK uses a constant rate coefficient of 2.5e-13 m³/s; otherwise the
    xenon cross section fit sigma(Te) is averaged over a Maxwellian.
    """
    if landmark:
        return 2.5e-13 * nn
    x = Tev / 4
    sigma_en = np.maximum(0.0, 6.6e-19 * (x - 0.1) / (1 + x**1.6))
    v_th = np.sqrt(8 * constants.e * Tev / np.pi / constants.me)
    return sigma_en * nn * v_th


def coulomb_logarithm(ne: np.ndarray, Tev: np.ndarray, Z: float = 1.0) -> np.ndarray:
    """NRL formulary electron-ion Coulomb logarithm."""
    low = 23 - 0.5 * np.log(1e-6 * ne * Z**2 / Tev**3)
    high = 24 - 0.5 * np.log(1e-6 * ne / Tev**2)
    return np.where(Tev < 10 * Z**2, low, high)


def freq_electron_ion(ne: np.ndarray, Tev: np.ndarray, Z_eff: np.ndarray,
                      landmark: bool = False) -> np.ndarray:
    """Electron-ion collision frequency [1/s]; not included in LANDMARK."""
    if landmark:
        return np.zeros_like(ne)
    return 2.9e-12 * Z_eff * ne * coulomb_logarithm(ne, Tev, Z_eff) / Tev**1.5


def freq_electron_wall(z: np.ndarray, channel_length: float,
                       wall_collision_freq: float) -> np.ndarray:
    """Wall collision frequency, nonzero inside the channel only [1/s]."""
    return np.where(z <= channel_length, wall_collision_freq, 0.0)


def electron_mobility(nu_e: np.ndarray, B: np.ndarray,
                      constants: PhysicalConstants = CONSTANTS) -> np.ndarray:
    """
    Cross-field electron mobility [m²/(V·s)].

        mu = (e / (me * nu)) / (1 + (omega_ce / nu)²)
    """
    omega_ce = constants.e * B / constants.me
    return constants.e / (constants.me * nu_e) / (1 + (omega_ce / nu_e)**2)


def hall_parameter(nu_e: np.ndarray, B: np.ndarray,
                   constants: PhysicalConstants = CONSTANTS) -> np.ndarray:
    """Electron Hall parameter omega_ce / nu_e."""
    return constants.e * B / constants.me / nu_e


def electron_kinetic_energy(ue: np.ndarray, nu_e: np.ndarray, B: np.ndarray,
                            constants: PhysicalConstants = CONSTANTS) -> np.ndarray:
    """
    Electron kinetic energy in eV, axial plus azimuthal drift.

    The azimuthal velocity is the Hall parameter times the axial velocity.
    """
    Omega = hall_parameter(nu_e, B, constants)
    return 0.5 * constants.me * (1 + Omega**2) * ue**2 / constants.e


# --- Anomalous transport ---

class AnomalousTransportModel(ABC):
    """Anomalous electron collision frequency."""

    @abstractmethod
    def __call__(self, z: np.ndarray, B: np.ndarray, channel_length: float,
                 constants: PhysicalConstants = CONSTANTS) -> np.ndarray:
        pass


class NoAnom(AnomalousTransportModel):
    def __call__(self, z, B, channel_length, constants=CONSTANTS):
        return np.zeros_like(np.asarray(z, dtype=float))


class Bohm(AnomalousTransportModel):
    """nu_an = c * omega_ce, c = 1/16 for classic Bohm diffusion."""

    def __init__(self, c: float = 1 / 16):
        self.c = c

    def __call__(self, z, B, channel_length, constants=CONSTANTS):
        return self.c * constants.e * B / constants.me


class TwoZoneBohm(AnomalousTransportModel):
    """Bohm-like collision frequency with separate coefficients inside and outside the channel."""

    def __init__(self, c1: float = 1 / 160, c2: float = 1 / 16):
        self.c1 = c1
        self.c2 = c2

    def __call__(self, z, B, channel_length, constants=CONSTANTS):
        omega_ce = constants.e * B / constants.me
        return np.where(z < channel_length, self.c1, self.c2) * omega_ce


# --- Discharge current ---

def discharge_current(grid, cache, channel_area: float, V_L: float, V_R: float,
                      constants: PhysicalConstants = CONSTANTS) -> float:
    """
    Total discharge current from Ohm's law integrated across the domain.

    With je + ji = Id / A and ue = mu * (grad_phi - grad_pe / ne),

        V_L - V_R + int((ji / (e mu) + grad_pe) / ne) dz
        ------------------------------------------------  = Id
                   int(1 / (e ne mu A)) dz

    Both integrals use the trapezoidal rule over cell centers.
    """
    e = constants.e
    ne, mu = cache.ne, cache.mu
    dz = grid.dz_edge

    f1 = (cache.ji / e / mu + cache.grad_pe) / ne
    f2 = 1 / (e * ne * mu * channel_area)

    int1 = np.sum(0.5 * dz * (f1[:-1] + f1[1:]))
    int2 = np.sum(0.5 * dz * (f2[:-1] + f2[1:]))

    return (V_L - V_R + int1) / int2


def electron_velocity(ji: np.ndarray, Id: float, ne: np.ndarray, channel_area: float,
                      constants: PhysicalConstants = CONSTANTS) -> np.ndarray:
    """Axial electron velocity from current continuity je + ji = Id / A [m/s]."""
    return (ji - Id / channel_area) / constants.e / ne
