"""
Conservation laws, fluids and thermodynamic closures.

Every closure takes the conserved rows of a single fluid, U[0] = rho,
U[1] = rho*u, U[2] = rho*E (as many as the conservation law carries), and
works equally on a single cell (1D slice) or on all cells at once
(2D slice of shape (n_vars, n_cells)).

Non-positive densities are not guarded against; they produce NaN or Inf
which the per-step validity sweep detects.
"""

import numpy as np
from dataclasses import dataclass, field
from enum import Enum

from .gas import Species


class ConservationLawType(Enum):
    CONTINUITY_ONLY = 'ContinuityOnly'
    ISOTHERMAL_EULER = 'IsothermalEuler'
    EULER_EQUATIONS = 'EulerEquations'


@dataclass(frozen=True)
class ContinuityOnly:
    """Density only, with fixed velocity [m/s] and temperature [K]."""
    u: float
    T: float
    type: ConservationLawType = field(default=ConservationLawType.CONTINUITY_ONLY, init=False)
    nvars: int = field(default=1, init=False)


@dataclass(frozen=True)
class IsothermalEuler:
    """Density and momentum, with fixed temperature [K]."""
    T: float
    type: ConservationLawType = field(default=ConservationLawType.ISOTHERMAL_EULER, init=False)
    nvars: int = field(default=2, init=False)


@dataclass(frozen=True)
class EulerEquations:
    """Density, momentum and total energy."""
    type: ConservationLawType = field(default=ConservationLawType.EULER_EQUATIONS, init=False)
    nvars: int = field(default=3, init=False)


@dataclass(frozen=True)
class Fluid:
    """A species evolved with a given set of conservation laws."""
    species: Species
    conservation_laws: object

    @property
    def nvars(self) -> int:
        return self.conservation_laws.nvars

    @property
    def type(self) -> ConservationLawType:
        return self.conservation_laws.type

    @property
    def Z(self) -> int:
        return self.species.Z

    @property
    def is_ion(self) -> bool:
        return self.species.Z > 0

    @property
    def has_momentum(self) -> bool:
        return self.nvars >= 2

    @property
    def gamma(self) -> float:
        return self.species.element.gamma

    @property
    def m(self) -> float:
        return self.species.element.m

    @property
    def R(self) -> float:
        return self.species.element.R

    @property
    def cp(self) -> float:
        return self.species.element.cp

    @property
    def cv(self) -> float:
        return self.species.element.cv

    def __str__(self):
        return f"{self.species} ({self.type.value})"


# --- Primitive variables ---

def density(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Mass density [kg/m³]."""
    return U[0]


def number_density(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Number density [1/m³]."""
    return density(U, fluid) / fluid.m


def velocity(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Velocity [m/s]."""
    if fluid.type == ConservationLawType.CONTINUITY_ONLY:
        return fluid.conservation_laws.u * np.ones_like(U[0])
    return U[1] / U[0]


def temperature(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Temperature [K]."""
    if fluid.type == ConservationLawType.EULER_EQUATIONS:
        return pressure(U, fluid) / density(U, fluid) / fluid.R
    return fluid.conservation_laws.T * np.ones_like(U[0])


def pressure(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Pressure [Pa]."""
    if fluid.type == ConservationLawType.EULER_EQUATIONS:
        # p = (gamma - 1) * (rhoE - 0.5 * (rhoU)² / rho)
        return (fluid.gamma - 1) * (U[2] - 0.5 * U[1]**2 / U[0])
    return density(U, fluid) * fluid.R * temperature(U, fluid)


# --- Energies ---

def static_energy(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Specific internal energy [J/kg]."""
    if fluid.type == ConservationLawType.EULER_EQUATIONS:
        return U[2] / U[0] - 0.5 * (U[1] / U[0])**2
    return fluid.cv * temperature(U, fluid)


def stagnation_energy(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Total specific energy [J/kg]."""
    if fluid.type == ConservationLawType.EULER_EQUATIONS:
        return U[2] / U[0]
    return 0.5 * velocity(U, fluid)**2 + static_energy(U, fluid)


def static_enthalpy(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Specific static enthalpy [J/kg]."""
    if fluid.type == ConservationLawType.EULER_EQUATIONS:
        return static_energy(U, fluid) + pressure(U, fluid) / density(U, fluid)
    return fluid.cp * temperature(U, fluid)


def stagnation_enthalpy(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Total specific enthalpy [J/kg]."""
    return stagnation_energy(U, fluid) + pressure(U, fluid) / density(U, fluid)


# --- Wave speeds ---

def sound_speed(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Speed of sound [m/s]."""
    return np.sqrt(fluid.gamma * fluid.R * temperature(U, fluid))


def mach_number(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Mach number."""
    return velocity(U, fluid) / sound_speed(U, fluid)


def critical_sound_speed(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """Square of the sound speed at sonic conditions, 2(γ-1)/(γ+1) H0 [m²/s²]."""
    gamma = fluid.gamma
    return 2 * (gamma - 1) / (gamma + 1) * stagnation_enthalpy(U, fluid)


# --- Construction helpers ---

def conserved_from_primitives(fluid: Fluid, rho, u=None, p=None) -> np.ndarray:
    """
    Build the conserved rows of a fluid from primitive variables.

    Args:
        fluid: Fluid the rows belong to
        rho: Density [kg/m³]
        u: Velocity [m/s], ignored for ContinuityOnly
        p: Pressure [Pa], only used for EulerEquations

    Returns:
        Array of shape (fluid.nvars,) + np.shape(rho)
    """
    rho = np.asarray(rho, dtype=float)
    U = np.zeros((fluid.nvars,) + rho.shape)
    U[0] = rho
    if fluid.nvars >= 2:
        U[1] = rho * u
    if fluid.nvars == 3:
        U[2] = p / (fluid.gamma - 1) + 0.5 * rho * u**2
    return U
