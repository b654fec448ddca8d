"""
Numerical flux schemes for the 1D multi-fluid solver.

Fluxes are evaluated once per edge and per fluid, for all edges at once.
The flux at edge k is shared by the right face of cell k and the left face
of cell k+1, which makes the update conservative.
"""

import numpy as np
from abc import ABC, abstractmethod

from .thermodynamics import Fluid, pressure, sound_speed, velocity


def physical_flux(U: np.ndarray, fluid: Fluid) -> np.ndarray:
    """
    Exact flux of the conservation laws of a fluid.

    Args:
        U: Conserved variables (n_vars, n_edges)
        fluid: Fluid the variables belong to

    Returns:
        Flux (n_vars, n_edges)
    """
    u = velocity(U, fluid)
    F = np.zeros_like(U)
    F[0] = U[0] * u
    if fluid.nvars >= 2:
        p = pressure(U, fluid)
        F[1] = U[1] * u + p
        if fluid.nvars == 3:
            F[2] = (U[2] + p) * u
    return F


class FluxScheme(ABC):
    """Abstract base class for numerical flux schemes."""

    @abstractmethod
    def compute_flux_vectorized(self, UL: np.ndarray, UR: np.ndarray,
                                fluid: Fluid) -> np.ndarray:
        """
        Compute numerical fluxes at all edges.

        Args:
            UL: Left states (n_vars, n_edges)
            UR: Right states (n_vars, n_edges)
            fluid: Fluid the states belong to

        Returns:
            Fluxes at all edges (n_vars, n_edges)
        """
        pass

    def compute_flux(self, UL: np.ndarray, UR: np.ndarray, fluid: Fluid) -> np.ndarray:
        """Single-edge flux computation."""
        UL_2d = np.asarray(UL, dtype=float).reshape(-1, 1)
        UR_2d = np.asarray(UR, dtype=float).reshape(-1, 1)
        F_2d = self.compute_flux_vectorized(UL_2d, UR_2d, fluid)
        return F_2d[:, 0]


class HLLEFlux(FluxScheme):
    """
    HLLE approximate Riemann solver.

    Wave speed bounds include zero, so the flux reduces to the upwind flux
    when all waves move in the same direction.
    """

    def compute_flux_vectorized(self, UL, UR, fluid):
        uL = velocity(UL, fluid)
        uR = velocity(UR, fluid)
        aL = sound_speed(UL, fluid)
        aR = sound_speed(UR, fluid)

        # Wave speed estimates
        smin = np.minimum(0.0, np.minimum(uL - aL, uR - aR))
        smax = np.maximum(0.0, np.maximum(uL + aL, uR + aR))

        FL = physical_flux(UL, fluid)
        FR = physical_flux(UR, fluid)

        # Both bounds are zero only for a fluid at rest with zero sound speed
        width = smax - smin
        width = np.where(width > 0, width, 1.0)

        F = (smax * FL - smin * FR + smax * smin * (UR - UL)) / width
        return F


class RusanovFlux(FluxScheme):
    """
    Rusanov (Local Lax-Friedrichs) flux.

    More diffusive than HLLE, very robust.
    """

    def compute_flux_vectorized(self, UL, UR, fluid):
        uL = velocity(UL, fluid)
        uR = velocity(UR, fluid)
        aL = sound_speed(UL, fluid)
        aR = sound_speed(UR, fluid)

        # Maximum wave speed
        smax = np.maximum(np.abs(uL) + aL, np.abs(uR) + aR)

        FL = physical_flux(UL, fluid)
        FR = physical_flux(UR, fluid)

        # F = 0.5 * (FL + FR) - 0.5 * smax * (UR - UL)
        return 0.5 * (FL + FR) - 0.5 * smax * (UR - UL)


class UpwindFlux(FluxScheme):
    """Donor-cell flux selected by the sign of the average edge velocity."""

    def compute_flux_vectorized(self, UL, UR, fluid):
        u_avg = 0.5 * (velocity(UL, fluid) + velocity(UR, fluid))
        FL = physical_flux(UL, fluid)
        FR = physical_flux(UR, fluid)
        return np.where(u_avg >= 0, FL, FR)


FLUX_SCHEMES = {
    'hlle': HLLEFlux,
    'rusanov': RusanovFlux,
    'upwind': UpwindFlux,
}


def get_flux_scheme(name: str) -> FluxScheme:
    if name not in FLUX_SCHEMES:
        raise ValueError(f"Unknown flux scheme: {name}. Options: {', '.join(FLUX_SCHEMES)}")
    return FLUX_SCHEMES[name]()
