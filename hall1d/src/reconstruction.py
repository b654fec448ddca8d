"""
Reconstruction of left/right states at cell edges.

Edge k separates cell k (left) and cell k+1 (right). Boundary cells are
never reconstructed: their values are used as-is at the outermost edges.
"""

import numpy as np
from typing import Callable, Tuple


# --- Slope limiters, functions of the slope ratio r ---

def no_limiter(r: np.ndarray) -> np.ndarray:
    """Unlimited central slope (dL + dR) / 2."""
    return 0.5 * (1 + r)


def minmod(r: np.ndarray) -> np.ndarray:
    return np.maximum(0.0, np.minimum(1.0, r))


def van_leer(r: np.ndarray) -> np.ndarray:
    return (r + np.abs(r)) / (1 + np.abs(r))


def van_albada(r: np.ndarray) -> np.ndarray:
    return np.where(r > 0, (r**2 + r) / (r**2 + 1), 0.0)


LIMITERS = {
    'none': no_limiter,
    'minmod': minmod,
    'van_leer': van_leer,
    'van_albada': van_albada,
}


def get_limiter(name: str) -> Callable[[np.ndarray], np.ndarray]:
    if name not in LIMITERS:
        raise ValueError(f"Unknown limiter: {name}. Options: {', '.join(LIMITERS)}")
    return LIMITERS[name]


def reconstruct_first_order(U: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    First-order reconstruction (piecewise constant).

    Args:
        U: Conserved variables of one fluid (n_vars, n_cells)

    Returns:
        UL: Left states at each edge (n_vars, n_cells - 1)
        UR: Right states at each edge (n_vars, n_cells - 1)
    """
    return U[:, :-1].copy(), U[:, 1:].copy()


def reconstruct_muscl(U: np.ndarray, limiter: Callable = minmod) -> Tuple[np.ndarray, np.ndarray]:
    """
    Limited MUSCL reconstruction for 2nd order accuracy.

    Interior cells get a limited slope phi(r) * dR with r = dL / dR, or the
    central slope (dL + dR) / 2 for no_limiter.
    Boundary cells keep zero slope.

    Args:
        U: Conserved variables of one fluid (n_vars, n_cells)
        limiter: Slope limiter phi(r)

    Returns:
        UL: Left states at each edge (n_vars, n_cells - 1)
        UR: Right states at each edge (n_vars, n_cells - 1)
    """
    UL, UR = reconstruct_first_order(U)

    dL = U[:, 1:-1] - U[:, :-2]  # Backward differences
    dR = U[:, 2:] - U[:, 1:-1]   # Forward differences

    if limiter is no_limiter:
        # Central slope, also defined where dR == 0
        slopes = 0.5 * (dL + dR)
    else:
        safe_dR = np.where(dR == 0, 1.0, dR)
        r = np.where(dR == 0, 0.0, dL / safe_dR)
        slopes = np.where(dR == 0, 0.0, limiter(r) * dR)

    # Interior cell i contributes the left state of edge i and the right state of edge i-1
    UL[:, 1:] += 0.5 * slopes
    UR[:, :-1] -= 0.5 * slopes

    return UL, UR
