"""
Pytest tests for finite differences, gradients and the potential solvers.

Tests verify:
1. 3-point stencils are exact for quadratics on non-uniform spacing
2. compute_gradients reproduces linear and quadratic profiles
3. Potential solvers recover known potentials
4. Discharge current for a uniform resistive plasma
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from hall1d.src import CONSTANTS, Grid1D, Cache, OhmicPotentialSolver, TridiagonalPotentialSolver
from hall1d.src.electrons import discharge_current, electron_velocity
from hall1d.src.potential import (
    forward_difference, backward_difference, central_difference, lerp, compute_gradients,
)


@pytest.fixture
def uniform_grid():
    return Grid1D.uniform(0.0, 0.05, 40)


@pytest.fixture
def stretched_grid():
    """Edges clustered toward the left end."""
    return Grid1D(0.05 * np.linspace(0.0, 1.0, 41)**1.5)


GRIDS = ['uniform_grid', 'stretched_grid']


class TestGrid:

    def test_cell_and_edge_counts(self, uniform_grid):
        assert uniform_grid.n_cells == 42
        assert uniform_grid.n_edges == 41
        assert uniform_grid.cell_centers[0] == uniform_grid.edges[0]
        assert uniform_grid.cell_centers[-1] == uniform_grid.edges[-1]

    def test_cell_widths(self, stretched_grid):
        assert stretched_grid.dz_cell[0] == 0.0
        assert stretched_grid.dz_cell[-1] == 0.0
        assert np.sum(stretched_grid.dz_cell) == pytest.approx(0.05)

    def test_invalid_edges(self):
        with pytest.raises(ValueError):
            Grid1D([0.0, 0.2, 0.1])
        with pytest.raises(ValueError):
            Grid1D([0.0, 0.1, 0.2], cell_centers=[0.0, 0.2])

    def test_read_only(self, uniform_grid):
        with pytest.raises(ValueError):
            uniform_grid.edges[0] = 1.0


class TestStencils:

    @pytest.mark.parametrize("x", [(0.0, 0.1, 0.3), (1.0, 1.5, 1.6)])
    def test_exact_for_quadratics(self, x):
        x0, x1, x2 = x
        f = lambda s: 3.0 - 2.0 * s + 5.0 * s**2
        df = lambda s: -2.0 + 10.0 * s

        assert forward_difference(f(x0), f(x1), f(x2), x0, x1, x2) == pytest.approx(df(x0))
        assert central_difference(f(x0), f(x1), f(x2), x0, x1, x2) == pytest.approx(df(x1))
        assert backward_difference(f(x0), f(x1), f(x2), x0, x1, x2) == pytest.approx(df(x2))

    def test_lerp(self):
        assert lerp(0.25, 0.0, 1.0, 2.0, 6.0) == pytest.approx(3.0)


class TestComputeGradients:

    @pytest.mark.parametrize("grid_name", GRIDS)
    def test_linear_profiles(self, grid_name, request):
        grid = request.getfixturevalue(grid_name)
        cache = Cache.allocate(grid.n_cells)
        cache.phi[:] = 300.0 - 4000.0 * grid.edges
        cache.pe[:] = 1e19 + 2e20 * grid.cell_centers

        compute_gradients(grid, cache)

        np.testing.assert_allclose(cache.grad_phi, -4000.0, rtol=1e-9)
        np.testing.assert_allclose(cache.grad_pe, 2e20, rtol=1e-9)
        np.testing.assert_allclose(cache.phi_cell, 300.0 - 4000.0 * grid.cell_centers, rtol=1e-12)

    @pytest.mark.parametrize("grid_name", GRIDS)
    def test_quadratic_profiles(self, grid_name, request):
        grid = request.getfixturevalue(grid_name)
        cache = Cache.allocate(grid.n_cells)
        cache.phi[:] = 1e5 * grid.edges**2
        cache.pe[:] = 1e22 * grid.cell_centers**2

        compute_gradients(grid, cache)

        # Cell centers are edge midpoints, where the first difference is exact
        np.testing.assert_allclose(cache.grad_phi, 2e5 * grid.cell_centers, rtol=1e-8, atol=1e-8)
        np.testing.assert_allclose(cache.grad_pe, 2e22 * grid.cell_centers, rtol=1e-8, atol=1e8)

    def test_phi_cell_boundaries(self, uniform_grid):
        cache = Cache.allocate(uniform_grid.n_cells)
        cache.phi[:] = np.random.default_rng(0).uniform(0, 300, uniform_grid.n_edges)
        compute_gradients(uniform_grid, cache)
        assert cache.phi_cell[0] == cache.phi[0]
        assert cache.phi_cell[-1] == cache.phi[-1]


class TestPotentialSolvers:

    def _uniform_plasma(self, grid):
        cache = Cache.allocate(grid.n_cells)
        cache.ne[:] = 1e18
        cache.mu[:] = 2.0
        return cache

    @pytest.mark.parametrize("grid_name", GRIDS)
    def test_ohmic_constant_field(self, grid_name, request):
        grid = request.getfixturevalue(grid_name)
        cache = self._uniform_plasma(grid)
        E = -5000.0
        cache.ue[:] = E * cache.mu

        phi = OhmicPotentialSolver().solve(grid, cache, 300.0, 0.0)

        assert phi is cache.phi
        np.testing.assert_allclose(phi, 300.0 + E * (grid.edges - grid.edges[0]), rtol=1e-10)

    @pytest.mark.parametrize("grid_name", GRIDS)
    def test_tridiagonal_uniform_conductivity(self, grid_name, request):
        """Uniform conductivity and no sources give a linear potential between the electrodes."""
        grid = request.getfixturevalue(grid_name)
        cache = self._uniform_plasma(grid)

        phi = TridiagonalPotentialSolver().solve(grid, cache, 300.0, 0.0)

        z = grid.edges
        expected = 300.0 * (z[-1] - z) / (z[-1] - z[0])
        assert phi[0] == pytest.approx(300.0)
        assert phi[-1] == pytest.approx(0.0, abs=1e-9)
        np.testing.assert_allclose(phi, expected, rtol=1e-8, atol=1e-8)


class TestDischargeCurrent:

    def test_uniform_resistor(self, uniform_grid):
        """With no ion current or pressure gradient, Id = (V_L - V_R) / R."""
        cache = Cache.allocate(uniform_grid.n_cells)
        cache.ne[:] = 1e17
        cache.mu[:] = 5.0
        A = 1e-2
        L = uniform_grid.cell_centers[-1] - uniform_grid.cell_centers[0]
        e = CONSTANTS.e

        Id = discharge_current(uniform_grid, cache, A, 300.0, 0.0)

        assert Id == pytest.approx(300.0 * e * 1e17 * 5.0 * A / L)

    def test_current_continuity(self, stretched_grid):
        rng = np.random.default_rng(1)
        n = stretched_grid.n_cells
        cache = Cache.allocate(n)
        cache.ne[:] = rng.uniform(1e17, 1e18, n)
        cache.mu[:] = rng.uniform(0.5, 5.0, n)
        cache.ji[:] = rng.uniform(0.0, 100.0, n)
        A = 1e-2

        Id = discharge_current(stretched_grid, cache, A, 300.0, 0.0)
        ue = electron_velocity(cache.ji, Id, cache.ne, A)

        # je + ji = Id / A with je = -e ne ue
        total = -CONSTANTS.e * cache.ne * ue + cache.ji
        np.testing.assert_allclose(total, Id / A, rtol=1e-10)
