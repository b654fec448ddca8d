"""
Pytest tests for fluid and electron energy boundary conditions.

Tests verify:
1. Dirichlet and Neumann conditions set the right rows
2. Ions leave the domain at least at the Bohm speed
3. Anode recombination feeds the neutral density
4. Energy boundary conditions only touch the energy row
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from hall1d.src import (
    Species, Xenon, Fluid, ContinuityOnly, IsothermalEuler, StateIndex,
    Dirichlet, Neumann, Reflective, DirichletIonBohm, NeumannIonBohm,
    DirichletEnergy, NeumannEnergy, DirichletEnergyUpdateDensity,
)
from hall1d.src.boundary import bohm_velocity


@pytest.fixture
def index():
    """Neutral xenon (row 0), singly charged ions (rows 1-2), energy (row 3)."""
    return StateIndex([
        Fluid(Species(Xenon, 0), ContinuityOnly(u=300.0, T=300.0)),
        Fluid(Species(Xenon, 1), IsothermalEuler(T=300.0)),
    ])


@pytest.fixture
def U(index):
    """Smoothly varying state on 10 cells with slow ions."""
    n = 10
    U = index.allocate(n)
    U[0] = np.linspace(2e-6, 1e-6, n)
    U[1] = np.linspace(1e-8, 2e-8, n)
    U[2] = U[1] * np.linspace(-100.0, 100.0, n)
    U[3] = np.linspace(1e18, 2e18, n)
    return U


class TestStateIndex:

    def test_layout(self, index):
        assert index.n_vars == 4
        assert index.n_eps == 3
        assert index.ions == [1]
        assert index.neutrals == [0]
        assert index.momentum_row(0) is None
        assert index.ion_rows == [(1, 2)]

    def test_species_rows(self, index):
        assert index.species_rows() == {"Xe": 0, "Xe+": 1}

    def test_unknown_species(self, index):
        with pytest.raises(ValueError):
            index.fluid_index(Species(Xenon, 2))


class TestDirichletNeumann:

    def test_dirichlet_left(self, index, U):
        state = [1.0, 1.0, 300.0]
        Dirichlet(state).apply(U, 'left', index)
        np.testing.assert_array_equal(U[:3, 0], state)

    def test_dirichlet_right(self, index, U):
        state = [3.0, 2.0, 100.0]
        before = U.copy()
        Dirichlet(state).apply(U, 'right', index)
        np.testing.assert_array_equal(U[:3, -1], state)
        np.testing.assert_array_equal(U[:, :-1], before[:, :-1])

    def test_neumann_copies_interior(self, index, U):
        Neumann().apply(U, 'right', index)
        np.testing.assert_array_equal(U[:3, -1], U[:3, -2])

    def test_neumann_idempotent(self, index, U):
        bc = Neumann()
        bc.apply(U, 'left', index)
        once = U.copy()
        bc.apply(U, 'left', index)
        np.testing.assert_array_equal(U, once)

    def test_neumann_leaves_energy(self, index, U):
        energy = U[3].copy()
        Neumann().apply(U, 'left', index)
        np.testing.assert_array_equal(U[3], energy)

    def test_reflective_reverses_momentum(self, index, U):
        Reflective().apply(U, 'left', index)
        assert U[0, 0] == U[0, 1]
        assert U[1, 0] == U[1, 1]
        assert U[2, 0] == -U[2, 1]

    def test_invalid_side(self, index, U):
        with pytest.raises(ValueError):
            Neumann().apply(U, 'top', index)
        with pytest.raises(ValueError):
            DirichletEnergy(1.0).apply(U, 'middle', index)


class TestBohmCondition:
    """Ions leaving the domain satisfy the Bohm criterion."""

    Tev = 10.0

    def test_bohm_velocity(self):
        expected = np.sqrt(2 / 3 * 1.602176634e-19 * 10.0 / Xenon.m)
        assert bohm_velocity(10.0, Xenon.m) == pytest.approx(expected)

    def test_right_neumann_ion_bohm(self, index, U):
        NeumannIonBohm().apply(U, 'right', index, self.Tev, Xenon.m)
        u_bohm = bohm_velocity(self.Tev, Xenon.m)
        assert U[2, -1] / U[1, -1] >= u_bohm * (1 - 1e-12)
        assert U[0, -1] == U[0, -2]

    def test_right_fast_ions_unchanged(self, index, U):
        u_bohm = bohm_velocity(self.Tev, Xenon.m)
        U[2, -2] = U[1, -2] * 2 * u_bohm
        NeumannIonBohm().apply(U, 'right', index, self.Tev, Xenon.m)
        assert U[2, -1] / U[1, -1] == pytest.approx(2 * u_bohm)

    def test_left_neumann_ion_bohm(self, index, U):
        NeumannIonBohm().apply(U, 'left', index, self.Tev, Xenon.m)
        u_bohm = bohm_velocity(self.Tev, Xenon.m)
        # Interior ions drift toward the anode; the boundary flux is preserved
        assert U[2, 0] == pytest.approx(U[2, 1])
        assert U[1, 0] > 0
        assert U[2, 0] / U[1, 0] <= -u_bohm * (1 - 1e-12)

    def test_right_dirichlet_ion_bohm(self, index, U):
        state = [5e-6]
        DirichletIonBohm(state).apply(U, 'right', index, self.Tev, Xenon.m)
        u_bohm = bohm_velocity(self.Tev, Xenon.m)
        assert U[0, -1] == 5e-6
        assert U[2, -1] / U[1, -1] >= u_bohm * (1 - 1e-12)

    def test_anode_recombination(self, index, U):
        """Ions hitting the anode come back as neutrals."""
        state = [5e-6]
        ion_flux = U[2, 1]
        assert ion_flux < 0

        DirichletIonBohm(state, neutral_velocity=150.0).apply(U, 'left', index, self.Tev, Xenon.m)

        assert U[0, 0] == pytest.approx(5e-6 - ion_flux / 150.0)
        assert U[0, 0] > 5e-6


class TestEnergyBoundaryConditions:

    def test_dirichlet_energy(self, index, U):
        fluids = U[:3].copy()
        DirichletEnergy(3e18).apply(U, 'left', index)
        assert U[3, 0] == 3e18
        np.testing.assert_array_equal(U[:3], fluids)

    def test_neumann_energy(self, index, U):
        NeumannEnergy().apply(U, 'right', index)
        assert U[3, -1] == U[3, -2]

    def test_dirichlet_energy_update_density(self, index, U):
        DirichletEnergyUpdateDensity(4.5).apply(U, 'left', index)
        ne = U[1, 0] / Xenon.m
        assert U[3, 0] == pytest.approx(4.5 * ne)

    def test_energy_follows_density(self, index, U):
        bc = DirichletEnergyUpdateDensity(4.5)
        bc.apply(U, 'right', index)
        first = U[3, -1]
        U[1, -1] *= 2
        bc.apply(U, 'right', index)
        assert U[3, -1] == pytest.approx(2 * first)
