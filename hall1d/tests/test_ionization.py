"""
Pytest tests for ionization reactions and rate coefficient providers.

Tests verify:
1. Reaction sets built by the fits for each charge state
2. Gas and charge state validation
3. Loading tabulated rates from files
4. Maxwellian-averaged rate coefficients
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
    CONSTANTS, Species, Xenon, Krypton, Biexponential, RateTable,
    IonizationFit, IonizationLUT, LandmarkIonizationLUT,
)
from hall1d.src.ionization import (
    ionization_fits_Xe, load_ionization_reaction, write_rate_coeff_file,
    rate_coeff_filename, compute_rate_coeffs,
)


Xe0, Xe1, Xe2, Xe3 = (Species(Xenon, Z) for Z in range(4))


@pytest.fixture
def rate_table():
    energies = np.linspace(1.0, 100.0, 100)
    rates = 1e-13 * energies / (energies + 20.0)
    return energies, rates


class TestIonizationFit:

    @pytest.mark.parametrize("species, n_reactions", [
        ([Xe0, Xe1], 1),
        ([Xe0, Xe1, Xe2], 3),
        ([Xe0, Xe1, Xe2, Xe3], 6),
    ])
    def test_reaction_count(self, species, n_reactions):
        reactions = IonizationFit().load_reactions(species)
        assert len(reactions) == n_reactions

    def test_reaction_pairs(self):
        reactions = ionization_fits_Xe(2)
        pairs = [(r.reactant, r.product) for r in reactions]
        assert pairs == [(Xe0, Xe1), (Xe0, Xe2), (Xe1, Xe2)]

    def test_reaction_strings(self):
        reactions = ionization_fits_Xe(3)
        assert str(reactions[0]) == "e- + Xe -> 2e- + Xe+"
        assert str(reactions[1]) == "e- + Xe -> 3e- + Xe2+"
        assert str(reactions[-1]) == "e- + Xe2+ -> 2e- + Xe3+"

    def test_unsupported_gas(self):
        with pytest.raises(ValueError, match="Krypton"):
            IonizationFit().load_reactions([Species(Krypton, 0), Species(Krypton, 1)])

    def test_unsupported_charge_state(self):
        with pytest.raises(ValueError, match="charge state"):
            IonizationFit().load_reactions([Xe0, Xe1, Species(Xenon, 4)])

    def test_invalid_ncharge(self):
        with pytest.raises(ValueError):
            ionization_fits_Xe(4)

    def test_rates_positive_and_increasing(self):
        k = ionization_fits_Xe(1)[0].rate_coeff
        Te = np.array([5.0, 10.0, 20.0, 40.0])
        rates = k(Te)
        assert np.all(rates > 0)
        assert np.all(np.diff(rates) > 0)


class TestRateProviders:

    def test_biexponential(self):
        fit = Biexponential(3.6e-13, 40.0, 0.0, 0.0, 3.0)
        assert fit(10.0) == pytest.approx(3.6e-13 * np.exp(-40.0 / 13.0))

    def test_biexponential_second_term(self):
        fit = Biexponential(1.0, 10.0, 2.0, 0.5, 0.0)
        assert fit(5.0) == pytest.approx(np.exp(-2.0) - 0.5 * np.exp(-4.0))

    def test_table_interpolation(self):
        table = RateTable([0.0, 10.0, 20.0], [0.0, 1e-14, 3e-14])
        assert table(5.0) == pytest.approx(0.5e-14)
        assert table(15.0) == pytest.approx(2e-14)

    def test_table_clamps(self):
        table = RateTable([1.0, 10.0], [1e-15, 1e-14])
        assert table(0.1) == pytest.approx(1e-15)
        assert table(100.0) == pytest.approx(1e-14)

    def test_table_energy_factor(self):
        table = RateTable([0.0, 30.0], [0.0, 3e-14], energy_factor=1.5)
        assert table(10.0) == pytest.approx(1.5e-14)

    def test_table_validation(self):
        with pytest.raises(ValueError):
            RateTable([0.0, 2.0, 1.0], [1.0, 2.0, 3.0])
        with pytest.raises(ValueError):
            RateTable([0.0, 1.0], [1.0, 2.0, 3.0])


class TestIonizationLUT:

    def test_filename(self, tmp_path):
        assert rate_coeff_filename(Xe0, Xe2, 'ionization', tmp_path).name == "ionization_Xe_Xe2+.dat"

    def test_load_from_file(self, tmp_path, rate_table):
        energies, rates = rate_table
        write_rate_coeff_file(rate_coeff_filename(Xe0, Xe1, 'ionization', tmp_path),
                              12.1298437, energies, rates)

        reaction = load_ionization_reaction(Xe0, Xe1, tmp_path)

        assert reaction.ionization_energy == pytest.approx(12.1298437)
        assert reaction.reactant == Xe0
        assert reaction.product == Xe1
        np.testing.assert_allclose(reaction.rate_coeff(energies), rates, rtol=1e-12)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_ionization_reaction(Xe0, Xe1, tmp_path)

    def test_directory_search_order(self, tmp_path, rate_table):
        energies, rates = rate_table
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        write_rate_coeff_file(rate_coeff_filename(Xe0, Xe1, 'ionization', second),
                              12.0, energies, rates)
        write_rate_coeff_file(rate_coeff_filename(Xe0, Xe2, 'ionization', first),
                              33.0, energies, 2 * rates)
        write_rate_coeff_file(rate_coeff_filename(Xe0, Xe2, 'ionization', second),
                              99.0, energies, 3 * rates)
        write_rate_coeff_file(rate_coeff_filename(Xe1, Xe2, 'ionization', second),
                              21.0, energies, rates)

        reactions = IonizationLUT([first, second]).load_reactions([Xe0, Xe1, Xe2])

        assert [str(r) for r in reactions] == [
            "e- + Xe -> 2e- + Xe+", "e- + Xe -> 3e- + Xe2+", "e- + Xe+ -> 2e- + Xe2+",
        ]
        # Xe -> Xe2+ exists in both directories; the first one wins
        assert reactions[1].ionization_energy == pytest.approx(33.0)

    def test_missing_pair(self, tmp_path, rate_table):
        energies, rates = rate_table
        write_rate_coeff_file(rate_coeff_filename(Xe0, Xe1, 'ionization', tmp_path),
                              12.0, energies, rates)
        with pytest.raises(ValueError, match="No reactions"):
            IonizationLUT([tmp_path]).load_reactions([Xe0, Xe1, Xe2])


class TestLandmarkLUT:

    @pytest.fixture
    def landmark_file(self, tmp_path):
        path = tmp_path / "landmark_rates.csv"
        path.write_text(
            "Energy (eV),Rate coefficient (m3/s)\n"
            "0.0,0.0\n"
            "15.0,1.0e-14\n"
            "30.0,3.0e-14\n"
        )
        return path

    def test_single_reaction(self, landmark_file):
        reactions = LandmarkIonizationLUT(landmark_file).load_reactions([Xe0, Xe1])
        assert len(reactions) == 1
        assert reactions[0].ionization_energy == pytest.approx(12.12)

    def test_rate_over_mean_energy(self, landmark_file):
        """The table is indexed by 3/2 Te."""
        k = LandmarkIonizationLUT(landmark_file).load_reactions([Xe0, Xe1])[0].rate_coeff
        assert k(10.0) == pytest.approx(1.0e-14)
        assert k(15.0) == pytest.approx(2.0e-14)

    def test_only_singly_charged(self, landmark_file):
        with pytest.raises(ValueError):
            LandmarkIonizationLUT(landmark_file).load_reactions([Xe0, Xe1, Xe2])

    def test_only_xenon(self, landmark_file):
        with pytest.raises(ValueError):
            LandmarkIonizationLUT(landmark_file).load_reactions([Species(Krypton, 0),
                                                               Species(Krypton, 1)])


class TestRateCoefficientIntegration:

    def test_constant_cross_section(self):
        """A constant cross section gives k = sigma * mean electron speed."""
        sigma = 1e-20
        energies = np.array([3.0, 15.0, 30.0])

        k = compute_rate_coeffs(energies, lambda E: sigma)

        Tev = 2 / 3 * energies
        mean_speed = np.sqrt(8 * CONSTANTS.e * Tev / np.pi / CONSTANTS.me)
        np.testing.assert_allclose(k, sigma * mean_speed, rtol=1e-4)

    def test_threshold_cross_section(self):
        """Rates rise with temperature for a cross section with a threshold."""
        def sigma(E):
            if E <= 12.1:
                return 0.0
            return 1e-20 * (1 - 12.1 / E)

        k = compute_rate_coeffs(np.array([3.0, 6.0, 12.0]), sigma)
        assert np.all(np.diff(k) > 0)
