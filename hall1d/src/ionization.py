"""
Ionization reactions and rate-coefficient providers.

A rate coefficient is a pure function of the electron temperature [eV]
returning k [m³/s]. Two kinds of providers exist:

    RateTable    - piecewise-linear interpolation of tabulated values
    Biexponential - closed-form fit c1*(exp(-c2/(x+c5)) - c4*exp(-c2*c3/(x+c5)))

Reaction sets are built once by an IonizationModel, which validates the
propellant and the maximum charge state before anything is loaded.

Rate file format (one file per reactant/product pair):

    Ionization energy (eV): 12.1298437
    Energy (eV)    Rate coefficient (m3/s)
    1.0    1.2e-20
    ...
"""

import logging
import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Sequence

from scipy.integrate import quad

from .gas import CONSTANTS, Gas, Species, Xenon

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Biexponential:
    """Biexponential fit of a rate coefficient."""
    c1: float
    c2: float
    c3: float
    c4: float
    c5: float

    def __call__(self, x):
        return self.c1 * (np.exp(-self.c2 / (x + self.c5))
                          - self.c4 * np.exp(-self.c2 * self.c3 / (x + self.c5)))


class RateTable:
    """
    Piecewise-linear rate coefficient table.

    Values outside the tabulated range are clamped to the end points.
    The argument is scaled by energy_factor before lookup, which lets a
    table tabulated over mean energy (3/2 Te) be queried by temperature.
    """

    def __init__(self, energies: np.ndarray, rates: np.ndarray, energy_factor: float = 1.0):
        energies = np.asarray(energies, dtype=float)
        rates = np.asarray(rates, dtype=float)
        if energies.shape != rates.shape or energies.ndim != 1:
            raise ValueError("Rate table needs two 1D columns of equal length")
        if np.any(np.diff(energies) <= 0):
            raise ValueError("Rate table energies must be strictly increasing")
        self.energies = energies
        self.rates = rates
        self.energy_factor = energy_factor

    def __call__(self, Tev):
        return np.interp(self.energy_factor * np.asarray(Tev), self.energies, self.rates)


@dataclass(frozen=True)
class IonizationReaction:
    ionization_energy: float            # [eV]
    reactant: Species
    product: Species
    rate_coeff: Callable

    def __str__(self):
        electron_output = f"{self.product.Z - self.reactant.Z + 1}e-"
        return f"e- + {self.reactant} -> {electron_output} + {self.product}"


def species_indices(reactions: Sequence[IonizationReaction], index):
    """Density rows of the reactant and product of every reaction."""
    rows = index.species_rows()
    reactant_rows = [rows[r.reactant.symbol] for r in reactions]
    product_rows = [rows[r.product.symbol] for r in reactions]
    return reactant_rows, product_rows


# --- Rate file handling ---

def rate_coeff_filename(reactant: Species, product: Species,
                        reaction_type: str = 'ionization', folder='.') -> Path:
    return Path(folder) / f"{reaction_type}_{reactant}_{product}.dat"


def load_ionization_reaction(reactant: Species, product: Species, folder='.') -> IonizationReaction:
    """Load one reaction from its rate file."""
    rates_file = rate_coeff_filename(reactant, product, 'ionization', folder)
    if not rates_file.exists():
        raise FileNotFoundError(
            f"Rate coefficient file not found: {rates_file}\n"
            f"Expected at: {rates_file.absolute()}"
        )

    with open(rates_file, 'r') as f:
        header = f.readline()
        ionization_energy = float(header.split(':')[1].strip())
        rates = np.loadtxt(f, skiprows=1, ndmin=2)

    logger.debug("Loaded %d rate coefficients for %s -> %s from %s",
                 len(rates), reactant, product, rates_file)
    rate_coeff = RateTable(rates[:, 0], rates[:, 1])
    return IonizationReaction(ionization_energy, reactant, product, rate_coeff)


def write_rate_coeff_file(path, ionization_energy: float, energies, rate_coeffs):
    """Write a rate coefficient table in the format read by load_ionization_reaction."""
    path = Path(path)
    data = np.column_stack((energies, rate_coeffs))
    with open(path, 'w') as f:
        f.write(f"Ionization energy (eV): {ionization_energy}\n")
        f.write("Energy (eV)\tRate coefficient (m3/s)\n")
        np.savetxt(f, data, delimiter='\t')
    return path


def maxwellian_vdf(Tev: float, v):
    """Maxwellian speed distribution of electrons at temperature Tev [eV]."""
    me, e = CONSTANTS.me, CONSTANTS.e
    return np.sqrt(2 / np.pi) * v**2 * (me / e / Tev)**1.5 * np.exp(-me * v**2 / 2 / e / Tev)


def compute_rate_coeffs(energies, cross_section: Callable) -> np.ndarray:
    """
    Maxwellian-averaged rate coefficients.

    Args:
        energies: Mean electron energies (3/2 Te) [eV]
        cross_section: sigma(energy [eV]) -> cross section [m²]

    Returns:
        Rate coefficients k = <sigma v> [m³/s] at each energy
    """
    me, e = CONSTANTS.me, CONSTANTS.e
    rate_coeffs = np.zeros(len(energies))
    for i, energy in enumerate(energies):
        Tev = 2 / 3 * energy

        def integrand(v):
            return cross_section(0.5 * me * v**2 / e) * v * maxwellian_vdf(Tev, v)

        v_max = 10 * np.sqrt(2 * e * energy / me)
        rate_coeffs[i] = quad(integrand, 0.0, v_max, limit=200)[0]
    return rate_coeffs


# --- Ionization models ---

class IonizationModel(ABC):
    """
    Builds the set of ionization reactions for a list of species.

    supported_gases: empty means any gas.
    maximum_charge_state: 0 means no limit.
    """
    supported_gases: List[Gas] = []
    maximum_charge_state: int = 0

    def load_reactions(self, species: Sequence[Species]) -> List[IonizationReaction]:
        """Validate the species and build the reactions."""
        if self.supported_gases:
            for s in species:
                if s.element not in self.supported_gases:
                    raise ValueError(
                        f"{s.element.name} is not supported by {type(self).__name__}. "
                        f"The list of supported gases is {[g.name for g in self.supported_gases]}"
                    )

        if self.maximum_charge_state > 0:
            for s in species:
                if s.Z > self.maximum_charge_state:
                    raise ValueError(
                        f"{type(self).__name__} does not support ions with a charge state "
                        f"of {s.Z}. The maximum supported charge state is "
                        f"{self.maximum_charge_state}."
                    )

        reactions = self._load_reactions(species)
        logger.info("Loaded %d ionization reactions: %s",
                    len(reactions), ', '.join(str(r) for r in reactions))
        return reactions

    @abstractmethod
    def _load_reactions(self, species: Sequence[Species]) -> List[IonizationReaction]:
        pass


class IonizationLUT(IonizationModel):
    """Tabulated rates read from files, searched in the given directories in order."""

    def __init__(self, directories: Sequence = ()):
        self.directories = [Path(d) for d in directories]

    def _load_reactions(self, species):
        species_sorted = sorted(species, key=lambda s: s.Z)
        reactions = []
        for i, reactant in enumerate(species_sorted):
            for product in species_sorted[i + 1:]:
                for folder in self.directories:
                    if rate_coeff_filename(reactant, product, 'ionization', folder).exists():
                        reactions.append(load_ionization_reaction(reactant, product, folder))
                        break
                else:
                    raise ValueError(
                        f"No reactions including {reactant} and {product} in "
                        f"provided directories: {[str(d) for d in self.directories]}"
                    )
        return reactions


class LandmarkIonizationLUT(IonizationModel):
    """
    LANDMARK benchmark ionization table for singly charged xenon.

    The file is comma separated with one header line; rates are tabulated
    over the mean electron energy 3/2 Te.
    """
    supported_gases = [Xenon]
    maximum_charge_state = 1
    ionization_energy = 12.12

    def __init__(self, rates_file):
        self.rates_file = Path(rates_file)

    def _load_reactions(self, species):
        if not self.rates_file.exists():
            raise FileNotFoundError(f"Landmark rate table not found: {self.rates_file}")
        rates = np.loadtxt(self.rates_file, delimiter=',', skiprows=1, ndmin=2)
        rate_coeff = RateTable(rates[:, 0], rates[:, 1], energy_factor=1.5)
        return [IonizationReaction(self.ionization_energy, Species(Xenon, 0),
                                   Species(Xenon, 1), rate_coeff)]


class IonizationFit(IonizationModel):
    """Biexponential fits for xenon up to triply charged ions."""
    supported_gases = [Xenon]
    maximum_charge_state = 3

    def _load_reactions(self, species):
        ncharge = max(s.Z for s in species)
        return ionization_fits_Xe(ncharge)


def ionization_fits_Xe(ncharge: int) -> List[IonizationReaction]:
    """All pairwise xenon ionization reactions up to charge state ncharge."""
    Xe0, Xe1, Xe2, Xe3 = (Species(Xenon, Z) for Z in range(4))

    Xe0_Xe1 = IonizationReaction(12.1298437, Xe0, Xe1, Biexponential(3.6e-13, 40.0, 0.0, 0.0, 3.0))
    Xe0_Xe2 = IonizationReaction(33.1048437, Xe0, Xe2, Biexponential(3.8e-14, 57.0, 10.0, 0.7, 0.0))
    Xe0_Xe3 = IonizationReaction(64.1548427, Xe0, Xe3, Biexponential(1.7e-14, 120.0, 6.0, 0.5, 0.0))
    Xe1_Xe2 = IonizationReaction(20.975, Xe1, Xe2, Biexponential(1.48e-13, 35.0, 11.0, 0.45, 0.0))
    Xe1_Xe3 = IonizationReaction(52.025, Xe1, Xe3, Biexponential(4e-14, 100.0, 4.0, 0.8, 0.0))
    Xe2_Xe3 = IonizationReaction(31.05, Xe2, Xe3, Biexponential(1.11e-13, 43.0, 7.0, 0.68, 0.0))

    if ncharge == 1:
        return [Xe0_Xe1]
    elif ncharge == 2:
        return [Xe0_Xe1, Xe0_Xe2, Xe1_Xe2]
    elif ncharge == 3:
        return [Xe0_Xe1, Xe0_Xe2, Xe0_Xe3, Xe1_Xe2, Xe1_Xe3, Xe2_Xe3]
    raise ValueError(f"ncharge must be 1, 2, or 3, got {ncharge}")
