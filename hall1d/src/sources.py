"""
Source term classes for the 1D multi-fluid solver.

Every source term returns a rate array S of the same shape as U, added to
the right-hand side dU/dt. Each physical process lives in exactly one term.

Notation:
    U   - state array [rho_0, (rho_0 u_0), ..., n_eps]
    S   - source rate array (same shape as U)
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import List

from .ionization import species_indices
from .thermodynamics import velocity


class SourceTerm(ABC):
    """Abstract base class for source terms."""

    @abstractmethod
    def compute(self, U: np.ndarray, params) -> np.ndarray:
        """
        Compute source term contribution.

        Args:
            U: State array (n_vars, n_cells)
            params: Solver parameters, with an up-to-date cache

        Returns:
            S: Source rate array of shape (n_vars, n_cells)
        """
        pass


class IonizationSource(SourceTerm):
    """
    Mass and momentum exchange between charge states by electron impact.

        ndot = k(Te) * ne * n_reactant

    The ionized mass ndot * m leaves the reactant density equation and enters
    the product one, carrying the reactant velocity with it.
    """

    def compute(self, U, params):
        S = np.zeros_like(U)
        if not params.reactions:
            return S

        index = params.index
        cache = params.cache
        reactant_rows, product_rows = species_indices(params.reactions, index)
        fluid_of_row = {index.density_row(i): i for i in range(len(index.fluids))}

        for reaction, r_row, p_row in zip(params.reactions, reactant_rows, product_rows):
            r_fluid_idx = fluid_of_row[r_row]
            p_fluid_idx = fluid_of_row[p_row]
            reactant = index.fluids[r_fluid_idx]
            m = reactant.m

            n_reactant = U[r_row] / m
            ndot = reaction.rate_coeff(cache.Tev) * cache.ne * n_reactant
            mdot = ndot * m

            S[r_row] -= mdot
            S[p_row] += mdot

            u_reactant = velocity(U[index.ranges[r_fluid_idx]], reactant)
            r_mom = index.momentum_row(r_fluid_idx)
            p_mom = index.momentum_row(p_fluid_idx)
            if r_mom is not None:
                S[r_mom] -= mdot * u_reactant
            if p_mom is not None:
                S[p_mom] += mdot * u_reactant

        return S


class IonAccelerationSource(SourceTerm):
    """
    Electrostatic force on ions, Z * e * n_i * E, in each ion momentum equation.

    By default E = -grad_phi. With ohms_law=True the field is taken from the
    generalized Ohm's law instead, E = -ue / mu - grad_pe / ne, which couples
    the ions to the electron pressure gradient directly.
    """

    def __init__(self, ohms_law: bool = False):
        self.ohms_law = ohms_law

    def electric_field(self, cache) -> np.ndarray:
        if self.ohms_law:
            return -cache.ue / cache.mu - cache.grad_pe / cache.ne
        return -cache.grad_phi

    def compute(self, U, params):
        S = np.zeros_like(U)
        index = params.index
        e = params.constants.e
        E = self.electric_field(params.cache)

        for i in index.ions:
            row = index.momentum_row(i)
            if row is None:
                continue
            fluid = index.fluids[i]
            S[row] += fluid.Z * e * U[index.density_row(i)] / fluid.m * E

        return S


class CompositeSourceTerm(SourceTerm):
    """Combines multiple source terms."""

    def __init__(self, sources: List[SourceTerm] = None):
        self.sources = sources if sources is not None else []

    def add(self, source: SourceTerm):
        """Add a source term to the composite."""
        self.sources.append(source)

    def compute(self, U, params):
        S_total = np.zeros_like(U)
        for source in self.sources:
            S_total += source.compute(U, params)
        return S_total


def ionization_frequency(U: np.ndarray, params) -> np.ndarray:
    """Ionization collision frequency of electrons on neutrals [1/s]."""
    nu_iz = np.zeros(U.shape[1])
    index = params.index
    neutral_mass = {index.density_row(i): index.fluids[i].m for i in index.neutrals}
    reactant_rows, _ = species_indices(params.reactions, index)
    for reaction, r_row in zip(params.reactions, reactant_rows):
        if r_row in neutral_mass:
            nu_iz += reaction.rate_coeff(params.cache.Tev) * U[r_row] / neutral_mass[r_row]
    return nu_iz
