"""
Physical constants, gases and charged species.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicalConstants:
    """Physical constants injected into the solver parameters (SI units)."""
    e: float = 1.602176634e-19          # Elementary charge [C]
    me: float = 9.1093837015e-31        # Electron mass [kg]
    kB: float = 1.380649e-23            # Boltzmann constant [J/K]
    NA: float = 6.02214076e23           # Avogadro number [1/mol]
    R0: float = 8.314462618             # Universal gas constant [J/(mol·K)]


CONSTANTS = PhysicalConstants()


@dataclass(frozen=True)
class Gas:
    """Thermodynamic properties of a calorically perfect monatomic gas."""
    name: str
    short_name: str
    gamma: float = 5 / 3            # Ratio of specific heats
    M: float = 131.293              # Molar mass [g/mol]

    @property
    def m(self) -> float:
        """Mass of one atom [kg]."""
        return self.M / 1000 / CONSTANTS.NA

    @property
    def R(self) -> float:
        """Specific gas constant [J/(kg·K)]."""
        return CONSTANTS.R0 / self.M * 1000

    @property
    def cp(self) -> float:
        """Specific heat at constant pressure [J/(kg·K)]."""
        return self.gamma * self.R / (self.gamma - 1)

    @property
    def cv(self) -> float:
        """Specific heat at constant volume [J/(kg·K)]."""
        return self.R / (self.gamma - 1)

    def __str__(self):
        return self.short_name


@dataclass(frozen=True)
class Species:
    """A gas in a given charge state Z."""
    element: Gas
    Z: int = 0

    @property
    def symbol(self) -> str:
        return str(self)

    def __str__(self):
        if self.Z == 0:
            return self.element.short_name
        if self.Z == 1:
            return f"{self.element.short_name}+"
        return f"{self.element.short_name}{self.Z}+"


Xenon = Gas("Xenon", "Xe", gamma=5 / 3, M=131.293)
Krypton = Gas("Krypton", "Kr", gamma=5 / 3, M=83.798)
