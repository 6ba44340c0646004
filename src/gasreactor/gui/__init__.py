"""GUI package for gasreactor."""

from gasreactor.gui.simulation import SpeciesHistory

__all__ = ["SpeciesHistory"]
