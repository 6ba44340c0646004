"""Simulation helpers for the GUI layer."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping

import numpy as np


class SpeciesHistory:
    """Rolling per-tick species counts for plotting.

    Keeps at most ``max_samples`` samples; species first seen later are
    back-filled with zeros.
    """

    def __init__(self, species: Iterable[str] = (), max_samples: int = 600):
        if max_samples <= 0:
            raise ValueError(f"max_samples must be positive: {max_samples}")
        self.max_samples = max_samples
        self.ticks = np.zeros(0, dtype=int)
        self.counts: Dict[str, np.ndarray] = {name: np.zeros(0, dtype=int) for name in species}

    def __len__(self) -> int:
        return len(self.ticks)

    def record(self, tick: int, counts: Mapping[str, int]) -> None:
        for name in counts:
            if name not in self.counts:
                self.counts[name] = np.zeros(len(self.ticks), dtype=int)

        self.ticks = np.append(self.ticks, tick)[-self.max_samples :]
        for name, series in self.counts.items():
            self.counts[name] = np.append(series, counts.get(name, 0))[-self.max_samples :]

    def latest(self) -> Dict[str, int]:
        if len(self.ticks) == 0:
            return {name: 0 for name in self.counts}
        return {name: int(series[-1]) for name, series in self.counts.items()}

    def clear(self) -> None:
        self.ticks = np.zeros(0, dtype=int)
        self.counts = {name: np.zeros(0, dtype=int) for name in self.counts}
