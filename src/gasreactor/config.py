"""Container configuration and scenario loading."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple, TypeVar

from gasreactor import constants
from gasreactor.models import Term
from gasreactor.reactions import Reaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConfig:
    """Environment constants the simulation core depends on.

    Attributes:
        width: Container width, used for wall reflection.
        height: Container height, used for wall reflection.
        radius: Radius given to every new particle.
        cooldown: Ticks a reaction product stays non-reactive.
        speed_variation: Bound on the random fractional deviation of a new
            particle's speed from the container temperature, in [0, 1].
        colors: Species formula to render color lookup.
        fallback_color: Color for formulas missing from ``colors``.
        default_species: Species created by a pointer click.
        fps: Tick cadence of the interactive front end.
        temperature: Initial container temperature (nominal speed).
        seed: Optional seed for the particle random generator.
    """

    width: float = constants.CONTAINER_WIDTH
    height: float = constants.CONTAINER_HEIGHT
    radius: float = constants.PARTICLE_RADIUS
    cooldown: int = constants.COOLDOWN_TICKS
    speed_variation: float = constants.MAX_SPEED_VARIATION
    colors: Mapping[str, str] = field(
        default_factory=lambda: dict(constants.SPECIES_COLORS), hash=False
    )
    fallback_color: str = constants.FALLBACK_COLOR
    default_species: str = constants.DEFAULT_SPECIES
    fps: int = constants.FPS
    temperature: float = constants.CONTAINER_TEMPERATURE
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        # Read-only view so the frozen config cannot be changed through it
        object.__setattr__(self, "colors", MappingProxyType(dict(self.colors)))

        for name in ("width", "height", "radius", "speed_variation", "temperature"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite: {value}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Container dimensions must be positive: {self.width}x{self.height}")
        if self.radius <= 0:
            raise ValueError(f"Particle radius must be positive: {self.radius}")
        if 2 * self.radius > min(self.width, self.height):
            raise ValueError("Particle diameter does not fit inside the container")
        if self.cooldown < 0:
            raise ValueError(f"Cooldown must be non-negative: {self.cooldown}")
        if not 0.0 <= self.speed_variation <= 1.0:
            raise ValueError(f"Speed variation must be within [0, 1]: {self.speed_variation}")
        if self.fps <= 0:
            raise ValueError(f"FPS must be positive: {self.fps}")
        if self.temperature < 0:
            raise ValueError(f"Temperature must be non-negative: {self.temperature}")

    def color_for(self, formula: str) -> str:
        return self.colors.get(formula, self.fallback_color)

    @property
    def frame_interval_ms(self) -> int:
        return max(1, round(1000 / self.fps))


@dataclass(frozen=True)
class Scenario:
    config: SimulationConfig
    reactions: Tuple[Reaction, ...]
    initial_counts: Mapping[str, int] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "reactions", tuple(self.reactions))
        object.__setattr__(self, "initial_counts", MappingProxyType(dict(self.initial_counts)))


T = TypeVar("T")


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise ValueError(f"{key!r} must be a JSON object, got {type(value).__name__}")
    return value


def _convert(convert: Callable[[Any], T], value: Any, label: str) -> T:
    try:
        return convert(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"Invalid value for {label!r}: {value!r}") from None


def _parse_terms(data: Any, label: str) -> Tuple[Term, ...]:
    # Accept {"A": 2} or [{"formula": "A", "coefficient": 2}]
    if isinstance(data, Mapping):
        items = list(data.items())
    elif isinstance(data, list):
        items = []
        for entry in data:
            if not isinstance(entry, Mapping) or "formula" not in entry:
                raise ValueError(f"Invalid {label} entry: {entry!r}")
            items.append((entry["formula"], entry.get("coefficient", 1)))
    else:
        raise ValueError(f"Reaction {label} must be a mapping or a list, got {type(data).__name__}")

    if not items:
        raise ValueError(f"Reaction {label} must not be empty")
    return tuple(Term(str(formula), coefficient) for formula, coefficient in items)


def parse_reaction(data: Mapping[str, Any], index: int = 0) -> Reaction:
    if not isinstance(data, Mapping):
        raise ValueError(f"Reaction {index} must be a JSON object, got {type(data).__name__}")
    try:
        reactants = data["reactants"]
        products = data["products"]
    except KeyError as exc:
        raise ValueError(f"Reaction {index} is missing {exc.args[0]!r}") from None

    return Reaction(
        name=str(data.get("name", f"rxn{index + 1}")),
        reactants=_parse_terms(reactants, "reactants"),
        products=_parse_terms(products, "products"),
        reversible=bool(data.get("reversible", False)),
    )


def parse_config(data: Mapping[str, Any]) -> SimulationConfig:
    container = _section(data, "container")
    particles = _section(data, "particles")
    defaults = SimulationConfig()

    colors = dict(defaults.colors)
    colors.update({str(k): str(v) for k, v in _section(particles, "colors").items()})

    seed = data.get("seed")
    return SimulationConfig(
        width=_convert(float, container.get("width", defaults.width), "width"),
        height=_convert(float, container.get("height", defaults.height), "height"),
        radius=_convert(float, particles.get("radius", defaults.radius), "radius"),
        cooldown=_convert(int, particles.get("cooldown", defaults.cooldown), "cooldown"),
        speed_variation=_convert(
            float, particles.get("speed_variation", defaults.speed_variation), "speed_variation"
        ),
        colors=colors,
        fallback_color=str(particles.get("fallback_color", defaults.fallback_color)),
        default_species=str(particles.get("default_species", defaults.default_species)),
        fps=_convert(int, data.get("fps", defaults.fps), "fps"),
        temperature=_convert(float, data.get("temperature", defaults.temperature), "temperature"),
        seed=None if seed is None else _convert(int, seed, "seed"),
    )


def parse_scenario(data: Mapping[str, Any]) -> Scenario:
    config = parse_config(data)

    entries = data.get("reactions", [])
    if not isinstance(entries, list):
        raise ValueError(f"'reactions' must be a JSON array, got {type(entries).__name__}")
    reactions = tuple(parse_reaction(entry, index) for index, entry in enumerate(entries))

    initial = {}
    for formula, count in _section(data, "initial").items():
        count = _convert(int, count, f"initial.{formula}")
        if count < 0:
            raise ValueError(f"Initial count of {formula!r} must be non-negative: {count}")
        initial[str(formula)] = count

    return Scenario(config=config, reactions=reactions, initial_counts=initial)


def load_scenario(path: Path) -> Scenario:
    """Read a JSON scenario file."""
    with open(path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")

    scenario = parse_scenario(data)
    logger.info(
        "Loaded scenario %s: %d reaction(s), initial %s",
        path,
        len(scenario.reactions),
        dict(scenario.initial_counts),
    )
    return scenario


def default_scenario(count: int = 40, seed: Optional[int] = None) -> Scenario:
    """The reversible ``2A <=> 2B`` demo seeded with ``count`` A particles."""
    reaction = Reaction(
        name="rxn1",
        reactants=(Term("A", 2),),
        products=(Term("B", 2),),
        reversible=True,
    )
    return Scenario(
        config=SimulationConfig(seed=seed),
        reactions=(reaction,),
        initial_counts={"A": count},
    )
