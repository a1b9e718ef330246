"""In-memory career services backing the CLI and the test suite."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..models.parts import PartDefinition
from ..models.scenario import CareerScenario, GameMode
from ..models.vessel import FacilityLimits, VesselBuild
from .base import (
    FacilityRequirementChecker,
    FundsLedger,
    GameModeQuery,
    PartAvailabilityInspector,
    PipelineServices,
    TechnologyRegistry,
    UnlockRegistry,
    UserPrompt,
)

logger = logging.getLogger(__name__)

SIZE_AXES = ("width", "height", "length")


@dataclass
class CareerState:
    """Mutable career save state shared by the services below."""
    mode: GameMode = GameMode.CAREER
    funds: float = 0.0
    researched_techs: set[str] = field(default_factory=set)
    purchased_parts: set[str] = field(default_factory=set)
    experimental_parts: set[str] = field(default_factory=set)

    @classmethod
    def from_scenario(cls, scenario: CareerScenario) -> "CareerState":
        return cls(
            mode=scenario.mode,
            funds=scenario.funds,
            researched_techs=set(scenario.researched_techs),
            purchased_parts=set(scenario.purchased_parts),
            experimental_parts=set(scenario.experimental_parts),
        )


class CareerFundsLedger(FundsLedger):
    def __init__(self, state: CareerState):
        self.state = state

    def current_balance(self) -> float:
        return self.state.funds

    def spend(self, amount: float) -> bool:
        if amount < 0:
            raise ValueError(f"Cannot spend a negative amount: {amount}")
        if amount > self.state.funds:
            logger.debug(f"Refused to spend {amount}, only {self.state.funds} available")
            return False
        self.state.funds -= amount
        logger.debug(f"Spent {amount} funds, {self.state.funds} remaining")
        return True


class CareerTechTree(TechnologyRegistry):
    def __init__(self, state: CareerState):
        self.state = state

    def is_researched(self, tech_id: str) -> bool:
        return tech_id in self.state.researched_techs


class CareerUnlockRegistry(UnlockRegistry):
    def __init__(self, state: CareerState):
        self.state = state

    def unlock(self, parts: Iterable[PartDefinition]) -> None:
        for part in parts:
            if part.name in self.state.purchased_parts:
                continue
            self.state.purchased_parts.add(part.name)
            self.state.experimental_parts.discard(part.name)
            logger.info(f"Unlocked part {part.name}")


class CatalogPartInspector(PartAvailabilityInspector):
    """Classifies vessel parts from the career state.

    A purchased part is available. An unpurchased part is experimental when
    its tech is researched (only the entry cost is missing) or when it has
    been handed out as an experimental part; otherwise it is locked.
    """

    def __init__(self, state: CareerState, tech: TechnologyRegistry):
        self.state = state
        self.tech = tech

    def classify(self, part: PartDefinition) -> str:
        if part.name in self.state.purchased_parts:
            return "available"
        if self.tech.is_researched(part.tech_required) or part.name in self.state.experimental_parts:
            return "experimental"
        return "locked"

    def locked_parts(self, artifact: VesselBuild) -> dict[PartDefinition, int]:
        return {part: count for part, count in artifact.part_counts().items()
                if self.classify(part) == "locked"}

    def experimental_parts(self, artifact: VesselBuild) -> dict[PartDefinition, int]:
        return {part: count for part, count in artifact.part_counts().items()
                if self.classify(part) == "experimental"}

    def unlock_cost(self, parts: Iterable[PartDefinition]) -> float:
        return sum(part.entry_cost for part in set(parts))


class FacilityLimitChecker(FacilityRequirementChecker):
    """Compares part count, mass and size against a facility's limits."""

    def __init__(self, limits: FacilityLimits):
        self.limits = limits

    def evaluate(self, artifact: VesselBuild, allow_soft_pass: bool = True) -> list[str]:
        """Collect every violation; without soft pass, stop at the first one."""
        limits = self.limits
        facility = f"{limits.name} (level {limits.level})"
        violations: list[str] = []

        part_count = artifact.part_count()
        if limits.max_parts is not None and part_count > limits.max_parts:
            violations.append(f"Part count {part_count} exceeds the {facility} limit of {limits.max_parts}")

        mass = artifact.total_mass()
        if limits.max_mass is not None and mass > limits.max_mass:
            violations.append(f"Mass {mass:.2f} t exceeds the {facility} limit of {limits.max_mass:.2f} t")

        if limits.max_size is not None and artifact.size is not None:
            for axis, value, limit in zip(SIZE_AXES, artifact.size, limits.max_size):
                if value > limit:
                    violations.append(f"{axis.capitalize()} {value:.1f} m exceeds the {facility} limit of {limit:.1f} m")

        if not allow_soft_pass:
            return violations[:1]
        return violations


class CareerGameMode(GameModeQuery):
    def __init__(self, state: CareerState):
        self.state = state

    def is_constrained_economy(self) -> bool:
        return self.state.mode == GameMode.CAREER


def build_services(state: CareerState, facility: FacilityLimits, prompt: UserPrompt) -> PipelineServices:
    """Wire the in-memory career services around one shared state."""
    tech = CareerTechTree(state)
    return PipelineServices(
        facility_checker=FacilityLimitChecker(facility),
        funds=CareerFundsLedger(state),
        parts=CatalogPartInspector(state, tech),
        tech=tech,
        unlocks=CareerUnlockRegistry(state),
        prompt=prompt,
        game_mode=CareerGameMode(state),
    )
