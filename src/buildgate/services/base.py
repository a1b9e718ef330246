"""Interfaces of the services the admission pipeline collaborates with.

The pipeline never reaches for global state: every handle it needs is passed
in through a PipelineServices bundle.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..config import MessagePlacement
from ..models.artifact import BuildArtifact
from ..models.parts import PartDefinition


@dataclass
class DecisionOption:
    """One button of a modal decision dialog."""
    label: str
    on_chosen: Callable[[], None]
    key: str = ""


class FacilityRequirementChecker(ABC):
    """Checks a vessel against the capabilities of its build facility."""

    @abstractmethod
    def evaluate(self, artifact: BuildArtifact, allow_soft_pass: bool = True) -> list[str]:
        """Return a description of every violated facility requirement."""
        pass


class FundsLedger(ABC):
    """Career funds."""

    @abstractmethod
    def current_balance(self) -> float:
        pass

    @abstractmethod
    def spend(self, amount: float) -> bool:
        """Debit funds. Returns False, leaving the balance untouched, if short."""
        pass


class PartAvailabilityInspector(ABC):
    """Classifies the parts of a vessel."""

    @abstractmethod
    def locked_parts(self, artifact: BuildArtifact) -> dict[PartDefinition, int]:
        """Parts that cannot be built at all, with the count required."""
        pass

    @abstractmethod
    def experimental_parts(self, artifact: BuildArtifact) -> dict[PartDefinition, int]:
        """Parts that become buildable once unlocked, with the count required."""
        pass

    @abstractmethod
    def unlock_cost(self, parts: Iterable[PartDefinition]) -> float:
        """One-time cost of unlocking the given parts."""
        pass


class TechnologyRegistry(ABC):
    """Research state of the tech tree."""

    @abstractmethod
    def is_researched(self, tech_id: str) -> bool:
        pass


class UnlockRegistry(ABC):
    """Records parts whose entry cost has been paid."""

    @abstractmethod
    def unlock(self, parts: Iterable[PartDefinition]) -> None:
        """Mark parts as unlocked. Unlocking an unlocked part is a no-op."""
        pass


class GameModeQuery(ABC):
    """Answers whether the session enforces economy and facility limits."""

    @abstractmethod
    def is_constrained_economy(self) -> bool:
        pass


class UserPrompt(ABC):
    """Operator-facing notification surface."""

    @abstractmethod
    def warn(self, title: str, body: str) -> None:
        """Show a dialog with a single acknowledge button."""
        pass

    @abstractmethod
    def transient_message(self, text: str, duration: float, placement: MessagePlacement) -> None:
        """Show a non-modal message that dismisses itself after `duration` seconds."""
        pass

    @abstractmethod
    def decide(self, title: str, body: str, options: list[DecisionOption]) -> None:
        """Show a modal decision.

        The call returns without waiting; the chosen option's `on_chosen`
        callback is invoked whenever the operator answers.
        """
        pass


@dataclass
class PipelineServices:
    """Collaborator handles injected into a ValidationPipeline."""
    facility_checker: FacilityRequirementChecker
    funds: FundsLedger
    parts: PartAvailabilityInspector
    tech: TechnologyRegistry
    unlocks: UnlockRegistry
    prompt: UserPrompt
    game_mode: GameModeQuery
