"""Admission steps.

Each step inspects the run context and returns a StepResult; none of them
knows which step comes next. Ordering and short-circuiting belong to the
runner.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..config import MessageConfig, ValidationConfig
from ..models.artifact import BuildArtifact
from ..models.parts import PartDefinition
from ..services.base import PipelineServices
from .outcome import DecisionChoice, DecisionRequest, RejectionReason, StepResult

logger = logging.getLogger(__name__)

FACILITY_WARNING_TITLE = "Failed editor checks!"
FACILITY_WARNING_INTRO = (
    "Warning! This vessel did not pass the editor checks! It will still be built, "
    "but you will not be able to launch it without upgrading. Listed below are the failed checks:"
)
NOT_ENOUGH_FUNDS = "Not Enough Funds To Build!"
INSUFFICIENT_UNLOCK_FUNDS = "Insufficient funds to unlock parts"
EXPERIMENTAL_TITLE = "Vessel cannot be built!"
ACKNOWLEDGE_LABEL = "Acknowledged"


@dataclass
class RunContext:
    """Per-run inputs shared by every step."""
    artifact: BuildArtifact
    config: ValidationConfig
    services: PipelineServices
    messages: MessageConfig
    editing: bool = False


def _bullets(lines: list[str]) -> str:
    return "\n".join(f"• {line}" for line in lines)


def _part_lines(parts: dict[PartDefinition, int]) -> list[str]:
    return [f"{part.display_name} x {count}" for part, count in
            sorted(parts.items(), key=lambda item: item[0].display_name)]


def _format_funds(amount: float) -> str:
    return f"{amount:.0f}" if float(amount).is_integer() else f"{amount:.2f}"


def locked_parts_warning(parts: dict[PartDefinition, int]) -> str:
    return "Not all parts are available! The following parts are locked:\n" + _bullets(_part_lines(parts))


def experimental_parts_warning(parts: dict[PartDefinition, int]) -> str:
    lines = [f"{part.display_name} x {count} (requires {part.tech_required})"
             for part, count in sorted(parts.items(), key=lambda item: item[0].display_name)]
    return ("This vessel contains experimental parts whose technology has not been researched. "
            "Research it or remove these parts:\n" + _bullets(lines))


def unlock_label(count: int, cost: float, editing: bool) -> str:
    mode = "save edits" if editing else "build vessel"
    cost_text = _format_funds(cost)
    return (f"Unlock {count} part{'s' if count > 1 else ''} "
            f"for {cost_text} Fund{'s' if cost > 1 else ''} and {mode}")


class PipelineStep(ABC):
    """Base class for admission steps."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Step name for identification."""
        pass

    @abstractmethod
    def enabled(self, config: ValidationConfig) -> bool:
        pass

    def apply(self, ctx: RunContext) -> StepResult:
        if not self.enabled(ctx.config):
            logger.debug(f"Step {self.name} disabled, passing through")
            return StepResult.ok()
        return self.check(ctx)

    @abstractmethod
    def check(self, ctx: RunContext) -> StepResult:
        pass


class FacilityStep(PipelineStep):
    """Blocks vessels that exceed the build facility's limits."""

    @property
    def name(self) -> str:
        return "facility"

    def enabled(self, config: ValidationConfig) -> bool:
        return config.check_facility_requirements

    def check(self, ctx: RunContext) -> StepResult:
        # Soft mode still reports every violation; any violation blocks.
        violations = ctx.services.facility_checker.evaluate(ctx.artifact, allow_soft_pass=True)
        if not violations:
            return StepResult.ok()

        logger.info(f"{ctx.artifact.name} failed {len(violations)} facility checks")
        ctx.services.prompt.warn(FACILITY_WARNING_TITLE, FACILITY_WARNING_INTRO + "\n" + _bullets(violations))
        return StepResult.reject(RejectionReason.FACILITY_VIOLATION, self.name, "; ".join(violations))


class FundsStep(PipelineStep):
    """Rejects vessels that cost more than the current balance."""

    def __init__(self, name: str = "funds"):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def enabled(self, config: ValidationConfig) -> bool:
        return config.check_available_funds

    def check(self, ctx: RunContext) -> StepResult:
        total_cost = ctx.artifact.total_cost()
        balance = ctx.services.funds.current_balance()
        if total_cost <= balance:
            return StepResult.ok()

        logger.info(f"Tried to add {ctx.artifact.name} to build list but not enough funds.")
        logger.info(f"Vessel cost: {total_cost}, Current funds: {balance}")
        ctx.services.prompt.transient_message(
            NOT_ENOUGH_FUNDS, ctx.messages.transient_duration, ctx.messages.placement
        )
        return StepResult.reject(
            RejectionReason.INSUFFICIENT_FUNDS,
            self.name,
            f"Vessel costs {_format_funds(total_cost)} but only {_format_funds(balance)} available",
        )


class PartsStep(PipelineStep):
    """Rejects locked parts and offers to unlock experimental ones."""

    @property
    def name(self) -> str:
        return "parts"

    def enabled(self, config: ValidationConfig) -> bool:
        return config.check_part_availability

    def check(self, ctx: RunContext) -> StepResult:
        services = ctx.services

        locked = services.parts.locked_parts(ctx.artifact)
        if locked:
            logger.info(f"Tried to add {ctx.artifact.name} to build list but it contains locked parts.")
            services.prompt.transient_message(
                locked_parts_warning(locked), ctx.messages.transient_duration, ctx.messages.placement
            )
            return StepResult.reject(
                RejectionReason.LOCKED_COMPONENTS_PRESENT,
                self.name,
                "Locked parts: " + ", ".join(_part_lines(locked)),
            )

        experimental = services.parts.experimental_parts(ctx.artifact)
        if not experimental:
            return StepResult.ok()

        unlockable = [part for part in experimental if services.tech.is_researched(part.tech_required)]
        if not unlockable:
            services.prompt.warn(EXPERIMENTAL_TITLE, experimental_parts_warning(experimental))
            return StepResult.reject(
                RejectionReason.UNRESOLVABLE_EXPERIMENTAL_COMPONENTS,
                self.name,
                "Experimental parts need unresearched tech: " + ", ".join(_part_lines(experimental)),
            )

        unlock_cost = services.parts.unlock_cost(unlockable)
        body = "This vessel contains parts that have not been unlocked yet:\n" + _bullets(
            _part_lines({part: experimental[part] for part in unlockable})
        )
        return StepResult.suspend(DecisionRequest(
            title=EXPERIMENTAL_TITLE,
            body=body,
            labels={
                DecisionChoice.CANCEL: ACKNOWLEDGE_LABEL,
                DecisionChoice.UNLOCK: unlock_label(len(unlockable), unlock_cost, ctx.editing),
            },
            resolve=lambda choice: self._resolve(ctx, unlockable, unlock_cost, choice),
        ))

    def _resolve(self, ctx: RunContext, unlockable: list[PartDefinition],
                 unlock_cost: float, choice: DecisionChoice) -> StepResult:
        if choice != DecisionChoice.UNLOCK:
            logger.info(f"Operator declined to unlock parts for {ctx.artifact.name}")
            return StepResult.reject(RejectionReason.OPERATOR_DECLINED, self.name, "Part unlock declined")

        services = ctx.services
        balance = services.funds.current_balance()
        if balance > unlock_cost and services.funds.spend(unlock_cost):
            services.unlocks.unlock(unlockable)
            logger.info(f"Unlocked {len(unlockable)} parts for {ctx.artifact.name} at {unlock_cost}")
            return StepResult.ok()

        services.prompt.transient_message(
            INSUFFICIENT_UNLOCK_FUNDS, ctx.messages.unlock_failure_duration, ctx.messages.placement
        )
        return StepResult.reject(
            RejectionReason.INSUFFICIENT_FUNDS,
            self.name,
            f"Unlock costs {_format_funds(unlock_cost)} but only {_format_funds(balance)} available",
        )
