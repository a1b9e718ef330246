"""Admission pipeline driver.

A PipelineRun walks an explicit list of steps. When a step needs an operator
decision the run parks itself in AWAITING_DECISION, keeping the pending
continuation as data, and hands control back to the caller. `resume()` (or
the `on_chosen` callback of a dialog option) picks the loop up again at the
following step.
"""

import logging
from collections.abc import Callable
from functools import partial

from ..config import MessageConfig, ValidationConfig
from ..errors import PipelineStateError
from ..models.artifact import BuildArtifact
from ..services.base import DecisionOption, PipelineServices
from .outcome import (
    Admitted,
    DecisionChoice,
    Outcome,
    PendingDecision,
    PipelineState,
    Rejected,
    StepResult,
)
from .steps import FacilityStep, FundsStep, PartsStep, PipelineStep, RunContext

logger = logging.getLogger(__name__)


def default_steps() -> list[PipelineStep]:
    """Facility, funds, parts, then funds again since unlocking parts spends funds."""
    return [FacilityStep(), FundsStep("funds"), PartsStep(), FundsStep("funds_recheck")]


def _noop_admitted(artifact: BuildArtifact) -> None:
    pass


def _noop_rejected() -> None:
    pass


class PipelineRun:
    """A single admission attempt for one artifact."""

    def __init__(
        self,
        context: RunContext,
        steps: list[PipelineStep],
        on_admitted: Callable[[BuildArtifact], None] | None = None,
        on_rejected: Callable[[], None] | None = None,
    ):
        self.context = context
        self.steps = steps
        self.on_admitted = on_admitted or _noop_admitted
        self.on_rejected = on_rejected or _noop_rejected
        self.state = PipelineState.READY
        self.outcome: Outcome | None = None
        self.pending: PendingDecision | None = None
        self.completed_steps: list[str] = []
        self._position = 0

    @property
    def artifact(self) -> BuildArtifact:
        return self.context.artifact

    @property
    def is_finished(self) -> bool:
        return self.state in (PipelineState.ADMITTED, PipelineState.REJECTED)

    @property
    def awaiting_decision(self) -> bool:
        return self.state == PipelineState.AWAITING_DECISION

    def start(self) -> "PipelineRun":
        if self.state != PipelineState.READY:
            raise PipelineStateError(f"Run for {self.artifact.name} already started ({self.state.value})")

        logger.info(f"Validating {self.artifact.name} for the build list")
        self.state = PipelineState.RUNNING

        if not self.context.services.game_mode.is_constrained_economy():
            logger.debug("Economy not enforced in this game mode, skipping checks")
            self._admit()
            return self

        self._drive()
        return self

    def resume(self, choice: DecisionChoice | str) -> "PipelineRun":
        """Answer the pending decision and continue the run."""
        if self.state != PipelineState.AWAITING_DECISION or self.pending is None:
            raise PipelineStateError(f"Run for {self.artifact.name} is not awaiting a decision ({self.state.value})")

        choice = DecisionChoice(choice)
        pending = self.pending
        self.pending = None
        self.state = PipelineState.RUNNING
        logger.debug(f"Resuming {pending.step} with choice {choice.value}")

        result = pending.request.resolve(choice)
        if self._settle(pending.step, result):
            self._drive()
        return self

    def _drive(self) -> None:
        while self._position < len(self.steps):
            step = self.steps[self._position]
            logger.debug(f"Executing step: {step.name}")
            result = step.apply(self.context)
            if not self._settle(step.name, result):
                return
        self._admit()

    def _settle(self, step_name: str, result: StepResult) -> bool:
        """Apply a step result. Returns True when the loop should go on."""
        if result.rejection is not None:
            self._reject(result.rejection)
            return False

        if result.decision is not None:
            self._suspend(step_name, result)
            return False

        self.completed_steps.append(step_name)
        self._position += 1
        if self._position >= len(self.steps):
            self._admit()
            return False
        return True

    def _suspend(self, step_name: str, result: StepResult) -> None:
        request = result.decision
        options = [
            DecisionOption(label=label, on_chosen=partial(self.resume, choice), key=choice.value)
            for choice, label in request.labels.items()
        ]
        self.pending = PendingDecision(step=step_name, request=request, options=options)
        self.state = PipelineState.AWAITING_DECISION
        logger.info(f"{self.artifact.name} waiting on operator decision in step {step_name}")

        # The prompt may answer synchronously; state is already parked.
        self.context.services.prompt.decide(request.title, request.body, options)

    def _admit(self) -> None:
        self._finish(Admitted(self.artifact), PipelineState.ADMITTED)
        logger.info(f"{self.artifact.name} admitted to the build list")
        self.on_admitted(self.artifact)

    def _reject(self, rejection: Rejected) -> None:
        self._finish(rejection, PipelineState.REJECTED)
        logger.info(f"{self.artifact.name} rejected in step {rejection.step}: {rejection.reason.value}")
        self.on_rejected()

    def _finish(self, outcome: Outcome, state: PipelineState) -> None:
        if self.outcome is not None:
            raise PipelineStateError(f"Run for {self.artifact.name} already finished ({self.state.value})")
        self.outcome = outcome
        self.state = state

    def to_dict(self) -> dict:
        if self.pending is not None:
            data = self.pending.to_dict()
        elif self.outcome is not None:
            data = self.outcome.to_dict()
        else:
            data = {"status": self.state.value}
        data["artifact"] = self.artifact.name
        data["completed_steps"] = list(self.completed_steps)
        return data


class ValidationPipeline:
    """Runs the admission checks for artifacts entering the build list."""

    def __init__(self, services: PipelineServices, messages: MessageConfig | None = None,
                 steps: Callable[[], list[PipelineStep]] = default_steps):
        self.services = services
        self.messages = messages or MessageConfig()
        self.steps = steps

    def create_run(
        self,
        artifact: BuildArtifact,
        config: ValidationConfig | None = None,
        on_admitted: Callable[[BuildArtifact], None] | None = None,
        on_rejected: Callable[[], None] | None = None,
        editing: bool = False,
    ) -> PipelineRun:
        context = RunContext(
            artifact=artifact,
            config=config or ValidationConfig(),
            services=self.services,
            messages=self.messages,
            editing=editing,
        )
        return PipelineRun(context, self.steps(), on_admitted, on_rejected)

    def run(
        self,
        artifact: BuildArtifact,
        config: ValidationConfig | None = None,
        on_admitted: Callable[[BuildArtifact], None] | None = None,
        on_rejected: Callable[[], None] | None = None,
        editing: bool = False,
    ) -> PipelineRun:
        """Validate an artifact, invoking exactly one continuation once decided.

        Returns the run, which may still be awaiting an operator decision.
        """
        return self.create_run(artifact, config, on_admitted, on_rejected, editing).start()
