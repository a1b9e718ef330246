"""Outcome types of an admission run."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from ..models.artifact import BuildArtifact
from ..services.base import DecisionOption


class PipelineState(str, Enum):
    """Lifecycle of a PipelineRun."""
    READY = "ready"
    RUNNING = "running"
    AWAITING_DECISION = "awaiting_decision"
    ADMITTED = "admitted"
    REJECTED = "rejected"


class RejectionReason(str, Enum):
    """Why a run was rejected."""
    FACILITY_VIOLATION = "facility_violation"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    LOCKED_COMPONENTS_PRESENT = "locked_components_present"
    UNRESOLVABLE_EXPERIMENTAL_COMPONENTS = "unresolvable_experimental_components"
    OPERATOR_DECLINED = "operator_declined"


class DecisionChoice(str, Enum):
    """Answers to the experimental parts decision."""
    CANCEL = "cancel"
    UNLOCK = "unlock"


@dataclass
class Admitted:
    artifact: BuildArtifact

    def to_dict(self) -> dict:
        return {"status": PipelineState.ADMITTED.value, "artifact": self.artifact.name}


@dataclass
class Rejected:
    reason: RejectionReason
    step: str
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "status": PipelineState.REJECTED.value,
            "reason": self.reason.value,
            "step": self.step,
            "message": self.message,
        }


Outcome = Admitted | Rejected


@dataclass
class StepResult:
    """What a step tells the driver loop.

    Exactly one of: pass (both fields empty), a rejection, or a decision
    request that suspends the run.
    """
    rejection: Rejected | None = None
    decision: "DecisionRequest | None" = None

    @property
    def passed(self) -> bool:
        return self.rejection is None and self.decision is None

    @classmethod
    def ok(cls) -> "StepResult":
        return cls()

    @classmethod
    def reject(cls, reason: RejectionReason, step: str, message: str = "") -> "StepResult":
        return cls(rejection=Rejected(reason, step, message))

    @classmethod
    def suspend(cls, decision: "DecisionRequest") -> "StepResult":
        return cls(decision=decision)


@dataclass
class DecisionRequest:
    """A modal decision a step needs answered before the run can continue.

    `resolve` holds the rest of the step as data: it maps the operator's
    choice to the step's final result.
    """
    title: str
    body: str
    labels: dict[DecisionChoice, str]
    resolve: Callable[[DecisionChoice], StepResult]


@dataclass
class PendingDecision:
    """A suspended run's open question, as seen by the caller."""
    step: str
    request: DecisionRequest
    options: list[DecisionOption] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.request.title

    @property
    def body(self) -> str:
        return self.request.body

    @property
    def choices(self) -> list[DecisionChoice]:
        return list(self.request.labels)

    def to_dict(self) -> dict:
        return {
            "status": PipelineState.AWAITING_DECISION.value,
            "step": self.step,
            "title": self.title,
            "options": {choice.value: label for choice, label in self.request.labels.items()},
        }
