"""Admission pipeline for the vessel build list.

Checks run in a fixed order (facility, funds, parts, funds again) and stop at
the first rejection. The parts step may suspend the run until the operator
decides whether to pay for unlocking experimental parts.
"""

from .outcome import (
    Admitted,
    DecisionChoice,
    DecisionRequest,
    Outcome,
    PendingDecision,
    PipelineState,
    Rejected,
    RejectionReason,
    StepResult,
)
from .runner import PipelineRun, ValidationPipeline, default_steps
from .steps import FacilityStep, FundsStep, PartsStep, PipelineStep, RunContext

__all__ = [
    "ValidationPipeline",
    "PipelineRun",
    "default_steps",
    "PipelineStep",
    "FacilityStep",
    "FundsStep",
    "PartsStep",
    "RunContext",
    "Admitted",
    "Rejected",
    "Outcome",
    "RejectionReason",
    "PipelineState",
    "DecisionChoice",
    "DecisionRequest",
    "PendingDecision",
    "StepResult",
]
