"""Tests for the admission pipeline driver."""

import pytest

from buildgate.config import ValidationConfig
from buildgate.errors import PipelineStateError
from buildgate.models import GameMode
from buildgate.pipeline import (
    Admitted,
    DecisionChoice,
    PipelineState,
    Rejected,
    RejectionReason,
    ValidationPipeline,
)
from buildgate.services import build_services


class Continuations:
    """Counts calls to the admitted and rejected continuations."""

    def __init__(self):
        self.admitted = []
        self.rejected = 0

    def on_admitted(self, artifact):
        self.admitted.append(artifact)

    def on_rejected(self):
        self.rejected += 1


@pytest.fixture
def calls():
    return Continuations()


def run(pipeline, vessel, calls, config=None, **kwargs):
    return pipeline.run(vessel, config, calls.on_admitted, calls.on_rejected, **kwargs)


class TestBypass:
    """Sessions without economy constraints skip every check."""

    @pytest.mark.parametrize("mode", [GameMode.SANDBOX, GameMode.SCIENCE])
    def test_unconstrained_mode_admits_immediately(self, pipeline, career_state, prompt, make_vessel, calls, mode):
        career_state.mode = mode
        career_state.funds = 0
        vessel = make_vessel(heatShield=1, engine=1, mass=500.0)

        result = run(pipeline, vessel, calls)

        assert calls.admitted == [vessel]
        assert calls.rejected == 0
        assert prompt.emissions == 0
        assert result.completed_steps == []
        assert isinstance(result.outcome, Admitted)

    def test_all_checks_disabled_admits(self, pipeline, prompt, make_vessel, calls):
        config = ValidationConfig(
            check_facility_requirements=False,
            check_part_availability=False,
            check_available_funds=False,
        )
        vessel = make_vessel(heatShield=40, mass=500.0)

        result = run(pipeline, vessel, calls, config)

        assert calls.admitted == [vessel]
        assert calls.rejected == 0
        assert prompt.emissions == 0
        assert result.state == PipelineState.ADMITTED

    def test_missing_continuations_default_to_noops(self, pipeline, make_vessel):
        result = pipeline.run(make_vessel(probeCore=1))
        assert result.state == PipelineState.ADMITTED


class TestScenarios:
    """End-to-end runs against the in-memory career."""

    def test_affordable_clean_vessel_is_admitted_silently(self, pipeline, prompt, make_vessel, calls):
        vessel = make_vessel(probeCore=2, fuelTank=2)
        assert vessel.total_cost() == 1000

        result = run(pipeline, vessel, calls)

        assert calls.admitted == [vessel]
        assert calls.rejected == 0
        assert prompt.emissions == 0
        assert result.completed_steps == ["facility", "funds", "parts", "funds_recheck"]

    def test_unaffordable_vessel_is_rejected_with_one_message(self, pipeline, career_state, prompt, make_vessel, calls):
        career_state.funds = 500
        vessel = make_vessel(probeCore=2, fuelTank=2)

        result = run(pipeline, vessel, calls)

        assert calls.admitted == []
        assert calls.rejected == 1
        assert len(prompt.messages) == 1
        assert prompt.messages[0][0] == "Not Enough Funds To Build!"
        assert prompt.emissions == 1
        assert result.outcome.reason == RejectionReason.INSUFFICIENT_FUNDS
        assert result.outcome.step == "funds"

    def test_balance_equal_to_cost_passes(self, pipeline, career_state, make_vessel, calls):
        career_state.funds = 1000
        run(pipeline, make_vessel(probeCore=2, fuelTank=2), calls)
        assert len(calls.admitted) == 1

    def test_facility_violation_stops_before_funds(self, pipeline, career_state, prompt, make_vessel, calls):
        career_state.funds = 0
        vessel = make_vessel(probeCore=1, mass=50.0, size=[4.0, 6.0, 3.0])

        result = run(pipeline, vessel, calls)

        assert calls.rejected == 1
        assert calls.admitted == []
        assert len(prompt.warnings) == 1
        assert prompt.messages == []
        body = prompt.warnings[0][1]
        assert "Mass 50.00 t" in body
        assert "Width 4.0 m" in body
        assert result.outcome.reason == RejectionReason.FACILITY_VIOLATION
        assert result.completed_steps == []

    def test_locked_parts_reject_without_decision(self, pipeline, prompt, make_vessel, calls):
        vessel = make_vessel(probeCore=1, heatShield=2, engine=1)

        result = run(pipeline, vessel, calls)

        assert calls.rejected == 1
        assert prompt.decisions == []
        assert len(prompt.messages) == 1
        assert "Heat Shield x 2" in prompt.messages[0][0]
        assert result.outcome.reason == RejectionReason.LOCKED_COMPONENTS_PRESENT

    def test_unresolvable_experimental_parts_reject(self, pipeline, prompt, make_vessel, calls):
        result = run(pipeline, make_vessel(probeCore=1, antenna=1), calls)

        assert calls.rejected == 1
        assert prompt.decisions == []
        assert len(prompt.warnings) == 1
        assert "advElectrics" in prompt.warnings[0][1]
        assert result.outcome.reason == RejectionReason.UNRESOLVABLE_EXPERIMENTAL_COMPONENTS


class TestOperatorDecision:
    """Runs that suspend on the part unlock decision."""

    def test_run_suspends_until_operator_answers(self, pipeline, prompt, make_vessel, calls):
        result = run(pipeline, make_vessel(probeCore=1, engine=1), calls)

        assert result.state == PipelineState.AWAITING_DECISION
        assert result.awaiting_decision
        assert result.outcome is None
        assert calls.admitted == [] and calls.rejected == 0
        assert len(prompt.decisions) == 1
        assert result.pending.step == "parts"
        assert result.pending.choices == [DecisionChoice.CANCEL, DecisionChoice.UNLOCK]

        labels = [option.label for option in prompt.decisions[0][2]]
        assert labels == ["Acknowledged", "Unlock 1 part for 1000 Funds and build vessel"]

    def test_unlock_then_recheck_against_new_balance(self, pipeline, career_state, make_vessel, calls):
        career_state.funds = 1900
        vessel = make_vessel(probeCore=1, engine=1)

        result = run(pipeline, vessel, calls)
        result.resume(DecisionChoice.UNLOCK)

        assert "engine" in career_state.purchased_parts
        assert career_state.funds == 900
        assert calls.admitted == [vessel]
        assert result.completed_steps == ["facility", "funds", "parts", "funds_recheck"]

    def test_recheck_rejects_when_unlock_spent_too_much(self, pipeline, career_state, prompt, make_vessel, calls):
        career_state.funds = 1500
        vessel = make_vessel(probeCore=1, engine=1)

        result = run(pipeline, vessel, calls)
        result.resume("unlock")

        assert career_state.funds == 500
        assert "engine" in career_state.purchased_parts
        assert calls.admitted == []
        assert calls.rejected == 1
        assert result.outcome == Rejected(
            RejectionReason.INSUFFICIENT_FUNDS, "funds_recheck", "Vessel costs 800 but only 500 available"
        )
        assert prompt.messages[-1][0] == "Not Enough Funds To Build!"

    def test_unlock_requires_funds_strictly_above_cost(self, pipeline, career_state, prompt, make_vessel, calls):
        career_state.funds = 1000
        result = run(pipeline, make_vessel(probeCore=1, engine=1), calls)
        result.resume(DecisionChoice.UNLOCK)

        assert calls.rejected == 1
        assert career_state.funds == 1000
        assert "engine" not in career_state.purchased_parts
        assert prompt.messages == [("Insufficient funds to unlock parts", 5.0, prompt.messages[0][2])]
        assert result.outcome.step == "parts"
        assert "funds_recheck" not in result.completed_steps

    def test_cancel_rejects_without_spending(self, pipeline, career_state, prompt, make_vessel, calls):
        result = run(pipeline, make_vessel(probeCore=1, engine=1), calls)
        result.resume(DecisionChoice.CANCEL)

        assert calls.rejected == 1
        assert career_state.funds == 1200
        assert prompt.messages == []
        assert result.outcome.reason == RejectionReason.OPERATOR_DECLINED

    def test_dialog_option_callback_resumes_run(self, pipeline, prompt, career_state, make_vessel, calls):
        career_state.funds = 5000
        result = run(pipeline, make_vessel(probeCore=1, engine=1), calls)

        unlock = next(option for option in prompt.decisions[0][2] if option.key == "unlock")
        unlock.on_chosen()

        assert result.state == PipelineState.ADMITTED
        assert len(calls.admitted) == 1

    def test_synchronous_answer_completes_inside_run(self, career_state, facility, make_vessel, make_prompt, calls):
        career_state.funds = 5000
        prompt = make_prompt(answer="unlock")
        pipeline = ValidationPipeline(build_services(career_state, facility, prompt))

        result = run(pipeline, make_vessel(probeCore=1, engine=1), calls)

        assert result.state == PipelineState.ADMITTED
        assert len(calls.admitted) == 1
        assert calls.rejected == 0

    def test_editing_changes_unlock_label(self, pipeline, prompt, make_vessel, calls):
        run(pipeline, make_vessel(probeCore=1, engine=1), calls, editing=True)
        assert prompt.decisions[0][2][1].label.endswith("and save edits")

    def test_second_answer_is_refused(self, pipeline, career_state, make_vessel, calls):
        career_state.funds = 5000
        result = run(pipeline, make_vessel(probeCore=1, engine=1), calls)
        result.resume(DecisionChoice.UNLOCK)

        with pytest.raises(PipelineStateError):
            result.resume(DecisionChoice.UNLOCK)
        assert len(calls.admitted) == 1


class TestLifecycle:
    """Lifecycle guards of PipelineRun."""

    def test_start_twice_raises(self, pipeline, make_vessel):
        result = pipeline.run(make_vessel(probeCore=1))
        with pytest.raises(PipelineStateError):
            result.start()

    def test_resume_without_pending_decision_raises(self, pipeline, make_vessel):
        pending = pipeline.create_run(make_vessel(probeCore=1))
        with pytest.raises(PipelineStateError):
            pending.resume(DecisionChoice.UNLOCK)

    def test_to_dict_reports_pending_decision(self, pipeline, make_vessel):
        result = pipeline.run(make_vessel(probeCore=1, engine=1))
        data = result.to_dict()

        assert data["status"] == "awaiting_decision"
        assert data["step"] == "parts"
        assert data["options"]["cancel"] == "Acknowledged"
        assert data["completed_steps"] == ["facility", "funds"]

    def test_to_dict_reports_rejection(self, pipeline, career_state, make_vessel):
        career_state.funds = 0
        data = pipeline.run(make_vessel(probeCore=1)).to_dict()

        assert data["status"] == "rejected"
        assert data["reason"] == "insufficient_funds"
        assert data["artifact"] == "Test Vessel"
