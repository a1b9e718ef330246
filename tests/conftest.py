"""Shared fixtures for buildgate tests."""

import json

import pytest

from buildgate.config import MessagePlacement
from buildgate.models import FacilityLimits, GameMode, PartDefinition, PartStack, VesselBuild, VesselDesign
from buildgate.pipeline import ValidationPipeline
from buildgate.services import CareerState, UserPrompt, build_services


class RecordingPrompt(UserPrompt):
    """Prompt double that records every emission.

    With `answer` set, decisions are answered synchronously by option key.
    """

    def __init__(self, answer: str | None = None):
        self.answer = answer
        self.warnings: list[tuple[str, str]] = []
        self.messages: list[tuple[str, float, MessagePlacement]] = []
        self.decisions: list[tuple[str, str, list]] = []

    @property
    def emissions(self) -> int:
        return len(self.warnings) + len(self.messages) + len(self.decisions)

    def warn(self, title, body):
        self.warnings.append((title, body))

    def transient_message(self, text, duration, placement):
        self.messages.append((text, duration, placement))

    def decide(self, title, body, options):
        self.decisions.append((title, body, options))
        if self.answer is not None:
            next(option for option in options if option.key == self.answer).on_chosen()


CATALOG = [
    PartDefinition(name="probeCore", title="Probe Core", tech_required="start", cost=300),
    PartDefinition(name="fuelTank", title="Fuel Tank", tech_required="start", cost=200),
    PartDefinition(name="engine", title="Swivel Engine", tech_required="basicRocketry", cost=500, entry_cost=1000),
    PartDefinition(name="antenna", title="Relay Antenna", tech_required="advElectrics", cost=100, entry_cost=2000),
    PartDefinition(name="heatShield", title="Heat Shield", tech_required="survivability", cost=150, entry_cost=400),
]


@pytest.fixture
def catalog():
    return {part.name: part for part in CATALOG}


@pytest.fixture
def career_state():
    """Career with start and basicRocketry researched and only start parts bought."""
    return CareerState(
        mode=GameMode.CAREER,
        funds=1200,
        researched_techs={"start", "basicRocketry"},
        purchased_parts={"probeCore", "fuelTank"},
        experimental_parts={"antenna"},
    )


@pytest.fixture
def facility():
    return FacilityLimits(name="VAB", level=1, max_parts=30, max_mass=18.0, max_size=[3.0, 6.0, 3.0])


@pytest.fixture
def prompt():
    return RecordingPrompt()


@pytest.fixture
def make_prompt():
    return RecordingPrompt


@pytest.fixture
def services(career_state, facility, prompt):
    return build_services(career_state, facility, prompt)


@pytest.fixture
def pipeline(services):
    return ValidationPipeline(services)


@pytest.fixture
def make_vessel(catalog):
    """Build a VesselBuild from part counts, e.g. make_vessel(probeCore=2)."""
    def _make(name="Test Vessel", mass=5.0, size=None, **counts):
        design = VesselDesign(
            ship_name=name,
            parts=[PartStack(part=part, count=count) for part, count in counts.items()],
            mass=mass,
            size=size,
        )
        return VesselBuild(design, catalog)
    return _make


@pytest.fixture
def scenario_data():
    """Scenario file content for a vessel that needs its engine unlocked."""
    return {
        "mode": "career",
        "funds": 2500,
        "researchedTechs": ["start", "basicRocketry"],
        "purchasedParts": ["probeCore", "fuelTank"],
        "experimentalParts": [],
        "facility": {"name": "VAB", "level": 1, "maxParts": 30, "maxMass": 18.0},
        "catalog": [part.model_dump(by_alias=True) for part in CATALOG],
        "vessel": {
            "shipName": "Kerbal X",
            "parts": [{"part": "probeCore", "count": 1}, {"part": "fuelTank", "count": 2}, {"part": "engine"}],
            "mass": 6.5,
        },
    }


@pytest.fixture
def write_scenario(tmp_path):
    def _write(data, name="scenario.json"):
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        return path
    return _write
