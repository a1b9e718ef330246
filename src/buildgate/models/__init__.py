"""Data models for vessels, parts and career scenarios."""

from .artifact import BuildArtifact
from .parts import PartDefinition, PartStack
from .scenario import CareerScenario, GameMode, load_scenario
from .vessel import FacilityLimits, VesselBuild, VesselDesign

__all__ = [
    "BuildArtifact",
    "PartDefinition",
    "PartStack",
    "FacilityLimits",
    "VesselDesign",
    "VesselBuild",
    "CareerScenario",
    "GameMode",
    "load_scenario",
]
