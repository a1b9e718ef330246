"""Career scenario files: a vessel plus the game state it is checked against."""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from buildgate.errors import ScenarioError
from buildgate.models.parts import PartDefinition
from buildgate.models.vessel import FacilityLimits, VesselBuild, VesselDesign

logger = logging.getLogger(__name__)


class GameMode(str, Enum):
    """Game session modes. Only career enforces economy and facility limits."""
    CAREER = "career"
    SCIENCE = "science"
    SANDBOX = "sandbox"


class CareerScenario(BaseModel):
    """Everything needed to run the admission checks offline."""
    mode: GameMode = GameMode.CAREER
    funds: float = 0.0
    researched_techs: list[str] = Field(alias="researchedTechs", default_factory=list)
    purchased_parts: list[str] = Field(alias="purchasedParts", default_factory=list)
    experimental_parts: list[str] = Field(alias="experimentalParts", default_factory=list)
    editing: bool = False
    facility: FacilityLimits = Field(default_factory=FacilityLimits)
    catalog: list[PartDefinition] = Field(default_factory=list)
    vessel: VesselDesign

    @field_validator("catalog")
    @classmethod
    def validate_unique_parts(cls, v):
        names = [part.name for part in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate catalog parts: {', '.join(duplicates)}")
        return v

    model_config = ConfigDict(populate_by_name=True)

    @property
    def catalog_by_name(self) -> dict[str, PartDefinition]:
        return {part.name: part for part in self.catalog}

    def build_artifact(self) -> VesselBuild:
        """Resolve the vessel design against the scenario catalog."""
        return VesselBuild(self.vessel, self.catalog_by_name)


def load_scenario(path: str | Path) -> CareerScenario:
    """Load and validate a scenario JSON file.

    Raises:
        ScenarioError: If the file is missing, is not JSON, or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise ScenarioError(f"Scenario file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ScenarioError(f"Invalid JSON in scenario file {path}: {e}") from e

    try:
        scenario = CareerScenario(**data)
    except ValidationError as e:
        raise ScenarioError(f"Invalid scenario {path}: {e}") from e

    logger.debug(f"Loaded scenario {path} ({scenario.mode.value}, {len(scenario.catalog)} catalog parts)")
    return scenario
