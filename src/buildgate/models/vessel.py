"""Vessel design models and the resolved build artifact."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from buildgate.errors import ScenarioError
from buildgate.models.artifact import BuildArtifact
from buildgate.models.parts import PartDefinition, PartStack


def _validate_size(v):
    if v is not None and len(v) != 3:
        raise ValueError("size must have exactly three values: width, height, length")
    return v


class FacilityLimits(BaseModel):
    """Capabilities of the facility a vessel is built in."""
    name: str = "VAB"
    level: int = 1
    max_parts: int | None = Field(alias="maxParts", default=None)
    max_mass: float | None = Field(alias="maxMass", default=None)
    max_size: list[float] | None = Field(alias="maxSize", default=None)

    @field_validator("max_size")
    @classmethod
    def validate_max_size(cls, v):
        return _validate_size(v)

    model_config = ConfigDict(populate_by_name=True)


class VesselDesign(BaseModel):
    """A vessel as saved from the editor."""
    ship_name: str = Field(alias="shipName")
    parts: list[PartStack] = Field(default_factory=list)
    mass: float = 0.0
    size: list[float] | None = None

    @field_validator("size")
    @classmethod
    def validate_size(cls, v):
        return _validate_size(v)

    model_config = ConfigDict(populate_by_name=True)


class VesselBuild(BuildArtifact):
    """A vessel design resolved against a part catalog.

    Raises:
        ScenarioError: If the design references a part missing from the catalog
    """

    def __init__(self, design: VesselDesign, catalog: dict[str, PartDefinition]):
        self.design = design
        self._counts: dict[PartDefinition, int] = {}

        missing = [stack.part for stack in design.parts if stack.part not in catalog]
        if missing:
            raise ScenarioError(
                f"Vessel '{design.ship_name}' uses parts not in the catalog: {', '.join(sorted(set(missing)))}"
            )

        for stack in design.parts:
            part = catalog[stack.part]
            self._counts[part] = self._counts.get(part, 0) + stack.count

    @property
    def name(self) -> str:
        return self.design.ship_name

    def total_cost(self) -> float:
        return sum(part.cost * count for part, count in self._counts.items())

    def part_counts(self) -> dict[PartDefinition, int]:
        return dict(self._counts)

    def part_count(self) -> int:
        return sum(self._counts.values())

    def total_mass(self) -> float:
        return self.design.mass

    @property
    def size(self) -> list[float] | None:
        return self.design.size

    def __repr__(self) -> str:
        return f"VesselBuild({self.name!r}, parts={self.part_count()})"
