"""Models for parts and part requirements."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PartDefinition(BaseModel):
    """A catalog part. Frozen so it can key part -> count mappings."""

    name: str
    title: str | None = None
    tech_required: str = Field(alias="techRequired")
    cost: float = 0.0
    entry_cost: float = Field(alias="entryCost", default=0.0)

    @field_validator("cost", "entry_cost")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("part costs must be >= 0")
        return v

    @property
    def display_name(self) -> str:
        return self.title or self.name

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PartStack(BaseModel):
    """A part used by a vessel together with how many are required."""

    part: str
    count: int = 1

    @field_validator("count")
    @classmethod
    def validate_count(cls, v):
        if v < 1:
            raise ValueError("part count must be >= 1")
        return v
