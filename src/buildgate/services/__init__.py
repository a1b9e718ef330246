"""Collaborator interfaces and in-memory career implementations."""

from .base import (
    DecisionOption,
    FacilityRequirementChecker,
    FundsLedger,
    GameModeQuery,
    PartAvailabilityInspector,
    PipelineServices,
    TechnologyRegistry,
    UnlockRegistry,
    UserPrompt,
)
from .career import (
    CareerFundsLedger,
    CareerGameMode,
    CareerState,
    CareerTechTree,
    CareerUnlockRegistry,
    CatalogPartInspector,
    FacilityLimitChecker,
    build_services,
)

__all__ = [
    "DecisionOption",
    "FacilityRequirementChecker",
    "FundsLedger",
    "GameModeQuery",
    "PartAvailabilityInspector",
    "PipelineServices",
    "TechnologyRegistry",
    "UnlockRegistry",
    "UserPrompt",
    "CareerState",
    "CareerFundsLedger",
    "CareerTechTree",
    "CareerUnlockRegistry",
    "CatalogPartInspector",
    "FacilityLimitChecker",
    "CareerGameMode",
    "build_services",
]
