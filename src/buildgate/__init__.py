"""buildgate - admission checks for the vessel build queue.

buildgate decides whether a vessel design may be added to a construction
build list: facility limits, available funds and part availability are
checked in order, with an optional operator decision to unlock experimental
parts before the final funds check.
"""

__version__ = "0.1.0"
__author__ = "buildgate contributors"
__description__ = "Admission checks for vessels entering a construction build queue"

from buildgate.config import BuildgateConfig, ValidationConfig
from buildgate.pipeline import Admitted, PipelineRun, Rejected, RejectionReason, ValidationPipeline

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "BuildgateConfig",
    "ValidationConfig",
    "ValidationPipeline",
    "PipelineRun",
    "Admitted",
    "Rejected",
    "RejectionReason",
]
