"""Exception hierarchy for buildgate.

Rejections are not exceptions: they are returned as typed outcomes. The
classes here cover misuse of the pipeline and unreadable input files.
"""


class BuildgateError(Exception):
    """Base class for buildgate errors."""


class PipelineStateError(BuildgateError):
    """A pipeline run was driven out of order (started twice, resumed while idle)."""


class ScenarioError(BuildgateError):
    """A scenario file could not be read or references unknown parts."""
