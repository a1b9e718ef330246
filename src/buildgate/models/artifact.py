"""Abstract build artifact consumed by the admission pipeline."""

from abc import ABC, abstractmethod


class BuildArtifact(ABC):
    """A candidate item for the build queue.

    The pipeline only needs a name for diagnostics and the total cost for the
    funds gate; everything else is asked of the collaborating services.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name used in messages and logs."""
        pass

    @abstractmethod
    def total_cost(self) -> float:
        """Total build cost in funds."""
        pass
