"""Error and warning taxonomy for the chunking pipeline."""

from enum import Enum
from typing import List


class ConfigurationError(Exception):
    """Raised when split options are invalid. Nothing has been processed yet."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("Invalid split options: " + "; ".join(self.problems))


class SegmentCoverageError(AssertionError):
    """Raised when a header split does not tile its parent segment exactly."""

    pass


class StructuralWarning(str, Enum):
    """Recoverable structural conditions, logged under these event names."""

    OVERSIZE_SEGMENT = "chunk.segment.oversize"
    UNCLOSED_FENCE = "chunk.fence.unclosed"
    NESTED_FENCE_REOPEN = "chunk.fence.nested_reopen"
