"""
Run-scoped state.

Everything one detection run mutates lives on a RunContext: the set-once
parameters (D, T), the user directory and the insertion counter shared by
all purchase windows. Two contexts never see each other's users, so
independent runs and tests can coexist in one process.
"""

import itertools
import logging
from typing import Optional, Tuple

from anomaly_engine.core.directory import UserDirectory
from anomaly_engine.core.purchase_window import PurchaseWindow
from anomaly_engine.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class RunParameters:
    """
    Degrees of separation (D) and purchase threshold (T).
    Both are set exactly once; later attempts are rejected.
    """

    def __init__(self):
        self.degrees_of_separation: Optional[int] = None
        self.threshold: Optional[int] = None

    @property
    def is_initialized(self) -> bool:
        return self.degrees_of_separation is not None and self.threshold is not None

    def initialize(self, degrees_of_separation: int, threshold: int) -> bool:
        """
        Returns:
            True if the values were applied, False if parameters were
            already set (the first values stay in force).
        """
        if self.is_initialized:
            return False

        if degrees_of_separation < 1 or threshold < 1:
            raise ConfigurationError(
                f"D and T must be >= 1, got D={degrees_of_separation}, T={threshold}"
            )

        self.degrees_of_separation = degrees_of_separation
        self.threshold = threshold
        logger.info(f"Run parameters set: D={degrees_of_separation}, T={threshold}")
        return True

    def require(self) -> Tuple[int, int]:
        """(D, T), or ConfigurationError if they were never set."""
        if not self.is_initialized:
            raise ConfigurationError(
                "Run parameters D and T are not set; the batch log must start "
                'with a record like {"D": "3", "T": "50"}'
            )
        return self.degrees_of_separation, self.threshold


class RunContext:

    def __init__(self):
        self.parameters = RunParameters()
        self.sequence = itertools.count()
        self.directory = UserDirectory(self.new_window)

    @classmethod
    def with_parameters(cls, degrees_of_separation: int, threshold: int) -> "RunContext":
        context = cls()
        context.parameters.initialize(degrees_of_separation, threshold)
        return context

    @property
    def degrees_of_separation(self) -> int:
        return self.parameters.require()[0]

    @property
    def threshold(self) -> int:
        return self.parameters.require()[1]

    def new_window(self) -> PurchaseWindow:
        """Empty capacity-T window drawing from this run's insertion counter."""
        return PurchaseWindow(self.threshold, self.sequence)
