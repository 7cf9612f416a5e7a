"""
Base collector class for reposcanner.

Provides common functionality shared by all data collectors.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from .reposcan_config import ScannerConfig, get_config


class BaseCollector(ABC):
    """
    Abstract base class for all data collectors.

    Subclasses gather raw data in collect() and publish their results to
    ``_data`` in refine(); callers read them through get_data().
    """

    def __init__(self, config: Optional[ScannerConfig] = None):
        self._data: Dict[str, Any] = {}
        self._config = config or get_config()

    @abstractmethod
    def collect(self) -> None:
        """
        Collect data from the repository.

        Subclasses must implement this method to gather their specific data.
        """
        pass

    @abstractmethod
    def refine(self) -> None:
        """Derive the published results after collect()."""
        pass

    def get_data(self) -> Dict[str, Any]:
        """
        Get the refined data.

        Returns:
            Dictionary filled by refine(), empty before it runs
        """
        return self._data
