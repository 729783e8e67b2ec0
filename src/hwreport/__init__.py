"""hwreport package.

Collects hardware facts by running diagnostic commands and parsing their output.
"""

from .config import CommandSet
from .metrics import Metrics

__version__ = "0.1.0"

__all__ = ["CommandSet", "Metrics", "__version__"]
