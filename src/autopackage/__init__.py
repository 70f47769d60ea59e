"""
AutoPackage - installer version sync and release packaging trigger
"""

__version__ = "1.0.0"

from .core import ReleaseHandle, ReleaseOrchestrator
from .errors import ReleaseError
from .models import ReleaseConfig, ReleaseOutcome, ReleaseReport

__all__ = [
    "ReleaseConfig",
    "ReleaseError",
    "ReleaseHandle",
    "ReleaseOrchestrator",
    "ReleaseOutcome",
    "ReleaseReport",
]
