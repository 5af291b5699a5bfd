"""
portage-maint - unattended Portage maintenance runs with mail reports
"""

__version__ = "0.1.0"

from .core import MaintenanceRunner
from .errors import MaintenanceError
from .models import RunConfiguration

__all__ = ["MaintenanceRunner", "MaintenanceError", "RunConfiguration"]
