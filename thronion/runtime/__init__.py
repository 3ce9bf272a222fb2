"""Background maintenance scheduling."""

from .scheduler import MaintenanceScheduler, PeriodicTask

__all__ = ["MaintenanceScheduler", "PeriodicTask"]
