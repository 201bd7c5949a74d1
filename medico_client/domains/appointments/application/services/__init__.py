# ============================================================================
# SCOPE: APPLICATION LAYER (Appointments)
# Description: Application services exports.
# ============================================================================
"""Appointment application services."""

from .action_dialog import ActionDialog, DialogState
from .lifecycle_controller import AppointmentLifecycleController

__all__ = ["ActionDialog", "AppointmentLifecycleController", "DialogState"]
