"""Appointment application layer."""

from .dto import AppointmentPayload, CheckInTarget, GateError, GateReason
from .services import ActionDialog, AppointmentLifecycleController, DialogState

__all__ = [
    "ActionDialog",
    "AppointmentLifecycleController",
    "AppointmentPayload",
    "CheckInTarget",
    "DialogState",
    "GateError",
    "GateReason",
]
