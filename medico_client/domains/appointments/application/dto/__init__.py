# ============================================================================
# SCOPE: APPLICATION LAYER (Appointments)
# Description: Data Transfer Objects exports.
# ============================================================================
"""Application DTOs for the appointments domain."""

from .appointment_dtos import AppointmentPayload, CheckInTarget, GateError, GateReason

__all__ = ["AppointmentPayload", "CheckInTarget", "GateError", "GateReason"]
