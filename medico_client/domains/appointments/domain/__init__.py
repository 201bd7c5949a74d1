"""Appointment domain layer."""

from .entities import Appointment
from .value_objects import AppointmentStatus

__all__ = ["Appointment", "AppointmentStatus"]
