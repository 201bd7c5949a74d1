from .appointment_status import AppointmentStatus

__all__ = ["AppointmentStatus"]
