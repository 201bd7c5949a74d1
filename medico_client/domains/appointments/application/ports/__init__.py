from .appointment_port import IAppointmentService

__all__ = ["IAppointmentService"]
