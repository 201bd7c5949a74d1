from .appointment import Appointment, ensure_aware

__all__ = ["Appointment", "ensure_aware"]
