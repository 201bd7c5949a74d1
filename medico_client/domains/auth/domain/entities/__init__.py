from .verification_session import VerificationSession

__all__ = ["VerificationSession"]
