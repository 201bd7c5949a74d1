from .auth_port import IAuthService

__all__ = ["IAuthService"]
