"""
Domain Layer - Core DDD building blocks

- Entities: Objects with identity and lifecycle
- Exceptions: Domain-specific error handling
"""

from medico_client.core.domain.entities import AggregateRoot, Entity
from medico_client.core.domain.exceptions import (
    DomainException,
    InvalidTransitionException,
    ValidationException,
)

__all__ = [
    "AggregateRoot",
    "Entity",
    "DomainException",
    "InvalidTransitionException",
    "ValidationException",
]
