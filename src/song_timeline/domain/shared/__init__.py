"""
Shared Domain Kernel

Contains constrained types, events and exceptions shared across the game.
"""

from song_timeline.domain.shared.events import DomainEvent, EventBus
from song_timeline.domain.shared.exceptions import (
    BusinessRuleViolationError,
    CatalogImportError,
    CredentialUnavailableError,
    DomainError,
    EntityNotFoundError,
    InvalidOperationError,
    ValidationError,
)

__all__ = [
    "DomainEvent",
    "EventBus",
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "InvalidOperationError",
    "CredentialUnavailableError",
    "CatalogImportError",
]
