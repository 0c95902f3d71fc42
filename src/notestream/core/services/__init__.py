"""
Service layer interfaces and implementations.

NoteService is the mutation pipeline shared by the REST and GraphQL fronts;
AuthService issues and revokes credentials; HealthService backs the health
endpoints.
"""

from .interfaces import IAuthService, IHealthService, INoteService
from .auth_service import AuthService
from .health_service import HealthService
from .note_service import MutationOutcome, NoteService

__all__ = [
    # Interfaces
    "IAuthService",
    "INoteService",
    "IHealthService",
    # Implementations
    "AuthService",
    "NoteService",
    "HealthService",
    "MutationOutcome",
]
