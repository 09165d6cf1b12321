"""
Structured audit logging module for the Chirpy backend.

This module provides an AuditLogger class that logs events to a dedicated 'audit' logger
in structured JSON format. It supports context-aware request_id propagation across async
calls using contextvars.ContextVar.

Key features:
- Async-safe request_id and actor tracking via ContextVar
- Structured JSON output with ISO8601 timestamps
- Convenience methods for account, login, token and chirp events
- Never records passwords, tokens or secrets
"""

import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# Context variable for tracking request_id across async calls
_request_id_context: ContextVar[Optional[str]] = ContextVar(
    'request_id', default=None
)

# Context variable for tracking actor (authenticated user) across async calls
_actor_context: ContextVar[Optional[str]] = ContextVar(
    'actor', default=None
)


class AuditLogger:
    """
    Structured audit logger for security-relevant backend operations.

    All events are written to a dedicated 'audit' logger in JSON format.
    """

    def __init__(self):
        self.logger = logging.getLogger('audit')

    def set_request_id(self, request_id: str) -> None:
        """Set the request_id for the current context."""
        _request_id_context.set(request_id)

    def get_request_id(self) -> Optional[str]:
        return _request_id_context.get()

    def set_actor(self, actor: str) -> None:
        """Set the authenticated user for this request context."""
        _actor_context.set(actor)

    def get_actor(self) -> Optional[str]:
        return _actor_context.get()

    def log(
        self,
        action: str,
        actor: str,
        resource: str,
        resource_id: str,
        status: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Core method to log a structured audit event.

        Args:
            action: Type of action performed (e.g., 'LOGIN', 'CREATE', 'RESET')
            actor: User or service performing the action; 'user' resolves to
                the authenticated actor of the current request
            resource: Type of resource affected (e.g., 'User', 'Chirp', 'Token')
            resource_id: Unique identifier of the affected resource
            status: Result status (e.g., 'success', 'failure', 'rejected')
            details: Optional dict of additional context
        """
        event = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'action': action,
            'actor': actor if actor != 'user' else (self.get_actor() or 'user'),
            'resource': resource,
            'resource_id': resource_id,
            'status': status,
            'request_id': self.get_request_id(),
            'details': details or {},
        }
        self.logger.info(json.dumps(event))

    def log_user_created(self, user_id: str, email: str) -> None:
        self.log(
            action='CREATE',
            actor=f"user:{user_id}",
            resource='User',
            resource_id=user_id,
            status='success',
            details={'email': email},
        )

    def log_login(
        self,
        email: str,
        status: str,
        user_id: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        """
        Log a login attempt.

        Args:
            email: Email address the client tried to log in with
            status: 'success' or 'failure'
            user_id: Account ID when the email matched a user
            reason: Failure kind (e.g. 'mismatch', 'unknown_email')
        """
        details: Dict[str, Any] = {'email': email}
        if reason:
            details['reason'] = reason

        self.log(
            action='LOGIN',
            actor=f"user:{user_id}" if user_id else 'anonymous',
            resource='User',
            resource_id=user_id or 'unknown',
            status=status,
            details=details,
        )

    def log_auth_rejected(self, kind: str, path: str) -> None:
        """Log a rejected bearer token on a protected endpoint."""
        self.log(
            action='AUTHENTICATE',
            actor='anonymous',
            resource='Token',
            resource_id='bearer',
            status='rejected',
            details={'kind': kind, 'path': path},
        )

    def log_chirp_created(self, chirp_id: str, length: int) -> None:
        self.log(
            action='CREATE',
            actor='user',
            resource='Chirp',
            resource_id=chirp_id,
            status='success',
            details={'length': length},
        )

    def log_reset(self, users_deleted: int) -> None:
        self.log(
            action='RESET',
            actor='admin',
            resource='Database',
            resource_id='users',
            status='success',
            details={'users_deleted': users_deleted},
        )


# Global audit logger instance for convenient import
audit = AuditLogger()
