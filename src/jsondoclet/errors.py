"""Custom exception hierarchy for json-doclet.

This module defines the exception classes used throughout json-doclet:
- JsonDocletError: Base exception for all json-doclet errors
- ModelError: Raised when the host type model is invalid
- UnsupportedTypeError: Raised when a type cannot be represented in JSON Schema
- DuplicateDefinitionError: Raised when two distinct types claim one schema name
- MalformedCommentWarning: Emitted when documentation text has broken tag syntax

User-facing messages name the offending type identity; technical details
are logged internally via structlog.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)


class JsonDocletError(Exception):
    """Base exception for json-doclet.

    Args:
        user_message: Message safe to display to the user.
        internal_details: Optional technical details for logging. These are
            logged internally but never included in ``str(error)``.

    Example:
        >>> raise JsonDocletError(
        ...     "Schema generation failed",
        ...     internal_details="registry state: 12 entries, 1 in progress",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize JsonDocletError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "jsondoclet_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ModelError(JsonDocletError):
    """Raised when the host type model is structurally invalid.

    Use this exception when:
    - A requested root type is not declared
    - Two declarations share a qualified name
    - A composite declares the same member name twice
    """

    pass


class UnsupportedTypeError(JsonDocletError):
    """Raised when a type cannot be structurally represented.

    Recovered locally by the translator, which substitutes a permissive
    fallback fragment and attaches a warning to its description.

    Attributes:
        identity: Rendered identity of the offending type.
        reason: Short explanation of why the type is unsupported.

    Example:
        >>> raise UnsupportedTypeError("?", "unbounded wildcard has no bound")
        # User sees: "Unsupported type '?': unbounded wildcard has no bound"
    """

    def __init__(
        self,
        identity: str,
        reason: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize UnsupportedTypeError.

        Args:
            identity: Rendered identity of the offending type.
            reason: Short explanation of why the type is unsupported.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(
            f"Unsupported type '{identity}': {reason}",
            internal_details=internal_details,
        )
        self.identity = identity
        self.reason = reason


class DuplicateDefinitionError(JsonDocletError):
    """Raised when a schema name is registered twice with different fragments.

    This indicates a defect in name disambiguation, not a user-fixable
    input error, and aborts the run.

    Attributes:
        name: The schema name that was registered twice.
        identity: Rendered identity of the type whose registration collided.
    """

    def __init__(
        self,
        name: str,
        identity: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize DuplicateDefinitionError.

        Args:
            name: Schema name registered twice.
            identity: Rendered identity of the colliding type.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(
            f"Schema definition '{name}' registered twice (type '{identity}')",
            internal_details=internal_details,
        )
        self.name = name
        self.identity = identity


class MalformedCommentWarning(UserWarning):
    """Documentation text does not match the expected tag syntax.

    Non-fatal: the unparseable remainder is kept verbatim as description text.
    """
