"""Domain error taxonomy.

Every error carries a stable ``code`` so the service layer can turn it
into a :class:`~formkit.services.result.ServiceError` without string
matching. Errors are raised at the call site that detects them and are
never recovered inside the domain.
"""

from __future__ import annotations

from typing import Any, ClassVar


class FormError(Exception):
    """Base class for all domain rule violations."""

    code: ClassVar[str] = "FORM_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class InvariantError(FormError):
    """An archived or duplicate member was added to a live container."""

    code: ClassVar[str] = "INVARIANT"


class NotFoundError(FormError):
    """A referenced field or choice is not a member of the target."""

    code: ClassVar[str] = "NOT_FOUND"


class InvalidStateError(FormError):
    """The member exists but is archived, or its container is."""

    code: ClassVar[str] = "INVALID_STATE"


class FieldValueError(FormError):
    """A default value fails the field's own validation."""

    code: ClassVar[str] = "INVALID_VALUE"


class InvalidConditionError(FormError):
    """A linked-field condition is malformed, self-referencing or cyclic."""

    code: ClassVar[str] = "INVALID_CONDITION"


class CrossScopeError(InvalidConditionError):
    """A condition or field references another form, or an archived field."""

    code: ClassVar[str] = "CROSS_SCOPE"
