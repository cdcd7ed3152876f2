"""formkit: user-definable forms with typed fields and linked-field conditions."""

from __future__ import annotations

from formkit.domain.conditions import FieldCondition, MatchValue
from formkit.domain.errors import (
    CrossScopeError,
    FieldValueError,
    FormError,
    InvalidConditionError,
    InvalidStateError,
    InvariantError,
    NotFoundError,
)
from formkit.domain.fields import (
    BooleanField,
    Field,
    FileField,
    SelectField,
    SelectFieldChoice,
    TextField,
    build_field,
)
from formkit.domain.form import Form

__version__ = "0.1.0"

__all__ = [
    "BooleanField",
    "CrossScopeError",
    "Field",
    "FieldCondition",
    "FieldValueError",
    "FileField",
    "Form",
    "FormError",
    "InvalidConditionError",
    "InvalidStateError",
    "InvariantError",
    "MatchValue",
    "NotFoundError",
    "SelectField",
    "SelectFieldChoice",
    "TextField",
    "__version__",
    "build_field",
]
