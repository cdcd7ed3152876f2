"""BaseService: abstract foundation for all formkit services.

Every service receives the :class:`Form` aggregate it works on at
construction time. Services never persist anything; the caller owns
storage and decides what to do with the result.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from formkit.domain.errors import FormError
from formkit.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from formkit.domain.form import Form

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class CheckService(BaseService):
            def check(self) -> ServiceResult:
                for field in self._form.get_fields():
                    ...
    """

    def __init__(self, form: Form) -> None:
        self._form = form

    @property
    def form(self) -> Form:
        return self._form

    def _failure(self, op: str, exc: FormError) -> ServiceResult:
        """Convert a domain error into a failed ServiceResult."""
        logger.debug("%s failed on form %s: %s", op, self._form.id, exc.message)
        return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc))
