"""
Domain error taxonomy

Every expected business failure is one of these. Service operations catch
them at the operation boundary (see teachflow.services.base.action) and turn
them into a failed ActionResult; they never reach the HTTP layer as raw
exceptions.
"""

from typing import Optional


class TeachFlowError(Exception):
    """Base class for expected business failures"""

    code = "error"

    def __init__(self, message: str, detail: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class UnauthenticatedError(TeachFlowError):
    """No caller identity could be resolved"""

    code = "unauthenticated"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(TeachFlowError):
    """Entity is absent or owned by another tenant (never distinguished)"""

    code = "not_found"


class ValidationFailure(TeachFlowError):
    """Malformed or missing input, rejected before any write"""

    code = "validation_error"


class ReferenceConflictError(TeachFlowError):
    """Entity cannot be removed while other records reference it"""

    code = "reference_conflict"


class PersistenceFailure(TeachFlowError):
    """The store rejected or failed an operation"""

    code = "persistence_error"


class AlreadyExistsError(TeachFlowError):
    """A unique field collides with an existing record"""

    code = "already_exists"
