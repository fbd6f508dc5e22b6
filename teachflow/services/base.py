"""
Operation boundary for service functions

Every public service operation is wrapped with ``action``. Business failures
(TeachFlowError), input validation errors and store failures are recovered
here and returned as a failed ActionResult, so route handlers never see a
raw exception for an expected outcome.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar
import functools

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
import structlog

from teachflow.core.errors import (
    PersistenceFailure,
    TeachFlowError,
    UnauthenticatedError,
    ValidationFailure,
)

logger = structlog.get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass
class ActionResult:
    """Outcome of a service operation"""
    success: bool
    data: Any = None
    error: Optional[str] = None
    code: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: Any = None, warnings: Optional[List[str]] = None, **extras) -> "ActionResult":
        return cls(success=True, data=data, warnings=list(warnings or []), extras=extras)

    @classmethod
    def fail(cls, error: TeachFlowError) -> "ActionResult":
        return cls(success=False, error=error.message, code=error.code)


def format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(item) for item in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    return "; ".join(parts) or "Invalid input"


def parse(schema: Type[SchemaT], data: Any) -> SchemaT:
    """Validate raw input against a schema, raising ValidationFailure"""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ValidationFailure(format_validation_error(e))


def action(description: str, authenticated: bool = True):
    """Decorator turning a service function into a structured-result operation

    Wrapped functions take ``(session, caller, ...)`` (or ``(session, ...)``
    when ``authenticated`` is False) and return either an ActionResult or the
    payload for a successful one.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(session: Session, *args, **kwargs) -> ActionResult:
            if authenticated and (not args or args[0] is None):
                return ActionResult.fail(UnauthenticatedError())
            try:
                outcome = func(session, *args, **kwargs)
            except TeachFlowError as e:
                session.rollback()
                logger.info(f"Could not {description}: {e.message}")
                return ActionResult.fail(e)
            except ValidationError as e:
                session.rollback()
                return ActionResult.fail(ValidationFailure(format_validation_error(e)))
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Failed to {description}: {e}")
                return ActionResult.fail(PersistenceFailure(f"Failed to {description}"))

            if isinstance(outcome, ActionResult):
                return outcome
            return ActionResult.ok(outcome)
        return wrapper
    return decorator
