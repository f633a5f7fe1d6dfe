"""Domain-level exceptions.

All business outcomes the caller must react to are expressed as subclasses
of DomainException.  Each subclass carries an ``ErrorKind`` so callers (the
CLI, an HTTP layer) can map the failure without inspecting class names.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    WRITE_CONFLICT = "WRITE_CONFLICT"


class DomainException(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.VALIDATION


class ValidationError(DomainException):
    """Malformed input: non-positive quantities, empty orders, and so on."""

    kind = ErrorKind.VALIDATION


class EntityNotFoundError(DomainException):
    """A requested product, warehouse, order or inventory record does not exist."""

    kind = ErrorKind.NOT_FOUND


class InvalidStateError(DomainException):
    """The entity exists but its current state forbids the operation."""

    kind = ErrorKind.INVALID_STATE


@dataclass(frozen=True)
class Shortfall:
    """One order line that cannot be served from current availability."""

    product_id: int
    product_name: str
    requested: int
    available: int


class InsufficientStockError(DomainException):
    """Availability pre-check failed for one or more lines."""

    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, shortfalls: list[Shortfall]) -> None:
        self.shortfalls = list(shortfalls)
        details = ", ".join(
            f"{s.product_name} (need {s.requested}, have {s.available} available)"
            for s in self.shortfalls
        )
        super().__init__(f"Insufficient stock: {details}")


class WriteConflictError(DomainException):
    """Stock was available when read but was taken before the write landed.

    The transaction has been rolled back; the caller may resubmit.
    """

    kind = ErrorKind.WRITE_CONFLICT
