"""
Domain Errors

Error hierarchy shared by every bounded context:
- ValidationError: malformed input to a pure component
- StateTransitionError: illegal booking lifecycle move
- PricingValidationError: internally inconsistent pricing breakdown
- NotFoundError: catalog item, guest or booking absent
- ConflictError: concurrent or overlapping writes rejected at persistence

Each error carries structured context so that the outer layer can map it
to a response without parsing messages.
"""

from typing import Any, Dict, List, Optional


class DomainError(Exception):
    """Base class for all errors raised by the domain layer"""

    status_code = 500
    default_code = 'DOMAIN_ERROR'

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> Dict[str, Any]:
        return {
            'error': self.__class__.__name__,
            'code': self.code,
            'message': self.message,
        }


class ValidationError(DomainError, ValueError):
    """Input rejected by a domain rule; the caller can fix and retry"""

    status_code = 400
    default_code = 'VALIDATION_ERROR'

    def __init__(self, message: str, field: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message, code)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.field:
            data['field'] = self.field
        return data


class StateTransitionError(ValidationError):
    """Illegal booking status change"""

    default_code = 'INVALID_STATE_TRANSITION'

    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        target_status: Optional[str] = None,
        valid_transitions: Optional[List[str]] = None,
    ):
        super().__init__(message, field='status')
        self.current_status = current_status
        self.target_status = target_status
        self.valid_transitions = list(valid_transitions or [])

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            'current_status': self.current_status,
            'target_status': self.target_status,
            'valid_transitions': self.valid_transitions,
        })
        return data


class PricingValidationError(ValidationError):
    """Pricing breakdown does not satisfy its own invariants"""

    default_code = 'PRICING_VALIDATION_ERROR'

    def __init__(
        self,
        message: str,
        pricing_field: Optional[str] = None,
        expected_value: Any = None,
        actual_value: Any = None,
    ):
        super().__init__(message, field=pricing_field)
        self.pricing_field = pricing_field
        self.expected_value = expected_value
        self.actual_value = actual_value

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            'pricing_field': self.pricing_field,
            'expected_value': None if self.expected_value is None else str(self.expected_value),
            'actual_value': None if self.actual_value is None else str(self.actual_value),
        })
        return data


class NotFoundError(DomainError):
    """Requested resource does not exist"""

    status_code = 404
    default_code = 'NOT_FOUND'

    def __init__(self, message: str = 'Resource not found', resource: Optional[str] = None):
        super().__init__(message)
        self.resource = resource


class ConflictError(DomainError):
    """Write rejected because it conflicts with current state"""

    status_code = 409
    default_code = 'CONFLICT'


class BookingConflictError(ConflictError):
    """Requested date range overlaps an active booking of the same item"""

    default_code = 'BOOKING_CONFLICT'


class StaleBookingError(ConflictError):
    """Booking status changed between read and conditional write"""

    default_code = 'STALE_BOOKING'
