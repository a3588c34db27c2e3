"""
Errors Module - Outcome taxonomy for the entity access layer
Store exceptions are classified into one of these kinds before they leave the layer.
"""

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError


UNAUTHORIZED = 'unauthorized'
VALIDATION = 'validation'
CONFLICT = 'conflict'
NOT_FOUND = 'not_found'
TRANSIENT = 'transient'

# SQLSTATE / SQLite extended codes for uniqueness violations
UNIQUE_VIOLATION_CODES = {'23505', 'SQLITE_CONSTRAINT_UNIQUE', 'SQLITE_CONSTRAINT_PRIMARYKEY'}


class AccessError(Exception):
    kind = TRANSIENT
    status = 500
    default_message = 'Something went wrong. Please try again.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message, 'kind': self.kind}


class UnauthorizedError(AccessError):
    kind = UNAUTHORIZED
    status = 401
    default_message = 'Unauthorized'


class ValidationError(AccessError):
    kind = VALIDATION
    status = 400
    default_message = 'Please check your input'


class ConflictError(AccessError):
    kind = CONFLICT
    status = 409
    default_message = 'This item already exists'


class NotFoundError(AccessError):
    kind = NOT_FOUND
    status = 404
    default_message = 'Not found'


class TransientError(AccessError):
    kind = TRANSIENT
    status = 500


ERRORS_BY_KIND = {
    cls.kind: cls
    for cls in (UnauthorizedError, ValidationError, ConflictError, NotFoundError, TransientError)
}


def _driver_error_code(exc):
    """Structured error code reported by the DB-API driver, if any"""
    orig = getattr(exc, 'orig', None)
    for attr in ('pgcode', 'sqlstate', 'sqlite_errorname'):
        code = getattr(orig, attr, None)
        if code:
            return code
    return None


def classify_store_error(exc, label='item', conflict_message=None):
    """Map a raw store exception onto the access error taxonomy"""
    if isinstance(exc, AccessError):
        return exc

    if isinstance(exc, IntegrityError):
        code = _driver_error_code(exc)
        if code is None or code in UNIQUE_VIOLATION_CODES:
            current_app.logger.info(f"Conflict writing {label}: {code or 'integrity error'}")
            return ConflictError(conflict_message or f'A {label} with these details already exists')
        current_app.logger.warning(f"Rejected {label} by store constraint {code}")
        return ValidationError(f'Invalid {label} data')

    if isinstance(exc, SQLAlchemyError):
        current_app.logger.error(f"Store failure for {label}: {str(exc)}")
        return TransientError(f'Failed to save {label}. Please try again.')

    current_app.logger.error(f"Unexpected failure for {label}: {str(exc)}")
    return TransientError()


__all__ = [
    'AccessError',
    'UnauthorizedError',
    'ValidationError',
    'ConflictError',
    'NotFoundError',
    'TransientError',
    'ERRORS_BY_KIND',
    'classify_store_error',
]
