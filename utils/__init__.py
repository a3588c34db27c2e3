"""
Utils Package - Access layer, public queries and shared helpers
"""

from .decorators import login_required, current_owner_id
from .errors import (
    AccessError,
    UnauthorizedError,
    ValidationError,
    ConflictError,
    NotFoundError,
    TransientError,
    classify_store_error
)
from .helpers import (
    slugify,
    generate_slug,
    calculate_reading_time,
    format_blog_content,
    format_date
)
from .security import (
    get_client_ip,
    log_auth_event,
    register_account,
    authenticate
)

__all__ = [
    # Decorators
    'login_required',
    'current_owner_id',

    # Errors
    'AccessError',
    'UnauthorizedError',
    'ValidationError',
    'ConflictError',
    'NotFoundError',
    'TransientError',
    'classify_store_error',

    # Helpers
    'slugify',
    'generate_slug',
    'calculate_reading_time',
    'format_blog_content',
    'format_date',

    # Security
    'get_client_ip',
    'log_auth_event',
    'register_account',
    'authenticate'
]
