"""
Decorators Module - Authentication helpers for dashboard pages and the JSON API
"""

from functools import wraps
from flask import redirect, url_for, flash, request
from flask_login import current_user


def current_owner_id():
    """Authenticated account id, or None for anonymous callers"""
    if current_user and current_user.is_authenticated:
        return current_user.id
    return None


def login_required(f):
    """Decorator to require a signed-in account on dashboard pages"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_owner_id():
            flash('Please log in to access this page.', 'error')
            return redirect(url_for('auth.login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function

