"""
Security Module - Account sign-up / sign-in helpers and request auditing
"""

import re
from flask import request, current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash, check_password_hash
from extensions import db
from models import User, Profile
from .errors import ValidationError, ConflictError, classify_store_error


USERNAME_PATTERN = re.compile(r'^[a-z0-9_-]{3,30}$')
EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIN_PASSWORD_LENGTH = 8

# Usernames that would shadow top-level routes
RESERVED_USERNAMES = {'api', 'auth', 'blog', 'dashboard', 'dev', 'health', 'static'}


def get_client_ip():
    """Get real client IP address"""
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr or 'unknown'


def log_auth_event(event_type, details=''):
    """Log sign-in activity with the originating address"""
    current_app.logger.info(f"[auth] {event_type} from {get_client_ip()}: {details}")


def hash_password(password):
    return generate_password_hash(password)


def verify_password(password, password_hash):
    """Verify password against hash"""
    return check_password_hash(password_hash, password)


def normalize_username(username):
    return (username or '').strip().lower()


def register_account(email, password, username, display_name=None):
    """Create an account and its profile in one transaction"""
    email = (email or '').strip().lower()
    username = normalize_username(username)
    display_name = (display_name or '').strip() or username

    if not email or not password or not username:
        raise ValidationError('Email, password, and username are required')
    if not EMAIL_PATTERN.match(email):
        raise ValidationError('Please enter a valid email address')
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
    if not USERNAME_PATTERN.match(username) or username in RESERVED_USERNAMES:
        raise ValidationError('Username must be 3-30 lowercase letters, digits, hyphens or underscores')

    if User.query.filter_by(email=email).first():
        raise ConflictError('An account with this email already exists')
    if Profile.query.filter_by(username=username).first():
        raise ConflictError('This username is already taken')

    user = User(email=email, password_hash=hash_password(password))
    try:
        db.session.add(user)
        db.session.flush()
        db.session.add(Profile(id=user.id, username=username, display_name=display_name))
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise classify_store_error(e, 'account', 'This email or username is already taken') from e

    current_app.logger.info(f"Registered account {user.id} as {username}")
    return user


def authenticate(email, password):
    """Account for valid credentials, else None"""
    email = (email or '').strip().lower()
    if not email or not password:
        return None
    user = User.query.filter_by(email=email).first()
    if user and verify_password(password, user.password_hash):
        return user
    return None


__all__ = [
    'get_client_ip',
    'log_auth_event',
    'hash_password',
    'verify_password',
    'normalize_username',
    'register_account',
    'authenticate',
]
