"""
Auth Blueprint - Identity provider surface
Handles: Sign in, sign up, sign out
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

from . import routes
