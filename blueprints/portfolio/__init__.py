"""
Portfolio Blueprint - Public developer pages
Handles: Profile page by username, per-developer blog index
"""

from flask import Blueprint

portfolio_bp = Blueprint('portfolio', __name__, url_prefix='')

from . import routes
