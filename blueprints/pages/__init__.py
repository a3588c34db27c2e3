"""
Pages Blueprint - Public site pages
Handles: Landing page, blog index, blog post by slug
"""

from flask import Blueprint

pages_bp = Blueprint('pages', __name__, url_prefix='')

from . import routes
