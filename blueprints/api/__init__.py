"""
API Blueprint - JSON endpoints over the entity access layer
Handles: Projects, skills, social links, blog posts, profile, public portfolio
"""

from flask import Blueprint

api_bp = Blueprint('api', __name__, url_prefix='/api')

from . import routes
