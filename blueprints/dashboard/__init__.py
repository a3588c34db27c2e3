"""
Dashboard Blueprint - Owner management pages
Handles: Profile, projects, skills, blog posts and social links of the signed-in account
"""

from flask import Blueprint

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/dashboard')

from . import routes
