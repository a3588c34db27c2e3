"""
Extensions Module - Store and identity extensions shared by all blueprints
Kept apart from app.py so models and blueprints can import them without cycles.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

db = SQLAlchemy()

login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Please log in to manage your portfolio.'
login_manager.login_message_category = 'info'


def init_extensions(app):
    """Bind the store and the identity provider to an app instance"""
    db.init_app(app)
    login_manager.init_app(app)


__all__ = ['db', 'login_manager', 'init_extensions']
