"""
Pages Routes - Landing page and the site-wide blog
"""

from flask import render_template, abort, current_app
from sqlalchemy.exc import SQLAlchemyError
from extensions import db
from utils.errors import NotFoundError
from utils.public import list_published_posts, get_published_post, list_public_profiles
from . import pages_bp


@pages_bp.route('/')
def index():
    """Landing page - recent writing and public developers"""
    try:
        posts = list_published_posts(limit=6)
        developers = list_public_profiles()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning(f"Landing page data unavailable: {str(e)}")
        posts, developers = [], []

    return render_template('pages/index.html', posts=posts, developers=developers)


@pages_bp.route('/blog')
def blog():
    """All published posts, newest first"""
    return render_template('pages/blog.html', posts=list_published_posts())


@pages_bp.route('/blog/<slug>')
def blog_post(slug):
    """One published post with its author"""
    try:
        post = get_published_post(slug)
    except NotFoundError:
        abort(404)

    return render_template('pages/blog_post.html', post=post)


@pages_bp.route('/health')
def health_check():
    return {'status': 'ok', 'message': 'Devfolio is running'}, 200
