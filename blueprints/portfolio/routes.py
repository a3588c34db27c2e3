"""
Portfolio Routes - Public developer pages
"""

from flask import render_template, abort, current_app
from utils.errors import NotFoundError
from utils.public import load_public_portfolio, list_user_posts
from . import portfolio_bp


@portfolio_bp.route('/<username>')
@portfolio_bp.route('/dev/<username>')
def user_portfolio(username):
    """Public view of a developer portfolio"""
    try:
        data = load_public_portfolio(username)
    except NotFoundError:
        current_app.logger.info(f"Portfolio not found for {username}")
        abort(404)

    return render_template('portfolio/profile.html', data=data)


@portfolio_bp.route('/<username>/blog')
def user_blog(username):
    """Published posts of one developer"""
    try:
        author, posts = list_user_posts(username)
    except NotFoundError:
        abort(404)

    return render_template('portfolio/blog.html', author=author, posts=posts)
