"""
Public Module - Read-only queries behind the public profile and blog pages

Nothing here writes. A missing (or private) profile is a not-found outcome for
the whole page; any other section that fails to load is returned as None so
the page can hide it.
"""

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from extensions import db
from models import Profile, Project, Skill, BlogPost, SocialLink
from .access import projects as project_access, skills as skill_access, \
    social_links as social_link_access
from .data import (
    profile_to_dict, author_to_dict, project_to_dict, skill_to_dict,
    blog_post_to_dict, social_link_to_dict
)
from .errors import NotFoundError
from .security import normalize_username


def _load_section(name, loader):
    try:
        return loader()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning(f"Public section '{name}' unavailable: {str(e)}")
        return None


def get_public_profile(username):
    """Profile addressed by username; private or unknown profiles are not found"""
    try:
        profile = Profile.query.filter_by(username=normalize_username(username)).first()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to load profile {username}: {str(e)}")
        profile = None
    if profile is None or not profile.is_public:
        raise NotFoundError('Profile not found')
    return profile


def group_skills(skills):
    """Category -> skills, categories alphabetical, members in display order"""
    ordered = sorted(skills, key=lambda s: (-(s['proficiency_level'] or 0),
                                            not s['is_featured'],
                                            s['name'].lower()))
    groups = {}
    for category in sorted({s['category'] for s in ordered}, key=str.lower):
        groups[category] = [s for s in ordered if s['category'] == category]
    return groups


def public_projects(owner_id):
    rows = Project.query.filter_by(user_id=owner_id).order_by(*project_access.ordering()).all()
    return [project_to_dict(p) for p in rows]


def public_skills(owner_id):
    rows = Skill.query.filter_by(user_id=owner_id).order_by(*skill_access.ordering()).all()
    return [skill_to_dict(s) for s in rows]


def public_posts(owner_id, limit=None):
    query = (BlogPost.query
             .filter_by(user_id=owner_id, is_published=True)
             .order_by(BlogPost.published_at.desc()))
    if limit:
        query = query.limit(limit)
    return [blog_post_to_dict(p) for p in query.all()]


def public_social_links(owner_id):
    rows = (SocialLink.query
            .filter_by(user_id=owner_id, is_active=True)
            .order_by(*social_link_access.ordering())
            .all())
    return [social_link_to_dict(link) for link in rows]


def load_public_portfolio(username, recent_posts=None):
    """Everything the public profile page shows for one developer"""
    profile = get_public_profile(username)
    if recent_posts is None:
        recent_posts = current_app.config.get('PUBLIC_RECENT_POSTS', 3)

    skills = _load_section('skills', lambda: public_skills(profile.id))
    return {
        'profile': profile_to_dict(profile),
        'projects': _load_section('projects', lambda: public_projects(profile.id)),
        'skills': skills,
        'skill_groups': group_skills(skills) if skills is not None else None,
        'posts': _load_section('posts', lambda: public_posts(profile.id, recent_posts)),
        'social_links': _load_section('social_links', lambda: public_social_links(profile.id)),
    }


def list_published_posts(limit=None):
    """Published posts from every public author, newest first"""
    query = (BlogPost.query
             .join(Profile, Profile.id == BlogPost.user_id)
             .filter(BlogPost.is_published.is_(True), Profile.is_public.is_(True))
             .order_by(BlogPost.published_at.desc()))
    if limit:
        query = query.limit(limit)
    return [blog_post_to_dict(p, with_author=True) for p in query.all()]


def get_published_post(slug):
    post = BlogPost.query.filter_by(slug=slug, is_published=True).first()
    if post is None or post.author is None or not post.author.is_public:
        raise NotFoundError('Blog post not found')
    return blog_post_to_dict(post, with_author=True)


def list_user_posts(username):
    """(author, published posts) for one developer's blog index"""
    profile = get_public_profile(username)
    return author_to_dict(profile), public_posts(profile.id)


def list_public_profiles(limit=12):
    rows = (Profile.query
            .filter_by(is_public=True)
            .order_by(Profile.created_at.desc())
            .limit(limit)
            .all())
    return [profile_to_dict(p) for p in rows]


__all__ = [
    'get_public_profile',
    'group_skills',
    'load_public_portfolio',
    'list_published_posts',
    'get_published_post',
    'list_user_posts',
    'list_public_profiles',
]
