"""
Data Module - Converts store rows into the JSON-ready dictionaries
echoed by the API and handed to templates.
"""


def _iso(value):
    return value.isoformat() if value else None


def profile_to_dict(profile):
    """Convert profile model to dictionary"""
    if not profile:
        return None
    return {
        'id': profile.id,
        'username': profile.username,
        'display_name': profile.display_name or '',
        'bio': profile.bio or '',
        'avatar_url': profile.avatar_url or '',
        'is_public': bool(profile.is_public),
        'created_at': _iso(profile.created_at),
        'updated_at': _iso(profile.updated_at),
    }


def author_to_dict(profile):
    """Public subset of a profile shown next to blog posts"""
    if not profile:
        return None
    return {
        'username': profile.username,
        'display_name': profile.display_name or profile.username,
        'avatar_url': profile.avatar_url or '',
        'bio': profile.bio or '',
    }


def project_to_dict(project):
    """Convert project model to dictionary"""
    return {
        'id': project.id,
        'user_id': project.user_id,
        'title': project.title,
        'description': project.description or '',
        'long_description': project.long_description or '',
        'tags': project.tags or [],
        'github_url': project.github_url,
        'demo_url': project.demo_url,
        'image_url': project.image_url,
        'is_featured': bool(project.is_featured),
        'display_order': project.display_order or 0,
        'created_at': _iso(project.created_at),
        'updated_at': _iso(project.updated_at),
    }


def skill_to_dict(skill):
    """Convert skill model to dictionary"""
    return {
        'id': skill.id,
        'user_id': skill.user_id,
        'name': skill.name,
        'category': skill.category,
        'proficiency_level': skill.proficiency_level,
        'years_of_experience': skill.years_of_experience,
        'is_featured': bool(skill.is_featured),
        'description': skill.description or '',
        'created_at': _iso(skill.created_at),
        'updated_at': _iso(skill.updated_at),
    }


def blog_post_to_dict(post, with_author=False):
    """Convert blog post model to dictionary"""
    result = {
        'id': post.id,
        'user_id': post.user_id,
        'title': post.title,
        'slug': post.slug,
        'content': post.content,
        'excerpt': post.excerpt or '',
        'cover_image': post.cover_image or '',
        'is_published': bool(post.is_published),
        'published_at': _iso(post.published_at),
        'reading_time': post.reading_time,
        'tags': post.tags or [],
        'created_at': _iso(post.created_at),
        'updated_at': _iso(post.updated_at),
    }
    if with_author:
        result['author'] = author_to_dict(post.author)
    return result


def social_link_to_dict(link):
    """Convert social link model to dictionary"""
    return {
        'id': link.id,
        'user_id': link.user_id,
        'platform': link.platform,
        'url': link.url,
        'display_text': link.display_text,
        'display_order': link.display_order or 0,
        'is_active': bool(link.is_active),
        'created_at': _iso(link.created_at),
        'updated_at': _iso(link.updated_at),
    }
