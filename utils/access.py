"""
Access Module - Owner-scoped CRUD for every portfolio entity

Every mutation carries the caller's account id. Updates and deletes are a
single statement whose predicate matches both the row id and the owner, so
a row owned by someone else is indistinguishable from a missing one.
"""

from datetime import datetime, timezone
from urllib.parse import urlparse
from flask import current_app
from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from extensions import db
from models import Profile, Project, Skill, BlogPost, SocialLink
from .data import (
    profile_to_dict, project_to_dict, skill_to_dict,
    blog_post_to_dict, social_link_to_dict
)
from .errors import (
    UnauthorizedError, ValidationError, NotFoundError, classify_store_error
)
from .helpers import (
    slugify, calculate_reading_time, parse_bool, parse_int, parse_tags, clean_text,
    swapped_orders
)


SKILL_CATEGORIES = [
    'Programming Languages',
    'Frameworks & Libraries',
    'Databases',
    'Tools & Platforms',
    'DevOps & Cloud',
    'Design & UX',
    'Soft Skills',
    'Other',
]

PROFICIENCY_LEVELS = {
    1: 'Beginner',
    2: 'Basic',
    3: 'Intermediate',
    4: 'Advanced',
    5: 'Expert',
}

PLATFORMS = {
    'github': 'GitHub',
    'twitter': 'Twitter',
    'linkedin': 'LinkedIn',
    'youtube': 'YouTube',
    'instagram': 'Instagram',
    'facebook': 'Facebook',
    'twitch': 'Twitch',
    'discord': 'Discord',
    'website': 'Website',
    'portfolio': 'Portfolio',
    'blog': 'Blog',
    'email': 'Email',
    'phone': 'Phone',
}

# Integer columns are 32-bit on every supported store
INT_MIN, INT_MAX = -2 ** 31, 2 ** 31 - 1

WEB_SCHEMES = ('http', 'https')
# Email and phone social links use mailto: and tel:
LINK_SCHEMES = WEB_SCHEMES + ('mailto', 'tel')


# Field converters: raw JSON/form value -> stored value. ValueError means "invalid".

def text(max_length=None):
    return lambda val: clean_text(val, max_length)


def long_text(val):
    return clean_text(val)


def bounded_int(val, default=None):
    number = parse_int(val, default)
    if number is not None and not INT_MIN <= number <= INT_MAX:
        raise ValueError('out of range')
    return number


def integer(val):
    return bounded_int(val, default=0)


def optional_count(val):
    count = bounded_int(val)
    if count is not None and count < 0:
        raise ValueError('must not be negative')
    return count


def proficiency(val):
    level = bounded_int(val)
    if level is None:
        return None
    return min(5, max(1, level))


def timestamp(val):
    if val in (None, ''):
        return None
    if isinstance(val, datetime):
        return val
    parsed = datetime.fromisoformat(str(val).replace("Z", "+00:00"))
    # Stored naive in UTC like every other timestamp column
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def url_field(schemes=WEB_SCHEMES, max_length=500):
    def convert(val):
        url = clean_text(val, max_length)
        if url is None:
            return None
        parsed = urlparse(url)
        if parsed.scheme.lower() not in schemes:
            raise ValueError('unsupported URL scheme')
        if parsed.scheme.lower() in WEB_SCHEMES and not parsed.netloc:
            raise ValueError('missing host')
        return url
    return convert


def slug_field(val):
    return slugify(str(val)) if val is not None else None


def platform(val):
    name = (str(val).strip().lower() if val is not None else '')
    if not name:
        return None
    if name not in PLATFORMS:
        raise ValidationError(f'Unsupported platform: {name}')
    return name


class AccessBase:
    """Field cleaning and store error handling shared by every access object"""

    model = None
    label = 'item'
    fields = {}
    required = ()
    required_message = None
    conflict_message = None

    def serialize(self, row):
        raise NotImplementedError

    def ordering(self):
        return ()

    # -- validation ---------------------------------------------------------

    def _require_owner(self, owner_id):
        if not owner_id:
            raise UnauthorizedError()

    def clean(self, payload):
        """Whitelisted, converted values; server-set fields never pass"""
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError('Request body must be a JSON object')

        values = {}
        for field, convert in self.fields.items():
            if field not in payload:
                continue
            try:
                values[field] = convert(payload[field])
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid {field.replace('_', ' ')}")
        return values

    def check_required(self, values, partial=False):
        for field in self.required:
            if partial and field not in values:
                continue
            if values.get(field) in (None, ''):
                raise ValidationError(self.required_message or f'{field} is required')

    def _run(self, operation):
        try:
            return operation()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise classify_store_error(e, self.label, self.conflict_message) from e


class EntityAccess(AccessBase):
    """CRUD contract shared by every owned entity type"""

    def before_create(self, owner_id, values, now):
        pass

    def before_update(self, owner_id, values, now):
        pass

    # -- reads --------------------------------------------------------------

    def owned(self, owner_id):
        return self.model.query.filter_by(user_id=owner_id)

    def list_own(self, owner_id):
        self._require_owner(owner_id)
        return self._run(lambda: self.owned(owner_id).order_by(*self.ordering()).all())

    def count_own(self, owner_id):
        self._require_owner(owner_id)
        return self._run(lambda: self.owned(owner_id).count())

    def get_own(self, owner_id, item_id):
        self._require_owner(owner_id)
        row = self._run(lambda: self.owned(owner_id).filter_by(id=item_id).first())
        if row is None:
            raise NotFoundError(f'{self.label.capitalize()} not found')
        return row

    # -- mutations ----------------------------------------------------------

    def create(self, owner_id, payload):
        self._require_owner(owner_id)
        values = self.clean(payload)
        self.check_required(values)

        now = datetime.utcnow()
        values.update(user_id=owner_id, created_at=now, updated_at=now)
        self.before_create(owner_id, values, now)

        row = self.model(**values)

        def insert():
            db.session.add(row)
            db.session.commit()
            return row

        row = self._run(insert)
        current_app.logger.info(f"Created {self.label} {row.id} for {owner_id}")
        return row

    def update(self, owner_id, item_id, payload):
        self._require_owner(owner_id)
        values = self.clean(payload)
        self.check_required(values, partial=True)

        now = datetime.utcnow()
        values['updated_at'] = now
        self.before_update(owner_id, values, now)

        def scoped_update():
            matched = (self.model.query
                       .filter_by(id=item_id, user_id=owner_id)
                       .update(values, synchronize_session=False))
            if matched:
                db.session.commit()
            else:
                db.session.rollback()
            return matched

        if not self._run(scoped_update):
            current_app.logger.info(f"Update of {self.label} {item_id} by {owner_id} matched no rows")
            raise NotFoundError(f'{self.label.capitalize()} not found')

        current_app.logger.info(f"Updated {self.label} {item_id} for {owner_id}")
        return self.get_own(owner_id, item_id)

    def delete(self, owner_id, item_id):
        """True when a row was removed; False when nothing owned matched"""
        self._require_owner(owner_id)

        def scoped_delete():
            deleted = (self.model.query
                       .filter_by(id=item_id, user_id=owner_id)
                       .delete(synchronize_session=False))
            db.session.commit()
            return deleted

        deleted = self._run(scoped_delete)
        if deleted:
            current_app.logger.info(f"Deleted {self.label} {item_id} for {owner_id}")
        else:
            current_app.logger.info(f"Delete of {self.label} {item_id} by {owner_id} matched no rows")
        return bool(deleted)


class ProjectAccess(EntityAccess):
    model = Project
    label = 'project'
    fields = {
        'title': text(255),
        'description': long_text,
        'long_description': long_text,
        'tags': parse_tags,
        'github_url': url_field(),
        'demo_url': url_field(),
        'image_url': url_field(),
        'is_featured': parse_bool,
        'display_order': integer,
    }
    required = ('title',)
    required_message = 'Title is required'

    def serialize(self, row):
        return project_to_dict(row)

    def ordering(self):
        return (Project.is_featured.desc(), Project.display_order.asc(), Project.created_at.desc())


class SkillAccess(EntityAccess):
    model = Skill
    label = 'skill'
    fields = {
        'name': text(255),
        'category': text(100),
        'proficiency_level': proficiency,
        'years_of_experience': optional_count,
        'is_featured': parse_bool,
        'description': long_text,
    }
    required = ('name', 'category', 'proficiency_level')
    required_message = 'Name, category, and proficiency level are required'

    def serialize(self, row):
        return skill_to_dict(row)

    def ordering(self):
        return (Skill.proficiency_level.desc(), Skill.is_featured.desc(), Skill.name.asc())


class BlogPostAccess(EntityAccess):
    model = BlogPost
    label = 'blog post'
    fields = {
        'title': text(255),
        'slug': slug_field,
        'content': long_text,
        'excerpt': long_text,
        'cover_image': url_field(),
        'is_published': parse_bool,
        'published_at': timestamp,
        'tags': parse_tags,
    }
    required = ('title', 'slug', 'content')
    required_message = 'Title, slug, and content are required'
    conflict_message = 'A blog post with this slug already exists. Please try again with a different title.'

    def serialize(self, row):
        return blog_post_to_dict(row)

    def ordering(self):
        return (BlogPost.created_at.desc(),)

    def before_create(self, owner_id, values, now):
        values['reading_time'] = calculate_reading_time(values.get('content'))
        if values.get('is_published'):
            values['published_at'] = values.get('published_at') or now
        else:
            values['is_published'] = False
            values['published_at'] = None

    def before_update(self, owner_id, values, now):
        if 'content' in values:
            values['reading_time'] = calculate_reading_time(values['content'])
        # published_at is reconciled with the publish state inside the same
        # owner-scoped UPDATE: published rows always keep a date, drafts never have one
        if 'is_published' in values:
            if not values['is_published']:
                values['published_at'] = None
            elif not values.get('published_at'):
                values['published_at'] = func.coalesce(BlogPost.published_at, now)
        elif 'published_at' in values:
            stamp = values['published_at'] or func.coalesce(BlogPost.published_at, now)
            values['published_at'] = case(
                (BlogPost.is_published.is_(True), stamp),
                else_=None,
            )


class SocialLinkAccess(EntityAccess):
    model = SocialLink
    label = 'social link'
    fields = {
        'platform': platform,
        'url': url_field(LINK_SCHEMES),
        'display_text': text(255),
        'display_order': integer,
        'is_active': parse_bool,
    }
    required = ('platform', 'url')
    required_message = 'Platform and URL are required'

    def serialize(self, row):
        return social_link_to_dict(row)

    def ordering(self):
        return (SocialLink.display_order.asc(), SocialLink.created_at.asc())

    def next_display_order(self, owner_id):
        return (db.session.query(func.coalesce(func.max(SocialLink.display_order) + 1, 0))
                .filter(SocialLink.user_id == owner_id)
                .scalar())

    def before_create(self, owner_id, values, now):
        if not values.get('display_text'):
            values['display_text'] = PLATFORMS.get(values['platform'], values['platform'])
        values.setdefault('is_active', True)
        if 'display_order' not in values:
            values['display_order'] = self._run(lambda: self.next_display_order(owner_id))

    def set_display_orders(self, owner_id, orders):
        """Apply {link_id: display_order} in one transaction; all or nothing"""
        self._require_owner(owner_id)
        now = datetime.utcnow()

        def apply():
            for link_id, order in orders.items():
                matched = (SocialLink.query
                           .filter_by(id=link_id, user_id=owner_id)
                           .update({'display_order': order, 'updated_at': now},
                                   synchronize_session=False))
                if not matched:
                    db.session.rollback()
                    return False
            db.session.commit()
            return True

        if not self._run(apply):
            raise NotFoundError('Social link not found')
        current_app.logger.info(f"Reordered social links {list(orders)} for {owner_id}")

    def move(self, owner_id, link_id, direction):
        """Swap a link's display order with its neighbour ('up' or 'down')"""
        if direction not in ('up', 'down'):
            raise ValidationError('Direction must be up or down')

        links = self.list_own(owner_id)
        index = next((i for i, link in enumerate(links) if link.id == link_id), None)
        if index is None:
            raise NotFoundError('Social link not found')

        neighbour = index - 1 if direction == 'up' else index + 1
        if neighbour < 0 or neighbour >= len(links):
            return links

        current, other = links[index], links[neighbour]
        current_order, other_order = swapped_orders(
            current.display_order, other.display_order, index, neighbour)
        self.set_display_orders(owner_id, {current.id: current_order, other.id: other_order})
        return self.list_own(owner_id)


class ProfileAccess(AccessBase):
    """The caller's own profile; created once at sign-up, username fixed"""

    model = Profile
    label = 'profile'
    fields = {
        'display_name': text(255),
        'bio': long_text,
        'avatar_url': url_field(),
        'is_public': parse_bool,
    }

    def serialize(self, row):
        return profile_to_dict(row)

    def owned(self, owner_id):
        return Profile.query.filter_by(id=owner_id)

    def get(self, owner_id):
        self._require_owner(owner_id)
        profile = self._run(lambda: self.owned(owner_id).first())
        if profile is None:
            raise NotFoundError('Profile not found')
        return profile

    def update(self, owner_id, payload):
        self._require_owner(owner_id)
        values = self.clean(payload)
        values['updated_at'] = datetime.utcnow()

        def scoped_update():
            matched = self.owned(owner_id).update(values, synchronize_session=False)
            if matched:
                db.session.commit()
            else:
                db.session.rollback()
            return matched

        if not self._run(scoped_update):
            raise NotFoundError('Profile not found')
        current_app.logger.info(f"Updated profile for {owner_id}")
        return self.get(owner_id)


profiles = ProfileAccess()
projects = ProjectAccess()
skills = SkillAccess()
blog_posts = BlogPostAccess()
social_links = SocialLinkAccess()

# URL segment -> access object for the JSON API
RESOURCES = {
    'projects': projects,
    'skills': skills,
    'social-links': social_links,
    'blog': blog_posts,
}


__all__ = [
    'SKILL_CATEGORIES',
    'PROFICIENCY_LEVELS',
    'PLATFORMS',
    'AccessBase',
    'EntityAccess',
    'profiles',
    'projects',
    'skills',
    'blog_posts',
    'social_links',
    'RESOURCES',
]
