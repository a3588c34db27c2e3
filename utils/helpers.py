"""
Helpers Module - Utility functions for common operations
"""

import math
import re
import secrets
import string
from datetime import datetime
from markupsafe import Markup, escape


WORDS_PER_MINUTE = 200
SLUG_SUFFIX_LENGTH = 6
SLUG_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits

_URL_PATTERN = re.compile(r'(https?://[^\s<]+)')


def slugify(text):
    """Turn free text into a URL-safe token: lowercase words joined by single hyphens"""
    if not text:
        return ''
    slug = text.lower().strip()
    slug = re.sub(r'[^\w\s-]', '', slug, flags=re.ASCII)
    slug = re.sub(r'[\s_-]+', '-', slug)
    return slug.strip('-')


def generate_slug(title, unique=True):
    """Slug for a post title; new posts get a short random suffix"""
    base_slug = slugify(title)
    if not unique:
        return base_slug
    suffix = ''.join(secrets.choice(SLUG_SUFFIX_ALPHABET) for _ in range(SLUG_SUFFIX_LENGTH))
    return f"{base_slug}-{suffix}" if base_slug else suffix


def calculate_reading_time(content):
    """Minutes to read, one minute per 200 words, never below 1"""
    words = len((content or '').split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def format_blog_content(content):
    """Escape post content, linkify bare URLs and keep line breaks"""
    if not content:
        return Markup('')
    formatted = str(escape(content))
    formatted = _URL_PATTERN.sub(
        r'<a href="\1" target="_blank" rel="noopener noreferrer">\1</a>', formatted)
    formatted = formatted.replace('\r\n', '\n').replace('\n', '<br>')
    return Markup(formatted)


def format_date(value, fmt='%B %d, %Y'):
    if not value:
        return ''
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    return value.strftime(fmt)


def parse_bool(val):
    if isinstance(val, bool):
        return val
    if isinstance(val, (int, float)):
        return bool(val)
    if isinstance(val, str):
        return val.strip().lower() in ('true', 'on', '1', 'yes')
    return False


def parse_int(val, default=None):
    """Integer from JSON or form input; raises ValueError on garbage"""
    if val is None or val == '':
        return default
    if isinstance(val, bool):
        raise ValueError('boolean is not an integer')
    if isinstance(val, float):
        if not val.is_integer():
            raise ValueError('not a whole number')
        return int(val)
    return int(str(val).strip())


def parse_tags(val):
    """Ordered, de-duplicated list of tag strings from a list or comma-separated text"""
    if not val:
        return []
    if isinstance(val, str):
        candidates = val.split(',')
    elif isinstance(val, (list, tuple)):
        candidates = val
    else:
        raise ValueError('tags must be a list of strings')

    tags = []
    for tag in candidates:
        if not isinstance(tag, str):
            raise ValueError('tags must be a list of strings')
        tag = tag.strip()[:50]
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def clean_text(val, max_length=None):
    """Trimmed string, or None when empty"""
    if val is None:
        return None
    val = str(val).strip()
    if max_length:
        val = val[:max_length]
    return val or None


def swapped_orders(first_order, second_order, first_index, second_index):
    """New (first, second) orders after a swap; equal orders fall back to positions"""
    if first_order == second_order:
        return second_index, first_index
    return second_order, first_order


__all__ = [
    'WORDS_PER_MINUTE',
    'slugify',
    'generate_slug',
    'calculate_reading_time',
    'format_blog_content',
    'format_date',
    'parse_bool',
    'parse_int',
    'parse_tags',
    'clean_text',
    'swapped_orders',
]
