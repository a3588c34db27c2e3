"""
Management Module - Dashboard state containers over the JSON API

Each manager holds a mirror of one of the owner's lists, seeded from a server
snapshot. The mirror only ever changes from what the server answered: created
and updated rows are taken from the response body, never from the request.
"""

import logging
import requests
from .errors import UNAUTHORIZED, VALIDATION, CONFLICT, NOT_FOUND, TRANSIENT
from .helpers import swapped_orders


logger = logging.getLogger(__name__)

STATUS_KINDS = {
    400: VALIDATION,
    401: UNAUTHORIZED,
    404: NOT_FOUND,
    409: CONFLICT,
}

DEFAULT_MESSAGES = {
    UNAUTHORIZED: 'Please log in to save your changes',
    VALIDATION: 'Please check your input',
    CONFLICT: 'This item already exists',
    NOT_FOUND: 'This item no longer exists',
    TRANSIENT: 'Server error. Please try again.',
}


class ManagementError(Exception):
    def __init__(self, kind, message, status=None):
        self.kind = kind
        self.message = message
        self.status = status
        super().__init__(message)

    @property
    def retryable(self):
        return self.kind == TRANSIENT


class ApiClient:
    """Thin JSON client for the /api endpoints"""

    def __init__(self, base_url='', session=None, timeout=10):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def request(self, method, path, payload=None):
        url = f"{self.base_url}/api/{path.lstrip('/')}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {str(e)}")
            raise ManagementError(TRANSIENT, 'Network error occurred. Please try again.') from e

        try:
            body = response.json() if response.content else None
        except ValueError:
            body = None

        if 200 <= response.status_code < 300:
            return body

        body = body if isinstance(body, dict) else {}
        kind = body.get('kind') or STATUS_KINDS.get(response.status_code, TRANSIENT)
        message = body.get('error') or DEFAULT_MESSAGES.get(kind, DEFAULT_MESSAGES[TRANSIENT])
        logger.warning(f"{method} {url} answered {response.status_code} ({kind}): {message}")
        raise ManagementError(kind, message, response.status_code)


class ManagedList:
    """Mirror of one entity list, reconciled from authoritative responses"""

    resource = None
    prepend = False

    def __init__(self, client, items=None, resource=None):
        self.client = client
        self.resource = resource or self.resource
        self._items = [dict(item) for item in (items or [])]
        self.error = None
        self._resort()

    @property
    def items(self):
        return [dict(item) for item in self._items]

    # Subclasses with a natural display order define sort_key(item)
    sort_key = None

    def _resort(self):
        if self.sort_key is not None:
            self._items.sort(key=self.sort_key)

    def _call(self, method, path, payload=None):
        try:
            result = self.client.request(method, path, payload)
        except ManagementError as e:
            self.error = e
            raise
        self.error = None
        return result

    def _index_of(self, item_id):
        return next((i for i, item in enumerate(self._items) if item.get('id') == item_id), None)

    def _replace(self, saved):
        index = self._index_of(saved.get('id'))
        if index is None:
            self._items.append(saved)
        else:
            self._items[index] = saved

    def dismiss_error(self):
        self.error = None

    def refresh(self):
        self._items = list(self._call('GET', self.resource) or [])
        self._resort()
        return self.items

    def create(self, payload):
        saved = self._call('POST', self.resource, payload)
        if self.prepend:
            self._items.insert(0, saved)
        else:
            self._items.append(saved)
        self._resort()
        return dict(saved)

    def update(self, item_id, payload):
        saved = self._call('PUT', f"{self.resource}/{item_id}", payload)
        self._replace(saved)
        self._resort()
        return dict(saved)

    def delete(self, item_id):
        """True when the server deleted the row; stale entries are dropped either way"""
        try:
            self._call('DELETE', f"{self.resource}/{item_id}")
            deleted = True
        except ManagementError as e:
            if e.kind != NOT_FOUND:
                raise
            self.error = None
            deleted = False
        self._items = [item for item in self._items if item.get('id') != item_id]
        return deleted


class ProjectsManager(ManagedList):
    resource = 'projects'

    def sort_key(self, item):
        return (not item.get('is_featured'), item.get('display_order') or 0)


class SkillsManager(ManagedList):
    resource = 'skills'

    def sort_key(self, item):
        return (-(item.get('proficiency_level') or 0),
                not item.get('is_featured'),
                (item.get('name') or '').lower())


class BlogManager(ManagedList):
    resource = 'blog'
    prepend = True


class SocialLinksManager(ManagedList):
    resource = 'social-links'

    def sort_key(self, item):
        return item.get('display_order') or 0

    def move(self, link_id, direction):
        """Swap a link with its neighbour; the mirror changes only after both writes"""
        index = self._index_of(link_id)
        if index is None:
            raise ManagementError(NOT_FOUND, DEFAULT_MESSAGES[NOT_FOUND])
        neighbour = index - 1 if direction == 'up' else index + 1
        if neighbour < 0 or neighbour >= len(self._items):
            return self.items

        current, other = self._items[index], self._items[neighbour]
        current_order, other_order = swapped_orders(
            current.get('display_order') or 0, other.get('display_order') or 0, index, neighbour)

        first = self._call('PUT', f"{self.resource}/{current['id']}", {'display_order': current_order})
        try:
            second = self.client.request('PUT', f"{self.resource}/{other['id']}",
                                         {'display_order': other_order})
        except ManagementError as e:
            message = f"Failed to reorder links: {e.message}"
            if not self._restore(current):
                message += " The saved order may be inconsistent; reload to see it."
            self.error = ManagementError(e.kind, message, e.status)
            raise self.error from e

        self._replace(first)
        self._replace(second)
        self._resort()
        self.error = None
        return self.items

    def _restore(self, original):
        try:
            self.client.request('PUT', f"{self.resource}/{original['id']}",
                                {'display_order': original.get('display_order') or 0})
        except ManagementError as e:
            logger.error(f"Could not restore order of link {original['id']}: {e.message}")
            return False
        return True


__all__ = [
    'ManagementError',
    'ApiClient',
    'ManagedList',
    'ProjectsManager',
    'SkillsManager',
    'BlogManager',
    'SocialLinksManager',
]
