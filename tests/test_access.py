"""
Access layer tests
Ownership scoping, validation, conflicts, ordering and publishing rules
"""

from datetime import datetime

import pytest

from extensions import db
from models import Project
from utils.access import projects, skills, blog_posts, social_links, profiles
from utils.errors import (
    UnauthorizedError, ValidationError, ConflictError, NotFoundError
)


class TestOwnership:
    """Every read and write is scoped to the caller's account"""

    def test_create_stamps_caller_as_owner(self, alice, bob, ctx):
        row = projects.create(alice, {'title': 'Site', 'user_id': bob, 'id': 'forced'})

        assert row.user_id == alice
        assert row.id != 'forced'
        assert row.created_at is not None

    def test_list_returns_only_own_rows(self, alice, bob, ctx):
        projects.create(alice, {'title': 'Mine'})
        projects.create(bob, {'title': 'Theirs'})

        assert [p.title for p in projects.list_own(alice)] == ['Mine']
        assert projects.count_own(bob) == 1

    def test_update_of_foreign_row_is_not_found(self, alice, bob, ctx):
        row = projects.create(alice, {'title': 'Original'})

        with pytest.raises(NotFoundError):
            projects.update(bob, row.id, {'title': 'Hijacked'})

        assert projects.get_own(alice, row.id).title == 'Original'

    def test_delete_of_foreign_row_matches_nothing(self, alice, bob, ctx):
        row = projects.create(alice, {'title': 'Keep me'})

        assert projects.delete(bob, row.id) is False
        assert db.session.get(Project, row.id) is not None
        assert projects.delete(alice, row.id) is True
        assert projects.count_own(alice) == 0

    def test_get_foreign_row_is_not_found(self, alice, bob, ctx):
        row = skills.create(alice, {'name': 'Go', 'category': 'Languages', 'proficiency_level': 3})

        with pytest.raises(NotFoundError):
            skills.get_own(bob, row.id)

    def test_anonymous_caller_is_unauthorized(self, ctx):
        with pytest.raises(UnauthorizedError):
            projects.list_own(None)
        with pytest.raises(UnauthorizedError):
            projects.create(None, {'title': 'x'})


class TestValidation:
    """Payload cleaning and required fields"""

    def test_project_title_required(self, alice, ctx):
        with pytest.raises(ValidationError) as exc:
            projects.create(alice, {'description': 'no title'})
        assert exc.value.message == 'Title is required'

    def test_non_object_payload_rejected(self, alice, ctx):
        with pytest.raises(ValidationError):
            projects.create(alice, ['title'])

    def test_skill_required_fields(self, alice, ctx):
        with pytest.raises(ValidationError) as exc:
            skills.create(alice, {'name': 'Go'})
        assert exc.value.message == 'Name, category, and proficiency level are required'

    def test_skill_level_clamped_and_years_checked(self, alice, ctx):
        row = skills.create(alice, {'name': 'Go', 'category': 'Languages', 'proficiency_level': '9'})
        assert row.proficiency_level == 5

        with pytest.raises(ValidationError):
            skills.update(alice, row.id, {'years_of_experience': 'many'})
        with pytest.raises(ValidationError):
            skills.update(alice, row.id, {'years_of_experience': -1})

    def test_partial_update_cannot_blank_required_field(self, alice, ctx):
        row = projects.create(alice, {'title': 'Site'})

        with pytest.raises(ValidationError):
            projects.update(alice, row.id, {'title': '   '})

    def test_tags_normalized(self, alice, ctx):
        row = projects.create(alice, {'title': 'Site', 'tags': 'flask, sql, flask'})
        assert row.tags == ['flask', 'sql']

    def test_unsupported_platform(self, alice, ctx):
        with pytest.raises(ValidationError):
            social_links.create(alice, {'platform': 'myspace', 'url': 'https://myspace.com/a'})

    def test_integers_outside_column_range(self, alice, ctx):
        with pytest.raises(ValidationError) as exc:
            projects.create(alice, {'title': 'Site', 'display_order': 10 ** 20})
        assert exc.value.message == 'Invalid display order'
        assert projects.count_own(alice) == 0

        with pytest.raises(ValidationError):
            skills.create(alice, {'name': 'Go', 'category': 'Languages', 'proficiency_level': 3,
                                  'years_of_experience': 2 ** 31})
        with pytest.raises(ValidationError):
            skills.create(alice, {'name': 'Go', 'category': 'Languages',
                                  'proficiency_level': -(2 ** 40)})

        row = projects.create(alice, {'title': 'Edge', 'display_order': 2 ** 31 - 1})
        assert row.display_order == 2 ** 31 - 1

    @pytest.mark.parametrize('url', [
        'javascript:alert(1)',
        'JavaScript:alert(1)',
        'data:text/html,hi',
        'ftp://example.com/file',
        'https://',
        'example.com',
    ])
    def test_project_urls_must_be_http(self, alice, ctx, url):
        with pytest.raises(ValidationError):
            projects.create(alice, {'title': 'Site', 'github_url': url})

    def test_url_fields_accept_web_urls_and_blank(self, alice, ctx):
        row = projects.create(alice, {'title': 'Site', 'demo_url': ' https://demo.example.com/x ',
                                      'image_url': ''})

        assert row.demo_url == 'https://demo.example.com/x'
        assert row.image_url is None

    def test_social_links_allow_mail_and_phone(self, alice, ctx):
        mail = social_links.create(alice, {'platform': 'email', 'url': 'mailto:alice@example.com'})
        phone = social_links.create(alice, {'platform': 'phone', 'url': 'tel:+1234567890'})

        assert mail.url == 'mailto:alice@example.com'
        assert phone.url == 'tel:+1234567890'
        with pytest.raises(ValidationError):
            social_links.create(alice, {'platform': 'website', 'url': 'javascript:alert(1)'})


class TestOrdering:
    """List orderings"""

    def test_projects_featured_first_then_display_order(self, alice, ctx):
        projects.create(alice, {'title': 'B', 'display_order': 2})
        projects.create(alice, {'title': 'A', 'display_order': 1})
        projects.create(alice, {'title': 'Star', 'is_featured': True, 'display_order': 9})

        assert [p.title for p in projects.list_own(alice)] == ['Star', 'A', 'B']

    def test_skills_by_level_then_featured_then_name(self, alice, ctx):
        skills.create(alice, {'name': 'SQL', 'category': 'Databases', 'proficiency_level': 4})
        skills.create(alice, {'name': 'Go', 'category': 'Languages', 'proficiency_level': 4,
                              'is_featured': True})
        skills.create(alice, {'name': 'Rust', 'category': 'Languages', 'proficiency_level': 5})
        skills.create(alice, {'name': 'Bash', 'category': 'Tools', 'proficiency_level': 4})

        assert [s.name for s in skills.list_own(alice)] == ['Rust', 'Go', 'Bash', 'SQL']


class TestBlogPosts:
    """Slugs, reading time and publishing"""

    def test_duplicate_slug_is_conflict(self, alice, bob, ctx):
        blog_posts.create(alice, {'title': 'Hello', 'slug': 'hello', 'content': 'x'})

        with pytest.raises(ConflictError) as exc:
            blog_posts.create(bob, {'title': 'Hello', 'slug': 'hello', 'content': 'y'})
        assert 'already exists' in exc.value.message
        assert blog_posts.count_own(bob) == 0

    def test_slug_is_normalized(self, alice, ctx):
        row = blog_posts.create(alice, {'title': 'T', 'slug': 'Hello World!', 'content': 'x'})
        assert row.slug == 'hello-world'

    def test_reading_time_computed_on_write(self, alice, ctx):
        row = blog_posts.create(alice, {'title': 'T', 'slug': 't', 'content': 'word ' * 450,
                                        'reading_time': 99})
        assert row.reading_time == 3

        row = blog_posts.update(alice, row.id, {'content': 'short'})
        assert row.reading_time == 1

    def test_draft_has_no_publish_date(self, alice, ctx):
        row = blog_posts.create(alice, {'title': 'T', 'slug': 't', 'content': 'x',
                                        'published_at': '2024-01-01T00:00:00'})
        assert row.is_published is False
        assert row.published_at is None

    def test_publish_stamps_date_once(self, alice, ctx):
        row = blog_posts.create(alice, {'title': 'T', 'slug': 't', 'content': 'x'})

        published = blog_posts.update(alice, row.id, {'is_published': True})
        first_date = published.published_at
        assert first_date is not None

        again = blog_posts.update(alice, row.id, {'is_published': True, 'title': 'T2'})
        assert again.published_at == first_date
        assert again.title == 'T2'

    def test_unpublish_clears_date(self, alice, ctx):
        row = blog_posts.create(alice, {'title': 'T', 'slug': 't', 'content': 'x',
                                        'is_published': True})
        assert row.published_at is not None

        row = blog_posts.update(alice, row.id, {'is_published': False})
        assert row.published_at is None

    def test_clearing_date_on_published_post_keeps_a_date(self, alice, ctx):
        row = blog_posts.create(alice, {'title': 'T', 'slug': 't', 'content': 'x',
                                        'is_published': True, 'published_at': '2024-01-01T00:00:00'})

        row = blog_posts.update(alice, row.id, {'published_at': None})

        assert row.is_published is True
        assert row.published_at == datetime(2024, 1, 1)

    def test_new_date_on_published_post_is_stored(self, alice, ctx):
        row = blog_posts.create(alice, {'title': 'T', 'slug': 't', 'content': 'x',
                                        'is_published': True})

        row = blog_posts.update(alice, row.id, {'published_at': '2023-06-01T12:00:00Z'})

        assert row.published_at == datetime(2023, 6, 1, 12, 0)

    def test_date_on_draft_is_not_stored(self, alice, ctx):
        row = blog_posts.create(alice, {'title': 'T', 'slug': 't', 'content': 'x'})

        row = blog_posts.update(alice, row.id, {'published_at': '2024-01-01T00:00:00'})

        assert row.is_published is False
        assert row.published_at is None

    def test_publish_with_explicit_date(self, alice, ctx):
        row = blog_posts.create(alice, {'title': 'T', 'slug': 't', 'content': 'x'})

        row = blog_posts.update(alice, row.id, {'is_published': True,
                                                'published_at': '2024-03-01T00:00:00'})

        assert row.published_at == datetime(2024, 3, 1)

    def test_unpublish_ignores_supplied_date(self, alice, ctx):
        row = blog_posts.create(alice, {'title': 'T', 'slug': 't', 'content': 'x',
                                        'is_published': True})

        row = blog_posts.update(alice, row.id, {'is_published': False,
                                                'published_at': '2024-03-01T00:00:00'})

        assert row.published_at is None


class TestSocialLinks:
    """Defaults and reordering"""

    def test_defaults_on_create(self, alice, ctx):
        first = social_links.create(alice, {'platform': 'GitHub', 'url': 'https://github.com/alice'})
        second = social_links.create(alice, {'platform': 'website', 'url': 'https://alice.dev',
                                             'display_text': 'Home'})

        assert first.platform == 'github'
        assert first.display_text == 'GitHub'
        assert first.is_active is True
        assert (first.display_order, second.display_order) == (0, 1)
        assert second.display_text == 'Home'

    def test_move_up_swaps_with_neighbour(self, alice, ctx):
        a = social_links.create(alice, {'platform': 'github', 'url': 'https://a'}).id
        b = social_links.create(alice, {'platform': 'twitter', 'url': 'https://b'}).id
        c = social_links.create(alice, {'platform': 'website', 'url': 'https://c'}).id

        links = social_links.move(alice, c, 'up')

        assert [link.id for link in links] == [a, c, b]

    def test_move_past_the_edge_changes_nothing(self, alice, ctx):
        a = social_links.create(alice, {'platform': 'github', 'url': 'https://a'}).id
        b = social_links.create(alice, {'platform': 'twitter', 'url': 'https://b'}).id

        assert [link.id for link in social_links.move(alice, a, 'up')] == [a, b]
        assert [link.id for link in social_links.move(alice, b, 'down')] == [a, b]

    def test_move_with_equal_orders_uses_positions(self, alice, ctx):
        a = social_links.create(alice, {'platform': 'github', 'url': 'https://a', 'display_order': 0}).id
        b = social_links.create(alice, {'platform': 'twitter', 'url': 'https://b', 'display_order': 0}).id

        links = social_links.move(alice, b, 'up')

        assert [link.id for link in links] == [b, a]
        assert [link.display_order for link in links] == [0, 1]

    def test_move_rejects_bad_direction_and_foreign_link(self, alice, bob, ctx):
        link = social_links.create(alice, {'platform': 'github', 'url': 'https://a'})

        with pytest.raises(ValidationError):
            social_links.move(alice, link.id, 'sideways')
        with pytest.raises(NotFoundError):
            social_links.move(bob, link.id, 'up')

    def test_set_display_orders_is_all_or_nothing(self, alice, bob, ctx):
        mine = social_links.create(alice, {'platform': 'github', 'url': 'https://a'})
        theirs = social_links.create(bob, {'platform': 'github', 'url': 'https://b'})

        with pytest.raises(NotFoundError):
            social_links.set_display_orders(alice, {mine.id: 7, theirs.id: 8})

        assert social_links.get_own(alice, mine.id).display_order == 0
        assert social_links.get_own(bob, theirs.id).display_order == 0


class TestProfiles:
    """Own profile reads and updates"""

    def test_update_ignores_username(self, alice, ctx):
        profile = profiles.update(alice, {'display_name': 'Ally', 'username': 'mallory',
                                          'is_public': 'false'})

        assert profile.username == 'alice'
        assert profile.display_name == 'Ally'
        assert profile.is_public is False

    def test_profile_has_no_create_or_delete(self):
        assert not hasattr(profiles, 'create')
        assert not hasattr(profiles, 'delete')

    def test_avatar_must_be_web_url(self, alice, ctx):
        with pytest.raises(ValidationError):
            profiles.update(alice, {'avatar_url': 'data:image/png;base64,AAAA'})
