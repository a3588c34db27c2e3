"""
Dashboard Routes - Owner management pages
Every write goes through the access layer with the signed-in account as owner.
"""

from flask import render_template, redirect, url_for, request, flash, current_app
from utils.access import (
    profiles, projects as project_access, skills as skill_access,
    blog_posts as blog_access, social_links as social_access,
    SKILL_CATEGORIES, PROFICIENCY_LEVELS, PLATFORMS
)
from utils.decorators import login_required, current_owner_id
from utils.errors import AccessError, NotFoundError
from utils.helpers import generate_slug
from . import dashboard_bp


def form_payload(bool_fields=()):
    """Form fields as an access-layer payload; unchecked boxes become False"""
    payload = request.form.to_dict()
    for field in bool_fields:
        payload[field] = field in request.form
    return payload


@dashboard_bp.route('/')
@login_required
def index():
    """Main dashboard page"""
    owner_id = current_owner_id()
    profile = profiles.get(owner_id)

    stats = {
        'projects': project_access.count_own(owner_id),
        'skills': skill_access.count_own(owner_id),
        'posts': blog_access.count_own(owner_id),
        'published_posts': blog_access.owned(owner_id).filter_by(is_published=True).count(),
        'social_links': social_access.count_own(owner_id),
    }
    recent_posts = blog_access.list_own(owner_id)[:5]

    current_app.logger.debug(f"Dashboard stats for {owner_id}: {stats}")
    return render_template('dashboard/index.html', profile=profile, stats=stats,
                           recent_posts=recent_posts)


@dashboard_bp.route('/profile', methods=['GET', 'POST'])
@login_required
def profile():
    """Edit display name, bio, avatar and visibility"""
    owner_id = current_owner_id()

    if request.method == 'POST':
        try:
            profiles.update(owner_id, form_payload(bool_fields=('is_public',)))
        except AccessError as e:
            flash(e.message, 'error')
            return render_template('dashboard/profile.html', profile=profiles.get(owner_id)), e.status
        flash('Profile updated successfully', 'success')
        return redirect(url_for('dashboard.profile'))

    return render_template('dashboard/profile.html', profile=profiles.get(owner_id))


# -- Projects -----------------------------------------------------------------

@dashboard_bp.route('/projects')
@login_required
def projects():
    """List all projects"""
    items = project_access.list_own(current_owner_id())
    return render_template('dashboard/projects.html', projects=items)


@dashboard_bp.route('/projects/new', methods=['GET', 'POST'])
@login_required
def add_project():
    """Add new project"""
    if request.method == 'POST':
        payload = form_payload(bool_fields=('is_featured',))
        try:
            project_access.create(current_owner_id(), payload)
        except AccessError as e:
            flash(e.message, 'error')
            return render_template('dashboard/project_form.html', project=payload), e.status
        flash('Project added successfully', 'success')
        return redirect(url_for('dashboard.projects'))

    return render_template('dashboard/project_form.html', project=None)


@dashboard_bp.route('/projects/<project_id>/edit', methods=['GET', 'POST'])
@login_required
def edit_project(project_id):
    """Edit existing project"""
    owner_id = current_owner_id()
    try:
        project = project_access.get_own(owner_id, project_id)
    except NotFoundError:
        flash('Project not found', 'error')
        return redirect(url_for('dashboard.projects'))

    if request.method == 'POST':
        payload = form_payload(bool_fields=('is_featured',))
        try:
            project_access.update(owner_id, project_id, payload)
        except AccessError as e:
            flash(e.message, 'error')
            payload['id'] = project_id
            return render_template('dashboard/project_form.html', project=payload), e.status
        flash('Project updated successfully', 'success')
        return redirect(url_for('dashboard.projects'))

    return render_template('dashboard/project_form.html', project=project_access.serialize(project))


@dashboard_bp.route('/projects/<project_id>/delete', methods=['POST'])
@login_required
def delete_project(project_id):
    """Delete project"""
    if project_access.delete(current_owner_id(), project_id):
        flash('Project deleted successfully', 'success')
    else:
        flash('Project not found', 'error')
    return redirect(url_for('dashboard.projects'))


# -- Skills -------------------------------------------------------------------

def _render_skills(status=200, editing=None):
    items = skill_access.list_own(current_owner_id())
    return render_template('dashboard/skills.html', skills=items, editing=editing,
                           categories=SKILL_CATEGORIES, levels=PROFICIENCY_LEVELS), status


@dashboard_bp.route('/skills', methods=['GET', 'POST'])
@login_required
def skills():
    """List skills and add a new one"""
    if request.method == 'POST':
        try:
            skill_access.create(current_owner_id(), form_payload(bool_fields=('is_featured',)))
        except AccessError as e:
            flash(e.message, 'error')
            return _render_skills(e.status)
        flash('Skill added successfully', 'success')
        return redirect(url_for('dashboard.skills'))

    return _render_skills()


@dashboard_bp.route('/skills/<skill_id>', methods=['GET', 'POST'])
@login_required
def edit_skill(skill_id):
    """Edit one skill inline"""
    owner_id = current_owner_id()
    if request.method == 'POST':
        try:
            skill_access.update(owner_id, skill_id, form_payload(bool_fields=('is_featured',)))
        except AccessError as e:
            flash(e.message, 'error')
            return redirect(url_for('dashboard.skills'))
        flash('Skill updated successfully', 'success')
        return redirect(url_for('dashboard.skills'))

    try:
        editing = skill_access.get_own(owner_id, skill_id)
    except NotFoundError:
        flash('Skill not found', 'error')
        return redirect(url_for('dashboard.skills'))
    return _render_skills(editing=editing)


@dashboard_bp.route('/skills/<skill_id>/delete', methods=['POST'])
@login_required
def delete_skill(skill_id):
    """Delete skill"""
    if skill_access.delete(current_owner_id(), skill_id):
        flash('Skill deleted successfully', 'success')
    else:
        flash('Skill not found', 'error')
    return redirect(url_for('dashboard.skills'))


# -- Blog ---------------------------------------------------------------------

@dashboard_bp.route('/blog')
@login_required
def blog():
    """List blog posts, newest first"""
    posts = blog_access.list_own(current_owner_id())
    return render_template('dashboard/blog.html', posts=posts)


@dashboard_bp.route('/blog/new', methods=['GET', 'POST'])
@login_required
def add_post():
    """Write a new post; a blank slug is generated from the title"""
    if request.method == 'POST':
        payload = form_payload(bool_fields=('is_published',))
        if not payload.get('slug', '').strip() and payload.get('title', '').strip():
            payload['slug'] = generate_slug(payload['title'])
        try:
            blog_access.create(current_owner_id(), payload)
        except AccessError as e:
            flash(e.message, 'error')
            return render_template('dashboard/blog_form.html', post=payload), e.status
        flash('Blog post saved successfully', 'success')
        return redirect(url_for('dashboard.blog'))

    return render_template('dashboard/blog_form.html', post=None)


@dashboard_bp.route('/blog/<post_id>/edit', methods=['GET', 'POST'])
@login_required
def edit_post(post_id):
    """Edit a post; publishing stamps the publish date"""
    owner_id = current_owner_id()
    try:
        post = blog_access.get_own(owner_id, post_id)
    except NotFoundError:
        flash('Blog post not found', 'error')
        return redirect(url_for('dashboard.blog'))

    if request.method == 'POST':
        payload = form_payload(bool_fields=('is_published',))
        if not payload.get('slug', '').strip():
            payload.pop('slug', None)
        try:
            blog_access.update(owner_id, post_id, payload)
        except AccessError as e:
            flash(e.message, 'error')
            payload['id'] = post_id
            return render_template('dashboard/blog_form.html', post=payload), e.status
        flash('Blog post updated successfully', 'success')
        return redirect(url_for('dashboard.blog'))

    return render_template('dashboard/blog_form.html', post=blog_access.serialize(post))


@dashboard_bp.route('/blog/<post_id>/delete', methods=['POST'])
@login_required
def delete_post(post_id):
    """Delete blog post"""
    if blog_access.delete(current_owner_id(), post_id):
        flash('Blog post deleted successfully', 'success')
    else:
        flash('Blog post not found', 'error')
    return redirect(url_for('dashboard.blog'))


# -- Social links -------------------------------------------------------------

def _render_social(status=200, editing=None):
    links = social_access.list_own(current_owner_id())
    return render_template('dashboard/social.html', links=links, editing=editing,
                           platforms=PLATFORMS), status


@dashboard_bp.route('/social', methods=['GET', 'POST'])
@login_required
def social():
    """List social links and add a new one"""
    if request.method == 'POST':
        try:
            social_access.create(current_owner_id(), form_payload(bool_fields=('is_active',)))
        except AccessError as e:
            flash(e.message, 'error')
            return _render_social(e.status)
        flash('Social link added successfully', 'success')
        return redirect(url_for('dashboard.social'))

    return _render_social()


@dashboard_bp.route('/social/<link_id>', methods=['GET', 'POST'])
@login_required
def edit_social(link_id):
    """Edit one social link inline"""
    owner_id = current_owner_id()
    if request.method == 'POST':
        try:
            social_access.update(owner_id, link_id, form_payload(bool_fields=('is_active',)))
        except AccessError as e:
            flash(e.message, 'error')
            return redirect(url_for('dashboard.social'))
        flash('Social link updated successfully', 'success')
        return redirect(url_for('dashboard.social'))

    try:
        editing = social_access.get_own(owner_id, link_id)
    except NotFoundError:
        flash('Social link not found', 'error')
        return redirect(url_for('dashboard.social'))
    return _render_social(editing=editing)


@dashboard_bp.route('/social/<link_id>/delete', methods=['POST'])
@login_required
def delete_social(link_id):
    """Delete social link"""
    if social_access.delete(current_owner_id(), link_id):
        flash('Social link deleted successfully', 'success')
    else:
        flash('Social link not found', 'error')
    return redirect(url_for('dashboard.social'))


@dashboard_bp.route('/social/<link_id>/move/<direction>', methods=['POST'])
@login_required
def move_social(link_id, direction):
    """Swap a link with its neighbour in one transaction"""
    try:
        social_access.move(current_owner_id(), link_id, direction)
    except AccessError as e:
        flash(f'Failed to reorder links: {e.message}', 'error')
    return redirect(url_for('dashboard.social'))
