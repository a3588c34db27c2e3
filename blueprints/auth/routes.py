"""
Auth Routes - Sign in, sign up and sign out
"""

from flask import render_template, redirect, url_for, request, flash
from flask_login import login_user, logout_user
from utils.decorators import current_owner_id
from utils.errors import AccessError
from utils.security import authenticate, register_account, log_auth_event
from . import auth_bp


def _safe_next(target):
    """Only follow local redirects"""
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return url_for('dashboard.index')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Sign in with email and password"""
    if current_owner_id():
        return redirect(url_for('dashboard.index'))

    if request.method == 'POST':
        email = request.form.get('email', '')
        password = request.form.get('password', '')
        user = authenticate(email, password)

        if user:
            login_user(user, remember=bool(request.form.get('remember')))
            log_auth_event('login', f"Account: {user.id}")
            flash('Welcome back!', 'success')
            return redirect(_safe_next(request.args.get('next')))

        log_auth_event('failed_login', f"Email: {email.strip().lower()}")
        flash('Invalid credentials. Please try again.', 'error')

    return render_template('auth/login.html')


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """Create an account together with its public profile"""
    if current_owner_id():
        return redirect(url_for('dashboard.index'))

    if request.method == 'POST':
        try:
            user = register_account(
                request.form.get('email'),
                request.form.get('password'),
                request.form.get('username'),
                request.form.get('display_name'),
            )
        except AccessError as e:
            flash(e.message, 'error')
            return render_template('auth/register.html', form=request.form), e.status

        login_user(user)
        log_auth_event('register', f"Account: {user.id}")
        flash('Your portfolio is ready. Start by completing your profile.', 'success')
        return redirect(url_for('dashboard.profile'))

    return render_template('auth/register.html', form={})


@auth_bp.route('/logout')
def logout():
    """Sign out current account"""
    if current_owner_id():
        log_auth_event('logout')
        logout_user()
        flash('Logged out successfully', 'success')
    return redirect(url_for('auth.login'))


@auth_bp.route('/error')
def error():
    """Authentication problem page"""
    message = request.args.get('message', 'Something went wrong while signing you in.')
    return render_template('auth/error.html', message=message)
