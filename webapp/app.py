"""
Flask Application Factory

Status dashboard, login flow and recipient management for the menu monitor.
"""

import hmac
import time
import logging
from functools import wraps

from flask import Flask, render_template, request, redirect, url_for, flash, jsonify

from config.database import get_recipients, add_recipient, remove_recipient, toggle_recipient
from config.settings import parse_bool
from monitoring.selectors import MENU_SELECTORS
from utils import format_local_time

logger = logging.getLogger(__name__)


def _submitted_password():
    """Password from a form field, a JSON body or the X-UI-Password header."""
    if request.form.get('password'):
        return request.form['password']
    body = request.get_json(silent=True) or {}
    if body.get('password'):
        return body['password']
    return request.headers.get('X-UI-Password', '')


def create_app(loop, settings):
    """
    Create and configure the Flask application.

    Args:
        loop (ScrapeLoop): The running scrape loop
        settings (Settings): Application settings
    """
    app = Flask(__name__)
    app.secret_key = settings.ui_password
    started_at = time.time()

    def password_ok():
        return hmac.compare_digest(_submitted_password().encode('utf-8'), settings.ui_password.encode('utf-8'))

    def api_password_required(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not password_ok():
                return jsonify({'ok': False, 'error': 'Wrong password'}), 401
            return view(*args, **kwargs)
        return wrapped

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok', 'uptime': time.time() - started_at})

    @app.route('/')
    def dashboard():
        status = loop.status()
        try:
            recipients = get_recipients()
        except Exception as e:
            logger.error(f"Error loading recipients for dashboard: {e}")
            recipients = []

        tz = settings.display_timezone
        return render_template(
            'dashboard.html',
            status=status,
            recipients=recipients,
            last_scrape=format_local_time(status['lastScrapeTime'], tz),
            last_send=format_local_time(status['lastSendTime'], tz),
            currency=MENU_SELECTORS.currency,
        )

    @app.route('/auth/request-login', methods=['POST'])
    def request_login():
        """Ask the site to email a magic link to the account address."""
        if not password_ok():
            flash('Wrong password.', 'error')
            return redirect(url_for('dashboard'))

        try:
            loop.request_login()
            flash('Login email requested! Check your inbox for the magic link, then paste it below.', 'success')
        except Exception as e:
            logger.error(f"[Auth] Request login error: {e}")
            flash(f'Error requesting login email: {e}', 'error')
        return redirect(url_for('dashboard'))

    @app.route('/auth/magic-link', methods=['POST'])
    def magic_link():
        """Complete login with the link from the email."""
        if not password_ok():
            flash('Wrong password.', 'error')
            return redirect(url_for('dashboard'))

        link = (request.form.get('magic_link') or '').strip()
        if not link:
            flash('No magic link provided.', 'error')
            return redirect(url_for('dashboard'))

        try:
            loop.reauthenticate(link)
        except Exception as e:
            logger.error(f"[Auth] Magic link error: {e}")
            flash(f'Error processing magic link: {e}', 'error')
            return redirect(url_for('dashboard'))

        if loop.is_logged_in:
            flash('Successfully logged in! Monitoring will resume.', 'success')
        else:
            flash('Magic link processed but login unclear. Check the status below.', 'warning')
        return redirect(url_for('dashboard'))

    @app.route('/api/status')
    def api_status():
        data = loop.status()
        data['uptime'] = time.time() - started_at
        return jsonify(data)

    @app.route('/api/refresh', methods=['POST'])
    @api_password_required
    def api_refresh():
        try:
            loop.refresh()
            return jsonify({'ok': True, 'message': 'Page refreshed'})
        except Exception as e:
            logger.error(f"Manual refresh failed: {e}")
            return jsonify({'ok': False, 'error': str(e)})

    @app.route('/api/recipients', methods=['GET'])
    @api_password_required
    def list_recipients():
        return jsonify(get_recipients())

    @app.route('/api/recipients', methods=['POST'])
    @api_password_required
    def create_recipient():
        body = request.get_json(silent=True) or request.form
        name = (body.get('name') or '').strip()
        chat_id = (body.get('chatId') or '').strip()

        if not name:
            return jsonify({'ok': False, 'error': 'name is required'}), 400

        recipient = add_recipient(name, chat_id, active=parse_bool(body.get('active'), default=True))
        return jsonify(recipient), 201

    @app.route('/api/recipients/<int:recipient_id>', methods=['DELETE'])
    @api_password_required
    def delete_recipient(recipient_id):
        if not remove_recipient(recipient_id):
            return jsonify({'ok': False, 'error': 'Recipient not found'}), 404
        return jsonify({'ok': True})

    @app.route('/api/recipients/<int:recipient_id>/toggle', methods=['POST'])
    @api_password_required
    def toggle_recipient_route(recipient_id):
        recipient = toggle_recipient(recipient_id)
        if recipient is None:
            return jsonify({'ok': False, 'error': 'Recipient not found'}), 404
        return jsonify(recipient)

    return app
