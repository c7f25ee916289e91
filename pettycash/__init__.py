"""Flask app factory and initialization"""
import logging
import os
import time

import click
from flask import Flask, g, request
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from dotenv import load_dotenv

load_dotenv()

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()


def create_app(config_name='development'):
    """Create and configure the Flask application"""
    from pettycash.config import config_by_name

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    configure_logging(app)
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # User loader for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        from pettycash.models.user import User
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        from flask import jsonify
        return jsonify({'message': 'Unauthorized', 'code': 'unauthorized'}), 401

    # Import models to make them available to migrations
    with app.app_context():
        from pettycash.models import (
            User, ChartOfAccount, PettyCashFund, Voucher, VoucherItem,
            ReplenishmentRequest, AccountBudget, AuditLog, VoucherAttachment
        )

    # Register blueprints
    from pettycash.routes.auth import auth_bp
    from pettycash.routes.users import users_bp
    from pettycash.routes.voucher import voucher_bp
    from pettycash.routes.account import account_bp
    from pettycash.routes.fund import fund_bp
    from pettycash.routes.replenishment import replenishment_bp
    from pettycash.routes.budget import budget_bp
    from pettycash.routes.audit import audit_bp
    from pettycash.routes.attachment import attachment_bp
    from pettycash.routes.report import report_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(voucher_bp)
    app.register_blueprint(account_bp)
    app.register_blueprint(fund_bp)
    app.register_blueprint(replenishment_bp)
    app.register_blueprint(budget_bp)
    app.register_blueprint(audit_bp)
    app.register_blueprint(attachment_bp)
    app.register_blueprint(report_bp)

    register_error_handlers(app)
    register_request_logging(app)

    # Register shell commands
    register_shell_commands(app)

    return app


def configure_logging(app):
    """Attach a timestamped handler to the app and package loggers"""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    package_logger = logging.getLogger('pettycash')
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        ))
        package_logger.addHandler(handler)
    package_logger.setLevel(level)
    app.logger.setLevel(level)


def register_error_handlers(app):
    """Render domain errors as JSON responses"""
    from flask import jsonify
    from pettycash.exceptions import PettyCashError

    @app.errorhandler(PettyCashError)
    def handle_petty_cash_error(error):
        if error.status_code >= 500:
            app.logger.error('%s: %s', error.code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'message': 'Not found', 'code': 'not_found'}), 404

    @app.errorhandler(413)
    def handle_too_large(error):
        return jsonify({'message': 'File exceeds the upload size limit', 'code': 'file_too_large'}), 413


def register_request_logging(app):
    """Log one line per API request with its status and duration"""

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        if request.path.startswith('/api'):
            started = g.get('request_started')
            duration = (time.perf_counter() - started) * 1000 if started else 0
            app.logger.info('%s %s %s in %dms', request.method, request.path,
                            response.status_code, duration)
        return response


def register_shell_commands(app):
    """Register Flask CLI commands"""
    from pettycash.models.user import User, UserRole

    @app.cli.command('init-db')
    def init_db():
        """Create all tables"""
        db.create_all()
        print('Database initialized!')

    @app.cli.command('create-user')
    @click.argument('username')
    @click.password_option()
    @click.option('--role', type=click.Choice([r.value for r in UserRole]), default=UserRole.PREPARER.value)
    @click.option('--first-name', default=None)
    @click.option('--last-name', default=None)
    def create_user(username, password, role, first_name, last_name):
        """Create a user with the given role"""
        if User.query.filter_by(username=username).first():
            print(f'User {username} already exists, skipping creation.')
            return
        user = User(username=username, first_name=first_name, last_name=last_name,
                    role=UserRole(role))
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        print(f'Created {role} user: {username} (id={user.id})')

    @app.cli.command('cleanup-audit-logs')
    def cleanup_audit_logs():
        """Delete audit log entries past the retention window"""
        from pettycash.services.audit import cleanup_audit_logs as cleanup
        removed = cleanup()
        print(f'Removed {removed} audit log entries.')
