from flask import Flask, request
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from config import Config
import logging

db = SQLAlchemy()
login_manager = LoginManager()

logger = logging.getLogger(__name__)

def setup_request_logging(app):
    @app.before_request
    def log_request():
        logger.info(f"{request.method} {request.path}")

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)
    login_manager.init_app(app)

    from kindergarten.models.account import Account
    from kindergarten.errors import UnauthorizedError, register_error_handlers

    @login_manager.user_loader
    def load_user(account_id):
        return db.session.get(Account, account_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        raise UnauthorizedError()

    from kindergarten.routes import account, classroom, news, semester, student, teacher, twilio, user_account

    app.register_blueprint(account.bp)
    app.register_blueprint(classroom.bp)
    app.register_blueprint(news.bp)
    app.register_blueprint(semester.bp)
    app.register_blueprint(student.bp)
    app.register_blueprint(teacher.bp)
    app.register_blueprint(twilio.bp)
    app.register_blueprint(user_account.bp)

    register_error_handlers(app)
    setup_request_logging(app)

    with app.app_context():
        db.create_all()

    if app.config.get('SCHEDULER_ENABLED'):
        from kindergarten.utils.scheduler import init_scheduler
        init_scheduler(app)

    return app
