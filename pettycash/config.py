"""Configuration classes for Petty Cash Manager"""
import os

basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'petty-cash-secret')
    # relative sqlite paths resolve inside the app's instance folder
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///pettycash.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JSON API: forms are validated without CSRF tokens
    WTF_CSRF_ENABLED = False

    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(basedir, 'uploads'))
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    VOUCHER_NUMBER_PREFIX = os.environ.get('VOUCHER_NUMBER_PREFIX', 'PCV')
    VOUCHER_NUMBER_ATTEMPTS = int(os.environ.get('VOUCHER_NUMBER_ATTEMPTS', 5))
    AUDIT_RETENTION_DAYS = int(os.environ.get('AUDIT_RETENTION_DAYS', 365))

    NUMBER_LOCALE = os.environ.get('NUMBER_LOCALE', 'en_US')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    UPLOAD_FOLDER = os.path.join(basedir, 'instance', 'test-uploads')
    LOG_LEVEL = 'WARNING'


class ProductionConfig(Config):
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = os.environ.get('SESSION_COOKIE_SECURE', '0') == '1'


config_by_name = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}
