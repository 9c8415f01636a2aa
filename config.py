import os
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '.env'))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(basedir, 'kindergarten.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    MAX_CONTENT_LENGTH = 50 * 1024 * 1024

    CLOUDINARY_CLOUD_NAME = os.environ.get('CLOUDINARY_CLOUD_NAME', '')
    CLOUDINARY_API_KEY = os.environ.get('CLOUDINARY_API_KEY', '')
    CLOUDINARY_API_SECRET = os.environ.get('CLOUDINARY_API_SECRET', '')
    CLOUDINARY_FOLDER = os.environ.get('CLOUDINARY_FOLDER', 'kindergarten/students')

    TWILIO_ACCOUNT_SID = os.environ.get('TWILIO_ACCOUNT_SID', '')
    TWILIO_AUTH_TOKEN = os.environ.get('TWILIO_AUTH_TOKEN', '')
    TWILIO_PHONE_NUMBER = os.environ.get('TWILIO_PHONE_NUMBER', '')

    HUGGINGFACE_API_KEY = os.environ.get('HUGGINGFACE_API_KEY', '')
    HUGGINGFACE_MODEL = os.environ.get('HUGGINGFACE_MODEL', 'microsoft/DialoGPT-medium')

    UPSTREAM_TIMEOUT = int(os.environ.get('UPSTREAM_TIMEOUT', '15'))

    VERIFICATION_CODE_TTL_MINUTES = int(os.environ.get('VERIFICATION_CODE_TTL_MINUTES', '10'))
    VERIFICATION_PURGE_INTERVAL_MINUTES = int(os.environ.get('VERIFICATION_PURGE_INTERVAL_MINUTES', '15'))
    SCHEDULER_ENABLED = os.environ.get('SCHEDULER_ENABLED', 'True').lower() == 'true'

    LOGIN_DISABLED = os.environ.get('LOGIN_DISABLED', 'False').lower() == 'true'


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SCHEDULER_ENABLED = False
    LOGIN_DISABLED = True
    CLOUDINARY_CLOUD_NAME = 'demo'
    CLOUDINARY_API_KEY = 'key'
    CLOUDINARY_API_SECRET = 'secret'
    TWILIO_ACCOUNT_SID = 'AC_test'
    TWILIO_AUTH_TOKEN = 'token'
    TWILIO_PHONE_NUMBER = '+15005550006'
    HUGGINGFACE_API_KEY = 'hf_test'
