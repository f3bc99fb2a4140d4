# foodie_api/core/config.py

import os
from datetime import timedelta


class Config:
    """Settings shared by every environment."""
    # Signs the access/refresh tokens handed out after register and login.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=14)

    # Web API key of the Firebase project, used for email/password sign-in over REST.
    FIREBASE_WEB_API_KEY = os.getenv('FIREBASE_WEB_API_KEY')
    FIREBASE_AUTH_TIMEOUT = int(os.getenv('FIREBASE_AUTH_TIMEOUT', 10))

    POSTS_PAGE_SIZE = 5
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')


class DevelopmentConfig(Config):
    """Local development: debug on, dev Firebase project."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')


class TestingConfig(Config):
    """Test runs. The document store and identity provider are injected by the tests."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'testing-secret-key-with-enough-length')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')


class ProductionConfig(Config):
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('PROD_FIREBASE_CREDENTIALS_PATH')


# create_app picks the class by FLASK_ENV
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
