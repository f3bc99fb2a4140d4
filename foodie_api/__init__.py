# foodie_api/__init__.py

# =====================================================================================
# 1. Environment
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. Imports
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
import firebase_admin
from firebase_admin import credentials, firestore

# - settings
from foodie_api.core.config import config_by_name
from foodie_api.core.exceptions import ServiceError
from foodie_api.core.security import register_jwt_handlers

# - blueprints
from foodie_api.api.auth.routes import auth_bp
from foodie_api.api.posts.routes import posts_bp
from foodie_api.api.engagement.routes import engagement_bp
from foodie_api.api.social.routes import social_bp
from foodie_api.api.users.routes import users_bp
from foodie_api.api.status.routes import status_bp

# - services
from foodie_api.services.firestore_service import FirestoreRepository
from foodie_api.services.firebase_auth_service import FirebaseAuthService
from foodie_api.api.auth.services import AuthService
from foodie_api.api.posts.services import PostService
from foodie_api.api.engagement.services import EngagementService
from foodie_api.api.social.services import SocialService
from foodie_api.api.users.services import UserService
from foodie_api.utils.datetime_utils import DateTimeUtils


def _init_firebase(app: Flask):
    if firebase_admin._apps:
        return
    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase credentials file not found: {cred_path}")
    firebase_admin.initialize_app(credentials.Certificate(cred_path))


def create_app(config_name=None, db=None, identity=None, clock=None):
    """
    Application factory.

    ``db`` (a Firestore client), ``identity`` (the identity provider) and ``clock`` can be
    injected; when omitted the Firebase Admin SDK is initialised from the configured
    credentials file.
    """
    # =====================================================================================
    # 3. Flask app and settings
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.config.get('JWT_SECRET_KEY'):
        raise ValueError("JWT_SECRET_KEY must be set in the environment or .env file.")

    # =====================================================================================
    # 4. Extensions and external services
    # =====================================================================================
    register_jwt_handlers(JWTManager(app))
    CORS(app, resources={r"/*": {"origins": app.config['CORS_ORIGINS']}})

    if db is None or identity is None:
        _init_firebase(app)
    if db is None:
        db = firestore.client()
    if identity is None:
        identity = FirebaseAuthService()
        identity.init_app(app)
    clock = clock or DateTimeUtils.now

    # =====================================================================================
    # 5. Service instances, stored on app.services
    # =====================================================================================
    repository = FirestoreRepository(db)

    app.services = {}
    app.services['repository'] = repository
    app.services['identity'] = identity
    app.services['posts'] = PostService(repository, page_size=app.config['POSTS_PAGE_SIZE'], clock=clock)
    app.services['auth'] = AuthService(repository, identity, post_service=app.services['posts'])
    app.services['engagement'] = EngagementService(repository, clock=clock)
    app.services['social'] = SocialService(repository)
    app.services['users'] = UserService(repository)

    # =====================================================================================
    # 6. Blueprints (routes live at the root path)
    # =====================================================================================
    app.register_blueprint(auth_bp)
    app.register_blueprint(posts_bp)
    app.register_blueprint(engagement_bp)
    app.register_blueprint(social_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(status_bp)

    # =====================================================================================
    # 7. Global error handlers
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    @app.errorhandler(ServiceError)
    def handle_service_error(err):
        if err.status_code >= 500:
            logging.error(f"Service error: {err}", exc_info=True)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return jsonify({"error_code": err.name.upper().replace(' ', '_'), "message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "An unexpected server error occurred."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. Logging
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
