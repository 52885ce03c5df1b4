import json
import logging
import os

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials

from core import config  # noqa: F401  (loads .env before the lookups below)

logger = logging.getLogger(__name__)


def initialize_firebase():
    """Initialize Firebase Admin SDK with production-ready credential handling"""

    # Method 1: Service Account Key from Environment Variable (Recommended for production)
    service_account_key_json = os.getenv("FIREBASE_SERVICE_ACCOUNT_KEY")
    if service_account_key_json:
        try:
            service_account_info = json.loads(service_account_key_json)
            cred = credentials.Certificate(service_account_info)
            app = firebase_admin.initialize_app(cred)
            logger.info("Firebase Admin SDK initialized with service account key from environment.")
            return app
        except (json.JSONDecodeError, ValueError) as e:
            logger.error("Error parsing FIREBASE_SERVICE_ACCOUNT_KEY: %s", e)

    # Method 2: Service Account Key File (for local development only)
    service_account_key_path = os.getenv("FIREBASE_SERVICE_ACCOUNT_KEY_PATH")
    if service_account_key_path and os.path.exists(service_account_key_path):
        cred = credentials.Certificate(service_account_key_path)
        app = firebase_admin.initialize_app(cred)
        logger.info("Firebase Admin SDK initialized with service account key file.")
        return app

    # Method 3: GOOGLE_APPLICATION_CREDENTIALS / Application Default Credentials
    app = firebase_admin.initialize_app()
    logger.info("Firebase Admin SDK initialized with application default credentials.")
    return app


def get_firebase_app():
    # Initialized on first token verification so importing the app never
    # needs credentials.
    try:
        return firebase_admin.get_app()
    except ValueError:
        return initialize_firebase()


def verify_id_token(token: str) -> dict:
    """Verify a Firebase ID token and return its decoded claims."""
    return firebase_auth.verify_id_token(token, app=get_firebase_app())
