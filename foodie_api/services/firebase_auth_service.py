# foodie_api/services/firebase_auth_service.py
import logging
from typing import Optional

import requests
from flask import Flask
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from foodie_api.core.exceptions import IdentityProviderError, NotFoundError


class FirebaseAuthService:
    """
    Email/password identities kept in Firebase Authentication.

    Account management goes through the Admin SDK. Checking a password is not
    something the Admin SDK can do, so ``authenticate`` calls the Identity Toolkit
    REST endpoint with the project's web API key.
    """
    _sign_in_url = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

    def __init__(self):
        self.api_key: Optional[str] = None
        self.timeout = 10

    def init_app(self, app: Flask):
        self.api_key = app.config.get('FIREBASE_WEB_API_KEY')
        self.timeout = app.config.get('FIREBASE_AUTH_TIMEOUT', 10)
        if not self.api_key:
            logging.warning("FIREBASE_WEB_API_KEY is not set; password sign-in will fail.")

    def create_account(self, email: str, password: str) -> str:
        """Create the identity and return its uid."""
        try:
            user_record = firebase_auth.create_user(email=email, password=password)
        except firebase_auth.EmailAlreadyExistsError as e:
            raise IdentityProviderError("The email address is already in use.", reason="EMAIL_EXISTS") from e
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise IdentityProviderError(f"Could not create account: {e}") from e
        logging.info(f"Firebase Auth user created (uid: {user_record.uid})")
        return user_record.uid

    def authenticate(self, email: str, password: str) -> str:
        """Check the credentials and return the uid they belong to."""
        if not self.api_key:
            raise IdentityProviderError("FIREBASE_WEB_API_KEY is not configured.")

        try:
            response = requests.post(
                self._sign_in_url,
                params={"key": self.api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise IdentityProviderError(f"Identity provider unreachable: {e}") from e

        if response.status_code != 200:
            try:
                reason = response.json().get("error", {}).get("message")
            except ValueError:
                reason = None
            raise IdentityProviderError(f"Sign-in rejected: {reason or response.status_code}", reason=reason)

        return response.json()["localId"]

    def delete_account(self, user_id: str) -> None:
        try:
            firebase_auth.delete_user(user_id)
            logging.info(f"Firebase Auth user deleted (uid: {user_id})")
        except firebase_auth.UserNotFoundError:
            logging.warning(f"Firebase Auth user was already deleted (uid: {user_id})")
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logging.error(f"Firebase Auth user deletion failed (uid: {user_id}): {e}", exc_info=True)
            raise IdentityProviderError(f"Could not delete account: {e}") from e

    def set_password(self, user_id: str, new_password: str) -> None:
        try:
            firebase_auth.update_user(user_id, password=new_password)
        except firebase_auth.UserNotFoundError as e:
            raise NotFoundError("User not found.") from e
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise IdentityProviderError(f"Could not change password: {e}") from e
