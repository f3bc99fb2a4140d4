# foodie_api/api/auth/services.py
import logging
from dataclasses import asdict
from typing import Any, Dict

from firebase_admin import firestore

from foodie_api.core.exceptions import (
    CompensationError,
    InvalidRequestError,
    NotFoundError,
    UpstreamError,
)
from foodie_api.core.security import PASSWORD_RULE_MESSAGE, TOKEN_VERSION_CLAIM, password_is_valid
from foodie_api.models.user import User
from foodie_api.utils.datetime_utils import DateTimeUtils


class AuthService:
    """
    Account lifecycle: registration, login, password change and account deletion.

    The identity provider owns credentials; the 'users' collection owns the profile.
    Every method keeps the two in step.
    """

    def __init__(self, repository, identity, post_service):
        self.repository = repository
        self.identity = identity
        self.post_service = post_service

    def register(self, email: str, password: str, first_name: str) -> Dict[str, Any]:
        """Create the identity, then the profile. A failed profile write removes the identity again."""
        if not password_is_valid(password):
            raise InvalidRequestError(PASSWORD_RULE_MESSAGE)
        if not first_name:
            raise InvalidRequestError("First name is required.")

        user_id = self.identity.create_account(email, password)
        user = User(uid=user_id, email=email, first_name=first_name)

        try:
            self.repository.users_ref.document(user_id).set(asdict(user))
        except Exception as e:
            logging.error(f"Profile creation failed, rolling back identity (uid: {user_id}): {e}", exc_info=True)
            try:
                self.identity.delete_account(user_id)
            except Exception as cleanup_error:
                logging.critical(f"Rollback of identity failed, orphaned credential left (uid: {user_id}): {cleanup_error}")
                raise CompensationError(
                    f"Profile creation failed and the account could not be removed: {cleanup_error}"
                ) from cleanup_error
            raise UpstreamError(f"Profile creation failed: {e}") from e

        logging.info(f"User registered (uid: {user_id})")
        return asdict(user)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        if not password_is_valid(password):
            raise InvalidRequestError(PASSWORD_RULE_MESSAGE)

        user_id = self.identity.authenticate(email, password)
        user = self.repository.get_user(user_id)
        if user is None:
            # credential without profile
            logging.error(f"Authenticated user has no profile document (uid: {user_id})")
            raise NotFoundError("User details not found in the database.")
        return user

    def change_password(self, user_id: str, new_password: str) -> None:
        """Set the new password and bump ``token_version`` so tokens issued before the change stop working."""
        if not new_password:
            raise InvalidRequestError("New password is required.")
        if not password_is_valid(new_password):
            raise InvalidRequestError(PASSWORD_RULE_MESSAGE)
        self.repository.require_user(user_id)
        self.identity.set_password(user_id, new_password)
        self.repository.users_ref.document(user_id).update({'token_version': firestore.Increment(1)})
        logging.info(f"Password changed, earlier tokens revoked (uid: {user_id})")

    def is_token_revoked(self, jwt_payload: Dict[str, Any]) -> bool:
        """
        Revoked when the account was deleted, or when the token's version no longer matches the
        profile's ``token_version``. A missing profile without a revocation record means the
        deletion stopped half way; the token stays usable so the deletion can be retried.
        """
        user_id = jwt_payload.get('sub')
        if self.repository.revoked_tokens_ref.document(user_id).get().exists:
            return True
        user = self.repository.get_user(user_id)
        if user is None:
            return False
        return jwt_payload.get(TOKEN_VERSION_CLAIM, 0) != user.get('token_version', 0)

    def delete_account(self, user_id: str) -> None:
        """
        Delete every post listed on the profile (with their cascades), the profile, then the
        credential, and finally revoke the user's tokens. Each step can be retried: when the
        profile is already gone the deletion resumes at the credential.
        """
        user = self.repository.get_user(user_id)
        if user is not None:
            for post_id in list(user.get('posts') or []):
                self.post_service.delete_post(user_id, post_id)
            self.repository.users_ref.document(user_id).delete()
        else:
            logging.warning(f"Profile already deleted, resuming at credential (uid: {user_id})")

        self.identity.delete_account(user_id)
        self.repository.revoked_tokens_ref.document(user_id).set({
            'revoked_at': DateTimeUtils.now(),
            'reason': 'account_deleted'
        })
        logging.info(f"Account deleted (uid: {user_id})")
