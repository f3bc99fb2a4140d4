# foodie_api/api/social/services.py
import logging

from firebase_admin import firestore

from foodie_api.core.exceptions import InvalidRequestError


class SocialService:
    """Follow graph kept as ``following``/``followers`` arrays on both user documents."""

    def __init__(self, repository):
        self.repository = repository

    def toggle_follow(self, user_id: str, target_id: str) -> bool:
        """Follow or unfollow ``target_id`` and return whether the user now follows them."""
        if user_id == target_id:
            raise InvalidRequestError("You cannot follow/unfollow yourself.")

        user = self.repository.require_user(user_id)
        self.repository.require_user(target_id)

        is_following = target_id in (user.get('following') or [])
        if is_following:
            transform = firestore.ArrayRemove
        else:
            transform = firestore.ArrayUnion

        with self.repository.related_writes() as batch:
            batch.update(self.repository.users_ref.document(user_id), {'following': transform([target_id])})
            batch.update(self.repository.users_ref.document(target_id), {'followers': transform([user_id])})

        logging.info(f"{'Unfollowed' if is_following else 'Followed'}: {user_id} -> {target_id}")
        return not is_following
