# foodie_api/services/firestore_service.py
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from firebase_admin import firestore

from foodie_api.core.exceptions import NotFoundError
from foodie_api.utils.datetime_utils import DateTimeUtils


class FirestoreRepository:
    """
    Owns the 'users', 'posts' and 'revoked_tokens' collection handles.

    Services receive one instance from the app factory instead of opening their own
    client, so the store can be swapped out in tests.
    """

    def __init__(self, db=None):
        self.db = db if db is not None else firestore.client()
        self.users_ref = self.db.collection('users')
        self.posts_ref = self.db.collection('posts')
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')

    # --- single document reads ---
    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        if not user_id:
            return None
        snapshot = self.users_ref.document(user_id).get()
        if not snapshot.exists:
            return None
        return DateTimeUtils.from_firestore(snapshot.to_dict() or {})

    def require_user(self, user_id: str) -> Dict[str, Any]:
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    def get_post(self, post_id: str) -> Optional[Dict[str, Any]]:
        if not post_id:
            return None
        snapshot = self.posts_ref.document(post_id).get()
        if not snapshot.exists:
            return None
        post_data = DateTimeUtils.from_firestore(snapshot.to_dict() or {})
        post_data.setdefault('post_id', snapshot.id)
        return post_data

    def require_post(self, post_id: str) -> Dict[str, Any]:
        post = self.get_post(post_id)
        if post is None:
            raise NotFoundError("Post not found.")
        return post

    # --- multi document writes ---
    @contextmanager
    def related_writes(self) -> Iterator[Any]:
        """
        Collect writes that must land together into one WriteBatch.

        The batch is committed when the block exits normally and dropped when it
        raises, so either every write is applied or none is.
        """
        batch = self.db.batch()
        yield batch
        try:
            batch.commit()
        except Exception as e:
            logging.error(f"Batch commit failed: {e}", exc_info=True)
            raise

    def prune_dangling_references(self, user_id: str, field: str) -> List[Dict[str, Any]]:
        """
        Resolve the post ids stored in ``users/{user_id}.{field}``.

        Ids whose post no longer exists are removed from the user's array in one
        follow-up update; the posts that do exist are returned in stored order.
        """
        user = self.require_user(user_id)
        post_ids = user.get(field) or []

        existing_posts = []
        stale_ids = []
        for post_id in post_ids:
            post = self.get_post(post_id)
            if post is None:
                stale_ids.append(post_id)
            else:
                existing_posts.append(post)

        if stale_ids:
            self.users_ref.document(user_id).update({field: firestore.ArrayRemove(stale_ids)})
            logging.info(f"Pruned {len(stale_ids)} stale id(s) from {field} (user_id: {user_id})")

        return existing_posts
