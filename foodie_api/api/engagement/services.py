# foodie_api/api/engagement/services.py
import logging
from dataclasses import asdict
from typing import Any, Callable, Dict, List

from firebase_admin import firestore

from foodie_api.core.exceptions import InvalidRequestError
from foodie_api.models.post import Comment
from foodie_api.utils.datetime_utils import DateTimeUtils


class EngagementService:
    """Likes, bookmarks and comments."""

    def __init__(self, repository, clock: Callable = DateTimeUtils.now):
        self.repository = repository
        self.clock = clock

    def toggle_like(self, user_id: str, post_id: str) -> bool:
        """
        Flip the user's like on a post and return the new state.
        ``likes``/``like_count`` on the post and ``liked_posts`` on the user change in one batch.
        """
        post = self.repository.require_post(post_id)
        self.repository.require_user(user_id)

        already_liked = user_id in (post.get('likes') or [])
        if already_liked:
            post_update = {'likes': firestore.ArrayRemove([user_id]), 'like_count': firestore.Increment(-1)}
            user_update = {'liked_posts': firestore.ArrayRemove([post_id])}
        else:
            post_update = {'likes': firestore.ArrayUnion([user_id]), 'like_count': firestore.Increment(1)}
            user_update = {'liked_posts': firestore.ArrayUnion([post_id])}

        with self.repository.related_writes() as batch:
            batch.update(self.repository.posts_ref.document(post_id), post_update)
            batch.update(self.repository.users_ref.document(user_id), user_update)

        return not already_liked

    def get_like_names(self, post_id: str) -> List[str]:
        """Display names of the users who liked the post; missing profiles are skipped."""
        post = self.repository.require_post(post_id)
        names = []
        for liker_id in post.get('likes') or []:
            user = self.repository.get_user(liker_id)
            if user is not None:
                names.append(user.get('first_name'))
        return names

    def toggle_bookmark(self, user_id: str, post_id: str) -> bool:
        """Flip ``post_id`` in the user's bookmarks and return the new state."""
        user = self.repository.require_user(user_id)
        bookmarked = post_id in (user.get('bookmarks') or [])

        if bookmarked:
            update = {'bookmarks': firestore.ArrayRemove([post_id])}
        else:
            # removing a stale bookmark is allowed, adding one for a missing post is not
            self.repository.require_post(post_id)
            update = {'bookmarks': firestore.ArrayUnion([post_id])}

        self.repository.users_ref.document(user_id).update(update)
        return not bookmarked

    def add_comment(self, user_id: str, post_id: str, body: str) -> Dict[str, Any]:
        if not body:
            raise InvalidRequestError("Comment body is required.")

        user = self.repository.require_user(user_id)
        self.repository.require_post(post_id)

        comment = asdict(Comment(body=body, author=user.get('first_name'), created_at=self.clock()))
        self.repository.posts_ref.document(post_id).update({'comments': firestore.ArrayUnion([comment])})
        logging.info(f"Comment added (post_id: {post_id}, uid: {user_id})")
        return comment
