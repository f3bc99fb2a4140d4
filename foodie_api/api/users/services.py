# foodie_api/api/users/services.py
import logging
from typing import Any, Dict, List, Optional

from foodie_api.core.exceptions import InvalidRequestError


class UserService:
    """
    Profile reads and the per-user post listings.

    The listings go through ``repository.prune_dangling_references`` so ids of posts
    deleted by someone else's cascade disappear the next time the list is read.
    """

    def __init__(self, repository):
        self.repository = repository

    def get_user_profile(self, user_id: str, requester_id: Optional[str]) -> Dict[str, Any]:
        """
        The owner gets the whole document; anyone else gets the public view
        with follower/following counts instead of the id lists.
        """
        user = self.repository.require_user(user_id)
        if user_id == requester_id:
            return user

        return {
            'uid': user.get('uid', user_id),
            'first_name': user.get('first_name'),
            'email': user.get('email'),
            'followers_count': len(user.get('followers') or []),
            'following_count': len(user.get('following') or []),
            'posts': user.get('posts') or [],
        }

    def get_user_posts(self, user_id: str) -> List[Dict[str, Any]]:
        return self.repository.prune_dangling_references(user_id, 'posts')

    def get_liked_posts(self, user_id: str) -> List[Dict[str, Any]]:
        return self.repository.prune_dangling_references(user_id, 'liked_posts')

    def get_bookmarked_posts(self, user_id: str) -> List[Dict[str, Any]]:
        return self.repository.prune_dangling_references(user_id, 'bookmarks')

    def get_user_statistics(self, user_id: str) -> Dict[str, int]:
        user = self.repository.require_user(user_id)
        return {
            'following_count': len(user.get('following') or []),
            'followers_count': len(user.get('followers') or []),
            'liked_posts_count': len(user.get('liked_posts') or []),
            'bookmarked_count': len(user.get('bookmarks') or []),
            'posts_count': len(user.get('posts') or []),
        }

    def update_name(self, user_id: str, first_name: str) -> None:
        if not first_name or not isinstance(first_name, str) or not first_name.strip():
            raise InvalidRequestError("Invalid first name provided.")
        self.repository.require_user(user_id)
        self.repository.users_ref.document(user_id).update({'first_name': first_name})
        logging.info(f"Name updated (uid: {user_id})")
