# foodie_api/api/posts/services.py
import logging
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from foodie_api.core.exceptions import ForbiddenError, InvalidRequestError, NotFoundError
from foodie_api.models.post import Post, PostKind, empty_engagement
from foodie_api.utils.datetime_utils import DateTimeUtils


class PostService:
    """
    Post graph: originals, shares and reposts.

    - An original keeps the ids of its shares in ``shared_posts`` and of its reposts in ``reposts``.
    - A derived post points back through ``original_post_id``.
    - Every write that touches more than one document goes through ``repository.related_writes()``.
    """

    def __init__(self, repository, page_size: int = 5, clock: Callable = DateTimeUtils.now):
        self.repository = repository
        self.page_size = page_size
        self.clock = clock

    # --- authorisation ---
    @staticmethod
    def can_modify(actor_id: str, actor: Dict[str, Any], post: Dict[str, Any]) -> bool:
        """Owner, admin, or the user who produced this particular share/repost."""
        return (
            post.get('uid') == actor_id
            or bool(actor.get('is_admin'))
            or post.get('shared_by_uid') == actor_id
            or post.get('reposted_by_uid') == actor_id
        )

    def _resolve_original(self, post: Dict[str, Any]) -> Dict[str, Any]:
        """Follow ``original_post_id`` until an original post is reached."""
        seen = set()
        while PostKind.of(post) is not PostKind.ORIGINAL:
            source_id = post.get('original_post_id')
            if source_id in seen:
                raise NotFoundError("Original post not found.")
            seen.add(source_id)
            post = self.repository.get_post(source_id)
            if post is None:
                raise NotFoundError("Original post not found.")
        return post

    # --- create / read ---
    def create_post(self, user_id: str, title: str, body: str, author: Optional[str] = None) -> Dict[str, Any]:
        if not title or not body:
            raise InvalidRequestError("Title and body are required.")

        user = self.repository.require_user(user_id)
        created_at = self.clock()
        post_id = f"{user_id}_{DateTimeUtils.epoch_millis(created_at)}"
        new_post = Post(
            post_id=post_id,
            title=title,
            body=body,
            author=author or user.get('first_name'),
            created_at=created_at,
            uid=user_id
        )
        post_dict = asdict(new_post)

        with self.repository.related_writes() as batch:
            batch.create(self.repository.posts_ref.document(post_id), post_dict)
            batch.update(self.repository.users_ref.document(user_id), {'posts': firestore.ArrayUnion([post_id])})

        logging.info(f"Post created (post_id: {post_id})")
        return post_dict

    def get_posts(self, cursor: Optional[str] = None,
                  cursor_id: Optional[str] = None) -> Tuple[List[Dict[str, Any]], Optional[str], Optional[str]]:
        """
        Newest first, ``page_size`` per page, ties on ``created_at`` broken by document id.

        ``cursor`` is the ISO timestamp of the last post of the previous page and ``cursor_id``
        its id. With both, the next page starts right after that post; with the timestamp
        alone it starts at the first strictly older post.
        Returns the page and the cursor pair for the next one (``None`` at the end).
        """
        query = (self.repository.posts_ref
                 .order_by('created_at', direction=firestore.Query.DESCENDING)
                 .order_by('__name__', direction=firestore.Query.DESCENDING))
        if cursor:
            try:
                cursor_time = DateTimeUtils.parse_iso_datetime(cursor)
            except ValueError:
                raise InvalidRequestError(f"Invalid cursor: {cursor}")
            if cursor_id:
                query = query.start_after({
                    'created_at': cursor_time,
                    '__name__': self.repository.posts_ref.document(cursor_id)
                })
            else:
                query = query.where(filter=FieldFilter('created_at', '<', cursor_time))

        posts = []
        for doc in query.limit(self.page_size).stream():
            post_data = DateTimeUtils.from_firestore(doc.to_dict())
            post_data.setdefault('post_id', doc.id)
            posts.append(post_data)

        if not posts:
            return posts, None, None
        last = posts[-1]
        return posts, DateTimeUtils.to_iso_string(last['created_at']), last['post_id']

    def get_post_by_id(self, post_id: str) -> Dict[str, Any]:
        return self.repository.require_post(post_id)

    # --- update / delete ---
    def update_post(self, actor_id: str, post_id: str, title: str, body: str) -> Dict[str, Any]:
        """
        Replace title and body. Editing an original rewrites its shares in the same batch;
        reposts keep their own content.
        """
        if not title or not body:
            raise InvalidRequestError("Title and body are required.")

        actor = self.repository.require_user(actor_id)
        post = self.repository.require_post(post_id)
        if not self.can_modify(actor_id, actor, post):
            raise ForbiddenError("You can only edit your own posts or you need admin rights.")

        changes = {'title': title, 'body': body, 'updated_at': self.clock()}
        with self.repository.related_writes() as batch:
            batch.update(self.repository.posts_ref.document(post_id), changes)
            if PostKind.of(post) is PostKind.ORIGINAL:
                for shared_post_id in post.get('shared_posts') or []:
                    batch.update(self.repository.posts_ref.document(shared_post_id), {'title': title, 'body': body})

        logging.info(f"Post updated (post_id: {post_id})")
        return {**post, **changes}

    def delete_post(self, actor_id: str, post_id: str) -> bool:
        """
        Delete a post together with its shares and reposts, and drop its id from the
        parent's back-reference when it is itself derived. Returns False when the post
        was already gone.
        """
        actor = self.repository.require_user(actor_id)
        post = self.repository.get_post(post_id)
        if post is None:
            logging.info(f"Post not found or already deleted (post_id: {post_id})")
            return False

        if not self.can_modify(actor_id, actor, post):
            raise ForbiddenError("You can only delete your own posts or you need admin rights.")

        kind = PostKind.of(post)
        parent = None
        if kind is not PostKind.ORIGINAL:
            parent = self.repository.get_post(post.get('original_post_id'))

        posts_ref = self.repository.posts_ref
        with self.repository.related_writes() as batch:
            for derived_id in (post.get('shared_posts') or []) + (post.get('reposts') or []):
                batch.delete(posts_ref.document(derived_id))

            if parent is not None:
                back_reference = 'reposts' if kind is PostKind.REPOST else 'shared_posts'
                batch.update(posts_ref.document(parent['post_id']), {back_reference: firestore.ArrayRemove([post_id])})

            batch.delete(posts_ref.document(post_id))

        logging.info(f"Post deleted with its derived posts (post_id: {post_id})")
        return True

    # --- derived posts ---
    def share_post(self, actor_id: str, post_id: str) -> str:
        """Copy the original behind ``post_id`` into a new share owned by the actor."""
        actor = self.repository.require_user(actor_id)
        original = self._resolve_original(self.repository.require_post(post_id))
        original_id = original['post_id']

        created_at = self.clock()
        share_id = f"{actor_id}_shared_{DateTimeUtils.epoch_millis(created_at)}"
        shared_post = {
            **original,
            **empty_engagement(),
            'post_id': share_id,
            'kind': PostKind.SHARE.value,
            'created_at': created_at,
            'updated_at': None,
            'original_post_id': original_id,
            'original_post_timestamp': original.get('created_at'),
            'shared_by': actor.get('first_name'),
            'shared_by_uid': actor_id,
            'reposted_by': None,
            'reposted_by_uid': None,
        }

        posts_ref = self.repository.posts_ref
        with self.repository.related_writes() as batch:
            batch.create(posts_ref.document(share_id), shared_post)
            batch.update(posts_ref.document(original_id), {'shared_posts': firestore.ArrayUnion([share_id])})
            batch.update(self.repository.users_ref.document(actor_id), {'posts': firestore.ArrayUnion([share_id])})

        logging.info(f"Post shared (original: {original_id}, share: {share_id})")
        return share_id

    def repost_post(self, actor_id: str, post_id: str, title: str, body: str) -> str:
        """
        New title/body under the source author's name. The repost points at ``post_id``
        as given, even when that post is a share or another repost.
        """
        if not title or not body:
            raise InvalidRequestError("Title and body are required.")

        actor = self.repository.require_user(actor_id)
        source = self.repository.require_post(post_id)

        created_at = self.clock()
        repost_id = f"{actor_id}_repost_{DateTimeUtils.epoch_millis(created_at)}"
        repost = Post(
            post_id=repost_id,
            title=title,
            body=body,
            author=source.get('author'),
            created_at=created_at,
            kind=PostKind.REPOST.value,
            original_post_id=post_id,
            reposted_by=actor.get('first_name'),
            reposted_by_uid=actor_id
        )

        posts_ref = self.repository.posts_ref
        with self.repository.related_writes() as batch:
            batch.create(posts_ref.document(repost_id), asdict(repost))
            batch.update(posts_ref.document(post_id), {'reposts': firestore.ArrayUnion([repost_id])})
            batch.update(self.repository.users_ref.document(actor_id), {'posts': firestore.ArrayUnion([repost_id])})

        logging.info(f"Post reposted (source: {post_id}, repost: {repost_id})")
        return repost_id
