# foodie_api/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class PostKind(Enum):
    """Role of a post in the share/repost graph."""
    ORIGINAL = "original"
    SHARE = "share"
    REPOST = "repost"

    @classmethod
    def of(cls, post_data: Dict[str, Any]) -> "PostKind":
        """
        Kind of a stored post. Documents written without ``kind`` are classified by
        their back-reference and attribution fields.
        """
        kind = post_data.get('kind')
        if kind:
            return cls(kind)
        if not post_data.get('original_post_id'):
            return cls.ORIGINAL
        if post_data.get('reposted_by_uid'):
            return cls.REPOST
        return cls.SHARE


@dataclass
class Comment:
    """Element of a post's append-only ``comments`` array."""
    body: str
    author: str
    created_at: datetime


@dataclass
class Post:
    """
    Document layout of the Firestore 'posts' collection.

    ``kind`` tags the post as an original or a derived share/repost; derived posts
    point at their source through ``original_post_id``.
    """
    post_id: str
    title: str
    body: str
    author: str
    created_at: datetime
    kind: str = PostKind.ORIGINAL.value
    uid: Optional[str] = None
    likes: List[str] = field(default_factory=list)
    like_count: int = 0
    comments: List[Dict[str, Any]] = field(default_factory=list)
    shared_posts: List[str] = field(default_factory=list)
    reposts: List[str] = field(default_factory=list)
    original_post_id: Optional[str] = None
    original_post_timestamp: Optional[datetime] = None
    shared_by: Optional[str] = None
    shared_by_uid: Optional[str] = None
    reposted_by: Optional[str] = None
    reposted_by_uid: Optional[str] = None
    updated_at: Optional[datetime] = None


def empty_engagement() -> Dict[str, Any]:
    """Fresh engagement fields for a share copied from an original."""
    return {
        'likes': [],
        'like_count': 0,
        'comments': [],
        'shared_posts': [],
        'reposts': [],
    }
