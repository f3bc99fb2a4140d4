# foodie_api/models/user.py
from dataclasses import dataclass, field
from typing import List


@dataclass
class User:
    """
    Document layout of the Firestore 'users' collection.
    The document id is the identity provider's uid.
    """
    uid: str
    email: str
    first_name: str
    following: List[str] = field(default_factory=list)
    followers: List[str] = field(default_factory=list)
    posts: List[str] = field(default_factory=list)
    liked_posts: List[str] = field(default_factory=list)
    bookmarks: List[str] = field(default_factory=list)
    is_admin: bool = False
    # bumped on password change; tokens carrying an older value are rejected
    token_version: int = 0
