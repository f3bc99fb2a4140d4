# foodie_api/conftest.py
"""
Shared pytest fixtures.

The app is built against an in-memory stand-in for the Firestore client and a fake
identity provider, so the tests run without a Firebase project.

Usage: python -m pytest foodie_api -v
"""

import copy
import itertools
from datetime import datetime, timedelta, timezone

import pytest
from firebase_admin import firestore
from flask_jwt_extended import create_access_token
from google.api_core.exceptions import AlreadyExists, NotFound

from foodie_api import create_app
from foodie_api.core.exceptions import IdentityProviderError, NotFoundError


# =====================================================================================
# In-memory Firestore
# =====================================================================================
def _apply_transforms(current: dict, changes: dict) -> dict:
    updated = copy.deepcopy(current)
    for key, value in changes.items():
        if isinstance(value, firestore.ArrayUnion):
            items = list(updated.get(key) or [])
            for item in value.values:
                if item not in items:
                    items.append(copy.deepcopy(item))
            updated[key] = items
        elif isinstance(value, firestore.ArrayRemove):
            updated[key] = [item for item in (updated.get(key) or []) if item not in value.values]
        elif isinstance(value, firestore.Increment):
            updated[key] = (updated.get(key) or 0) + value.value
        else:
            updated[key] = copy.deepcopy(value)
    return updated


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    @property
    def _store(self):
        return self._collection.db.data.setdefault(self._collection.name, {})

    def get(self):
        return FakeSnapshot(self, copy.deepcopy(self._store.get(self.id)))

    def set(self, data):
        self._collection.db.check_failure()
        self._store[self.id] = copy.deepcopy(data)

    def create(self, data):
        self._collection.db.check_failure()
        if self.id in self._store:
            raise AlreadyExists(f"Document already exists: {self.id}")
        self._store[self.id] = copy.deepcopy(data)

    def update(self, changes):
        self._collection.db.check_failure()
        if self.id not in self._store:
            raise NotFound(f"No document to update: {self.id}")
        self._store[self.id] = _apply_transforms(self._store[self.id], changes)

    def delete(self):
        self._collection.db.check_failure()
        self._store.pop(self.id, None)


class FakeQuery:
    """Ordering on any number of fields (``__name__`` is the document id), '<'/'>' filters, start_after, limit."""

    _operators = {'<': lambda a, b: a < b, '>': lambda a, b: a > b}

    def __init__(self, collection, orders=(), filters=(), cursor=None, limit=None):
        self._collection = collection
        self._orders = tuple(orders)
        self._filters = tuple(filters)
        self._cursor = cursor
        self._limit = limit

    def _copy(self, **changes):
        state = dict(orders=self._orders, filters=self._filters, cursor=self._cursor, limit=self._limit)
        state.update(changes)
        return FakeQuery(self._collection, **state)

    def order_by(self, field, direction=firestore.Query.ASCENDING):
        return self._copy(orders=self._orders + ((field, direction),))

    def where(self, filter):
        return self._copy(filters=self._filters + ((filter.field_path, filter.op_string, filter.value),))

    def start_after(self, values):
        return self._copy(cursor=values)

    def limit(self, count):
        return self._copy(limit=count)

    @staticmethod
    def _value(snapshot, field):
        return snapshot.id if field == '__name__' else snapshot._data.get(field)

    def _after_cursor(self, snapshot):
        # lexicographic comparison over the order fields, each in its own direction
        for field, direction in self._orders:
            boundary = self._cursor[field]
            if field == '__name__' and not isinstance(boundary, str):
                boundary = boundary.id
            value = self._value(snapshot, field)
            if value == boundary:
                continue
            if direction == firestore.Query.DESCENDING:
                return value < boundary
            return value > boundary
        return False

    def stream(self):
        store = self._collection.db.data.get(self._collection.name, {})
        snapshots = [FakeSnapshot(self._collection.document(doc_id), copy.deepcopy(data))
                     for doc_id, data in store.items()]

        for field, op, value in self._filters:
            snapshots = [s for s in snapshots
                         if self._value(s, field) is not None and self._operators[op](self._value(s, field), value)]

        for field, direction in reversed(self._orders):
            snapshots = [s for s in snapshots if self._value(s, field) is not None]
            snapshots.sort(key=lambda s: self._value(s, field), reverse=direction == firestore.Query.DESCENDING)

        if self._cursor is not None:
            snapshots = [s for s in snapshots if self._after_cursor(s)]

        if self._limit is not None:
            snapshots = snapshots[:self._limit]
        return iter(snapshots)

    def get(self):
        return list(self.stream())


class FakeCollection(FakeQuery):
    def __init__(self, db, name):
        super().__init__(self)
        self.db = db
        self.name = name

    def document(self, doc_id):
        return FakeDocumentReference(self, doc_id)


class FakeWriteBatch:
    """Applies queued writes all together; a failing write rolls the whole batch back."""

    def __init__(self, db):
        self._db = db
        self._writes = []

    def set(self, reference, data):
        self._writes.append(('set', reference, data))

    def create(self, reference, data):
        self._writes.append(('create', reference, data))

    def update(self, reference, changes):
        self._writes.append(('update', reference, changes))

    def delete(self, reference):
        self._writes.append(('delete', reference, None))

    def commit(self):
        self._db.check_failure()
        snapshot = copy.deepcopy(self._db.data)
        try:
            for operation, reference, payload in self._writes:
                if operation == 'delete':
                    reference.delete()
                else:
                    getattr(reference, operation)(payload)
        except Exception:
            self._db.data = snapshot
            raise
        self._db.commits += 1


class FakeFirestore:
    def __init__(self):
        self.data = {}
        self.commits = 0
        self._failures = []

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeWriteBatch(self)

    def fail_next_write(self, error=None):
        self._failures.append(error or RuntimeError("document store unavailable"))

    def check_failure(self):
        if self._failures:
            raise self._failures.pop(0)


# =====================================================================================
# Identity provider
# =====================================================================================
class FakeIdentityProvider:
    def __init__(self):
        self.accounts = {}
        self.fail_delete = False
        self._ids = itertools.count(1)

    def create_account(self, email, password):
        if email in self.accounts:
            raise IdentityProviderError("The email address is already in use.", reason="EMAIL_EXISTS")
        user_id = f"user{next(self._ids)}"
        self.accounts[email] = {'uid': user_id, 'password': password}
        return user_id

    def authenticate(self, email, password):
        account = self.accounts.get(email)
        if account is None or account['password'] != password:
            raise IdentityProviderError("Sign-in rejected: INVALID_LOGIN_CREDENTIALS",
                                        reason="INVALID_LOGIN_CREDENTIALS")
        return account['uid']

    def delete_account(self, user_id):
        if self.fail_delete:
            raise IdentityProviderError("Could not delete account: backend error")
        self.accounts = {email: a for email, a in self.accounts.items() if a['uid'] != user_id}

    def set_password(self, user_id, new_password):
        for account in self.accounts.values():
            if account['uid'] == user_id:
                account['password'] = new_password
                return
        raise NotFoundError("User not found.")

    def has_uid(self, user_id):
        return any(a['uid'] == user_id for a in self.accounts.values())


class TickingClock:
    """Each call is one second after the previous one."""

    def __init__(self, start=datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self):
        self.current = self.current + timedelta(seconds=1)
        return self.current


# =====================================================================================
# Fixtures
# =====================================================================================
@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def app(db, identity):
    app = create_app('testing', db=db, identity=identity, clock=TickingClock())
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.services


@pytest.fixture
def make_user(db):
    """Write a profile document directly and return its uid."""
    def _make_user(uid, first_name=None, **fields):
        document = {
            'uid': uid,
            'email': f"{uid}@example.com",
            'first_name': first_name or uid.capitalize(),
            'following': [],
            'followers': [],
            'posts': [],
            'liked_posts': [],
            'bookmarks': [],
            'is_admin': False,
        }
        document.update(fields)
        db.collection('users').document(uid).set(document)
        return uid
    return _make_user


@pytest.fixture
def auth_header(app):
    def _auth_header(uid):
        with app.app_context():
            token = create_access_token(identity=uid)
        return {"Authorization": f"Bearer {token}"}
    return _auth_header


@pytest.fixture
def user_doc(db):
    def _user_doc(uid):
        return db.data.get('users', {}).get(uid)
    return _user_doc


@pytest.fixture
def post_doc(db):
    def _post_doc(post_id):
        return db.data.get('posts', {}).get(post_id)
    return _post_doc
