import logging

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from taskboard.errors import DuplicateEmailError, DuplicateUsernameError
from taskboard.models.user_model import User
from taskboard.utils.db import to_object_id, utc_now


logger = logging.getLogger(__name__)

COLLECTION_NAME = "users"
EMAIL_INDEX_NAME = "users_email_lower_unique"
USERNAME_INDEX_NAME = "users_username_lower_unique"


class UserRepository:
    """User records with case-insensitive uniqueness on email and username.

    Uniqueness lives in the database: ``emailLower`` and ``usernameLower``
    carry unique indexes, created once per process by ``ensure_indexes``.
    """

    def __init__(self, mongo):
        self.mongo = mongo
        self.collection = mongo.db[COLLECTION_NAME]
        mongo.run_once("user_indexes", self.ensure_indexes)

    def ensure_indexes(self):
        self.collection.create_index([("emailLower", ASCENDING)], unique=True, name=EMAIL_INDEX_NAME)
        self.collection.create_index([("usernameLower", ASCENDING)], unique=True, name=USERNAME_INDEX_NAME)

    def find_by_email(self, email):
        doc = self.collection.find_one({"emailLower": email.strip().lower()})
        return User.from_document(doc) if doc else None

    def find_by_username(self, username):
        doc = self.collection.find_one({"usernameLower": username.strip().lower()})
        return User.from_document(doc) if doc else None

    def find_by_identifier(self, identifier):
        normalized = identifier.strip().lower()
        doc = self.collection.find_one(
            {"$or": [{"emailLower": normalized}, {"usernameLower": normalized}]}
        )
        return User.from_document(doc) if doc else None

    def find_by_id(self, user_id):
        object_id = to_object_id(user_id)
        if object_id is None:
            return None
        doc = self.collection.find_one({"_id": object_id})
        return User.from_document(doc) if doc else None

    def is_email_taken(self, email):
        return self.find_by_email(email) is not None

    def is_username_taken(self, username):
        return self.find_by_username(username) is not None

    def create(self, username, email, password_hash):
        now = utc_now()
        username = username.strip()
        email = email.strip().lower()
        doc = {
            "_id": ObjectId(),
            "username": username,
            "usernameLower": username.lower(),
            "email": email,
            "emailLower": email,
            "passwordHash": password_hash,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise self._duplicate_error(exc, doc) from exc
        return User.from_document(doc)

    def _duplicate_error(self, exc, doc):
        details = exc.details or {}
        key_pattern = details.get("keyPattern") or {}
        message = details.get("errmsg") or str(exc)

        if "usernameLower" in key_pattern or USERNAME_INDEX_NAME in message:
            return DuplicateUsernameError()
        if "emailLower" in key_pattern or EMAIL_INDEX_NAME in message:
            return DuplicateEmailError()

        # Driver did not say which index collided; ask the collection
        logger.debug("Duplicate key without key pattern: %s", message)
        if self.collection.find_one({"usernameLower": doc["usernameLower"]}, {"_id": 1}):
            return DuplicateUsernameError()
        return DuplicateEmailError()
