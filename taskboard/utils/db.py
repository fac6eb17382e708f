import atexit
import logging
import threading
from datetime import datetime, timezone

from bson import ObjectId
from flask import current_app
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from taskboard.errors import ConfigurationError


logger = logging.getLogger(__name__)


class Mongo:
    """Process-wide MongoDB handle.

    The client is created on first use and then shared by every request.
    Repositories receive ``mongo.db`` rather than reaching for a global.
    """

    def __init__(self, uri=None, db_name="taskboard", client=None):
        self.uri = uri
        self.db_name = db_name
        self._client = client
        self._lock = threading.RLock()
        self._done = set()

    @property
    def client(self):
        if self._client is None:
            with self._lock:
                if self._client is None:
                    if not self.uri:
                        raise ConfigurationError("Missing MONGODB_URI environment variable")
                    self._client = MongoClient(self.uri)
        return self._client

    @property
    def db(self):
        return self.client[self.db_name]

    def run_once(self, key, fn):
        """Run ``fn`` the first time ``key`` is seen in this process.

        Failures are logged and not retried.
        """
        if key in self._done:
            return
        with self._lock:
            if key in self._done:
                return
            try:
                fn()
            except PyMongoError as exc:
                logger.warning("Startup task %s failed: %s", key, exc)
            finally:
                self._done.add(key)

    def ping(self):
        self.client.admin.command("ping")

    def close(self):
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None


def init_app(app, client=None):
    mongo = Mongo(
        uri=app.config.get("MONGO_URI"),
        db_name=app.config["MONGO_DB_NAME"],
        client=client,
    )
    app.extensions["mongo"] = mongo
    # One client per process; release its pool on interpreter shutdown
    atexit.register(mongo.close)
    return mongo


def get_mongo():
    return current_app.extensions["mongo"]


def get_db():
    return get_mongo().db


def to_object_id(value):
    """Return an ObjectId, or None when ``value`` is not a well-formed id."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def utc_now():
    # BSON datetimes hold milliseconds; truncate so stored and returned values agree
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def isoformat(value):
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    # strftime("%Y") does not zero-pad years below 1000 on glibc
    return "{:04d}-{:02d}-{:02d}T{:02d}:{:02d}:{:02d}.{:03d}Z".format(
        value.year, value.month, value.day, value.hour, value.minute, value.second, value.microsecond // 1000
    )
