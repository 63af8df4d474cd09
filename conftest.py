"""Shared pytest fixtures: in-memory stand-ins for the PyMongo objects we use."""

from copy import deepcopy
from types import SimpleNamespace

import pytest
from bson import ObjectId


class StubCursor:
    def __init__(self, docs):
        self._docs = list(docs)
        self.closed = False

    def __iter__(self):
        return iter(self._docs)

    def close(self):
        self.closed = True


class StubCollection:
    """Implements the subset of ``Collection`` the repositories call.

    Set ``fail_with`` to an exception instance to make the next calls raise it.
    """

    def __init__(self, database, name):
        self.database = database
        self.name = name
        self.docs = []
        self.fail_with = None
        self.pipelines = []
        self.cursors = []

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def _cursor(self, docs):
        cursor = StubCursor(docs)
        self.cursors.append(cursor)
        return cursor

    def find(self, filter=None):
        self._maybe_fail()
        filter = filter or {}
        return self._cursor(
            deepcopy(doc)
            for doc in self.docs
            if all(doc.get(key) == value for key, value in filter.items())
        )

    def aggregate(self, pipeline):
        self._maybe_fail()
        self.pipelines.append(pipeline)
        docs = deepcopy(self.docs)
        for stage in pipeline:
            (operator, options), = stage.items()
            docs = getattr(self, f"_stage_{operator.lstrip('$')}")(docs, options)
        return self._cursor(docs)

    def _stage_lookup(self, docs, spec):
        foreign = self.database[spec["from"]].docs
        for doc in docs:
            local = doc.get(spec["localField"])
            doc[spec["as"]] = [
                deepcopy(other) for other in foreign if other.get(spec["foreignField"]) == local
            ]
        return docs

    def _stage_unwind(self, docs, spec):
        field = spec["path"].lstrip("$")
        preserve = spec.get("preserveNullAndEmptyArrays", False)
        result = []
        for doc in docs:
            value = doc.get(field)
            if isinstance(value, list) and value:
                for item in value:
                    result.append({**doc, field: item})
            elif value in (None, []):
                if preserve:
                    result.append({k: v for k, v in doc.items() if k != field})
            else:
                result.append(doc)
        return result

    def insert_one(self, doc):
        self._maybe_fail()
        doc = deepcopy(doc)
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def insert_many(self, docs):
        self._maybe_fail()
        ids = [self.insert_one(doc).inserted_id for doc in docs]
        return SimpleNamespace(inserted_ids=ids)


class StubDatabase:
    def __init__(self, name="quickstart"):
        self.name = name
        self._collections = {}

    def __getitem__(self, name):
        if name not in self._collections:
            self._collections[name] = StubCollection(self, name)
        return self._collections[name]


class StubClient:
    """Replaces ``MongoClient``; records the URI and whether it was closed."""

    def __init__(self, uri, ping_error=None):
        self.uri = uri
        self.closed = False
        self.ping_calls = 0
        self._ping_error = ping_error
        self._databases = {}
        self.admin = SimpleNamespace(command=self._command)

    def _command(self, name):
        assert name == "ping"
        self.ping_calls += 1
        if self._ping_error is not None:
            raise self._ping_error
        return {"ok": 1.0}

    def __getitem__(self, name):
        if name not in self._databases:
            self._databases[name] = StubDatabase(name)
        return self._databases[name]

    def close(self):
        self.closed = True


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def stub_db():
    return StubDatabase()


@pytest.fixture()
def clock():
    return FakeClock(1000.0)


@pytest.fixture()
def stub_client_factory():
    """Factory usable as ``MongoSession(client_factory=...)``; keeps created clients."""

    created = []

    def factory(uri, **kwargs):
        client = StubClient(uri, **kwargs)
        created.append(client)
        return client

    factory.created = created
    return factory


@pytest.fixture(autouse=True)
def _clean_mongo_env(monkeypatch):
    for name in (
        "MONGO_URI",
        "DB",
        "MONGO_DB_NAME",
        "MONGO_TIMEOUT_SECONDS",
        "EPISODES_COLLECTION",
        "PODCASTS_COLLECTION",
    ):
        monkeypatch.delenv(name, raising=False)
