import copy
import types
import pytest
import pymongo


class FakeCursor(object):
    def __init__(self, docs):
        self._it = iter(docs)
        self.closed = False

    def __iter__(self):
        return self

    def __next__(self):
        return next(self._it)

    def close(self):
        self.closed = True


class FakeChangeStream(object):
    def __init__(self, changes, error=None):
        self._changes = list(changes)
        self._error = error
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __iter__(self):
        for change in self._changes:
            yield change
        if self._error is not None:
            raise self._error

    def close(self):
        self.closed = True


class FakeCollection(object):
    """ Just enough of pymongo.collection.Collection.
    """
    def __init__(self, database, name):
        self.database = database
        self.name = name
        self.docs = []
        self.exists = False
        self.find_calls = []
        self.insert_batches = []
        self.fail_insert = None
        self.fail_writes = None
        self.fail_once = None
        self.streams = []

    def _index(self, doc_id):
        for i, doc in enumerate(self.docs):
            if doc['_id'] == doc_id:
                return i
        return -1

    def _check_writable(self):
        if self.fail_once is not None:
            error, self.fail_once = self.fail_once, None
            raise error
        if self.fail_writes is not None:
            raise self.fail_writes
        self.exists = True

    def find(self, filter=None, limit=0, batch_size=0):
        self.find_calls.append({'filter': filter, 'limit': limit, 'batch_size': batch_size})
        docs = self.docs[:limit] if limit else self.docs
        return FakeCursor([copy.deepcopy(doc) for doc in docs])

    def find_one(self, filter):
        i = self._index(filter['_id'])
        return copy.deepcopy(self.docs[i]) if i >= 0 else None

    def count_documents(self, filter):
        return len(self.docs)

    def insert_many(self, docs, ordered=True):
        docs = list(docs)
        self.insert_batches.append(len(docs))
        if self.fail_insert is not None:
            raise self.fail_insert
        self._check_writable()
        for i, doc in enumerate(docs):
            if self._index(doc['_id']) >= 0:
                raise pymongo.errors.BulkWriteError({
                    'writeErrors': [{'index': i, 'code': 11000, 'errmsg': 'E11000 duplicate key error'}],
                    'nInserted': i,
                })
            self.docs.append(copy.deepcopy(doc))
        return types.SimpleNamespace(inserted_ids=[doc['_id'] for doc in docs])

    def insert_one(self, doc):
        self._check_writable()
        if self._index(doc['_id']) >= 0:
            raise pymongo.errors.DuplicateKeyError('E11000 duplicate key error', 11000)
        self.docs.append(copy.deepcopy(doc))
        return types.SimpleNamespace(inserted_id=doc['_id'])

    def update_one(self, filter, update):
        self._check_writable()
        i = self._index(filter['_id'])
        if i < 0:
            return types.SimpleNamespace(matched_count=0, modified_count=0)
        for key, val in update.get('$set', {}).items():
            self.docs[i][key] = val
        for key in update.get('$unset', {}):
            self.docs[i].pop(key, None)
        return types.SimpleNamespace(matched_count=1, modified_count=1)

    def replace_one(self, filter, doc):
        self._check_writable()
        i = self._index(filter['_id'])
        if i < 0:
            return types.SimpleNamespace(matched_count=0, modified_count=0)
        new_doc = copy.deepcopy(doc)
        new_doc['_id'] = filter['_id']
        self.docs[i] = new_doc
        return types.SimpleNamespace(matched_count=1, modified_count=1)

    def delete_one(self, filter):
        self._check_writable()
        i = self._index(filter['_id'])
        if i >= 0:
            del self.docs[i]
        return types.SimpleNamespace(deleted_count=1 if i >= 0 else 0)

    def delete_many(self, filter):
        n = len(self.docs)
        self.docs = []
        return types.SimpleNamespace(deleted_count=n)

    def drop(self):
        self.docs = []
        self.exists = False

    def watch(self):
        if not self.streams:
            raise pymongo.errors.OperationFailure('no more streams')
        return self.streams.pop(0)


class FakeDatabase(object):
    def __init__(self, client, name):
        self.client = client
        self.name = name
        self._colls = {}

    def __getitem__(self, collname):
        if collname not in self._colls:
            self._colls[collname] = FakeCollection(self, collname)
        return self._colls[collname]

    def list_collection_names(self):
        return [name for name, coll in self._colls.items() if coll.exists]

    def create(self, collname, docs=()):
        """ Create collection with documents, test helper.
        """
        coll = self[collname]
        coll.exists = True
        coll.docs.extend(copy.deepcopy(list(docs)))
        return coll


class FakeClient(object):
    def __init__(self):
        self._dbs = {}

    def __getitem__(self, dbname):
        if dbname not in self._dbs:
            self._dbs[dbname] = FakeDatabase(self, dbname)
        return self._dbs[dbname]


class FakeHandler(object):
    """ Stand-in for MongoHandler.
    """
    def __init__(self, uri='mongodb://localhost:27017', ok=True):
        self.uri = uri
        self.ok = ok
        self.n_connect = 0
        self.n_close = 0
        self.mc = FakeClient()

    def connect(self):
        self.n_connect += 1
        return self.ok

    def close(self):
        self.n_close += 1

    def database(self, dbname):
        return self.mc[dbname]


@pytest.fixture
def src():
    return FakeHandler('mongodb://source:27017')


@pytest.fixture
def dst():
    return FakeHandler('mongodb://target:27017')


@pytest.fixture
def shop(src):
    """ Source database 'shop' with 'users' and 'orders', three documents each.
    """
    db = src.database('shop')
    db.create('users', [{'_id': i, 'name': 'user%d' % i} for i in range(3)])
    db.create('orders', [{'_id': i, 'total': i * 10} for i in range(3)])
    return db
