import pymongo
from mongograte.errors import BatchInsertError
from mongograte.logger import Logger
from mongograte.mongo_utils import gen_namespace

log = Logger.get()


class BatchCopier(object):
    """ Copy documents of a collection in bounded batches.

    At most `batch_size` documents are buffered, each full buffer goes to the
    target as one insert_many request.
    """
    def __init__(self, batch_size):
        if batch_size < 1:
            raise ValueError('batch_size need greater than 0, but %s' % batch_size)
        self._batch_size = batch_size

    def copy(self, src_coll, dst_coll, limit, progress=None):
        """ Copy up to `limit` documents in the natural order of the source.

        Call `progress(n)` with the cumulative count after every batch.
        Return the number of copied documents.
        """
        if limit <= 0:
            return 0

        ns = gen_namespace(dst_coll.database.name, dst_coll.name)
        cursor = src_coll.find({}, limit=limit, batch_size=self._batch_size)

        n = 0
        docs = []
        try:
            for doc in cursor:
                docs.append(doc)
                if len(docs) == self._batch_size:
                    n = self._flush(ns, dst_coll, docs, n, progress)
                    docs = []
            if docs:
                n = self._flush(ns, dst_coll, docs, n, progress)
        finally:
            cursor.close()
        return n

    def _flush(self, ns, dst_coll, docs, offset, progress):
        """ Insert one batch, return the cumulative count.
        """
        try:
            dst_coll.insert_many(docs, ordered=True)
        except pymongo.errors.PyMongoError as e:
            log.error('insert batch into %s failed at offset %d: %s' % (ns, offset, e))
            raise BatchInsertError(ns, offset, e)
        n = offset + len(docs)
        log.debug('    Documents migrated: %d' % n)
        if progress is not None:
            progress(n)
        return n
