import gevent
import pymongo
from mongograte.config import Config
from mongograte.data_filter import CollectionFilter, resolve_collections, describe_collection
from mongograte.errors import StoreConnectionError, StoreError
from mongograte.logger import Logger
from mongograte.mongo.copier import BatchCopier
from mongograte.mongo.handler import MongoHandler
from mongograte.mongo.replicator import ChangeReplicator
from mongograte.mongo_utils import gen_namespace
from mongograte.progress_logger import ProgressLogger
from mongograte.reset_policy import ResetPolicy, reset_database, reset_collection

log = Logger.get()


class Migrator(object):
    """ Copy databases from source to target, then optionally replay changes.

    Databases and collections are copied one after another.
    A collection's replicator starts right after its copy is done.
    """
    def __init__(self, conf, src=None, dst=None):
        if not isinstance(conf, Config):
            raise TypeError('invalid config type')
        self._conf = conf
        self._src = src if src is not None else MongoHandler(conf.source, conf.timeout)
        self._dst = dst if dst is not None else MongoHandler(conf.target, conf.timeout)
        self._filter = CollectionFilter.from_config(conf)
        self._policy = ResetPolicy.from_config(conf)
        self._copier = BatchCopier(conf.query_limit)
        self._replicators = []
        self._greenlets = []
        self._progress_logger = None

    @property
    def replicators(self):
        return self._replicators

    def run(self):
        """ Start to migrate.

        Block forever if listening for changes.
        """
        self.migrate()
        if self._conf.listen:
            if not self._greenlets:
                log.warning('no collections to listen, exit')
                self.close()
                return
            log.info('initial copy done, listening changes in %d collections' % len(self._replicators))
            gevent.joinall(self._greenlets)

    def migrate(self):
        """ Copy all databases, return {namespace: copied count}.

        Connections stay open if listening for changes.
        """
        self._connect()
        try:
            plan = self._resolve()
            res = {}
            for dbname, collnames in plan:
                res.update(self._migrate_database(dbname, collnames))
        except pymongo.errors.PyMongoError as e:
            self.close()
            raise StoreError('migrate failed: %s' % e)
        except BaseException:
            self.close()
            raise
        if not self._conf.listen:
            self.close()
        return res

    def close(self):
        gevent.killall(self._greenlets)
        self._src.close()
        self._dst.close()

    def _connect(self):
        log.debug('connecting to source database: %s' % self._src.uri)
        if not self._src.connect():
            raise StoreConnectionError('connect to source failed: %s' % self._src.uri)
        log.debug('connecting to target database: %s' % self._dst.uri)
        if not self._dst.connect():
            self._src.close()
            raise StoreConnectionError('connect to target failed: %s' % self._dst.uri)

    def _resolve(self):
        """ Resolve collections of all databases before touching the target.
        """
        plan = []
        for dbname in self._conf.databases:
            log.debug('retrieving all collections from the source database %s' % dbname)
            plan.append((dbname, resolve_collections(self._src.database(dbname), self._filter)))
        return plan

    def _migrate_database(self, dbname, collnames):
        """ Migrate a database.
        """
        banner = '==================== DATABASE %s ====================' % dbname
        log.info('=' * len(banner))
        log.info(banner)
        log.info('=' * len(banner))

        src_db = self._src.database(dbname)
        dst_db = self._dst.database(dbname)

        reset_database(dst_db, self._policy)
        log.info('collections found: %s' % ', '.join(collnames))

        self._progress_logger = ProgressLogger(len(collnames))
        res = {}
        for collname in collnames:
            src_coll = src_db[collname]
            dst_coll = dst_db[collname]
            res[gen_namespace(dbname, collname)] = self._migrate_collection(src_coll, dst_coll)
            if self._conf.listen:
                self._listen(src_coll, dst_coll)
        return res

    def _migrate_collection(self, src_coll, dst_coll):
        """ Reset the target collection and copy documents.
        """
        ns = gen_namespace(src_coll.database.name, src_coll.name)
        log.info('Migrating %s' % ns)

        reset_collection(dst_coll, self._policy)
        log.debug('    Deleted?: %s' % ('yes' if self._policy in (ResetPolicy.DROP_ALL, ResetPolicy.DROP) else 'no'))
        log.debug('    Truncated?: %s' % ('yes' if self._policy == ResetPolicy.TRUNCATE else 'no'))

        desc = describe_collection(src_coll)
        log.info('    Records: %d' % desc.count)

        self._progress_logger.register(ns, min(desc.count, self._conf.limit))
        n = self._copier.copy(src_coll, dst_coll, self._conf.limit,
                              progress=lambda curr: self._progress_logger.update(ns, curr))
        self._progress_logger.done(ns, n)
        return n

    def _listen(self, src_coll, dst_coll):
        replicator = ChangeReplicator(src_coll, dst_coll)
        self._greenlets.extend(replicator.start())
        self._replicators.append(replicator)
