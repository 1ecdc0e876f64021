from mongograte.logger import Logger
from mongograte.mongo_utils import gen_namespace, is_system_collection

log = Logger.get()


class ResetPolicy(object):
    """ Destructive action applied to the target before copying.

    Precedence: DROP_ALL > DROP > TRUNCATE > NONE.
    """
    NONE = 'none'
    TRUNCATE = 'truncate'
    DROP = 'drop'
    DROP_ALL = 'drop-all'

    @staticmethod
    def resolve(drop_all=False, drop=False, truncate=False):
        if drop_all:
            return ResetPolicy.DROP_ALL
        if drop:
            return ResetPolicy.DROP
        if truncate:
            return ResetPolicy.TRUNCATE
        return ResetPolicy.NONE

    @staticmethod
    def from_config(conf):
        return ResetPolicy.resolve(conf.drop_all, conf.drop, conf.truncate)


def reset_database(db, policy):
    """ Drop all collections of the target database if the policy says so.
    """
    if policy != ResetPolicy.DROP_ALL:
        return

    log.debug('retrieving all collections from the target database %s' % db.name)
    collnames = sorted(collname for collname in db.list_collection_names() if not is_system_collection(collname))
    if not collnames:
        log.debug('no collections found, they will be created automatically')
        return

    log.debug('collections found: %s' % ', '.join(collnames))
    log.info('dropping all collections in the target database %s' % db.name)
    for collname in collnames:
        db[collname].drop()
        log.info('collection dropped: %s' % gen_namespace(db.name, collname))


def reset_collection(coll, policy):
    """ Drop or truncate the target collection.

    Dropping a collection that does not exist is a no-op.
    Under DROP_ALL the database was emptied already, so nothing is left to do.
    """
    ns = gen_namespace(coll.database.name, coll.name)
    if policy == ResetPolicy.DROP:
        coll.drop()
        log.debug('    Dropped: %s' % ns)
    elif policy == ResetPolicy.TRUNCATE:
        res = coll.delete_many({})
        log.debug('    Truncated: %s (%d documents deleted)' % (ns, res.deleted_count))
