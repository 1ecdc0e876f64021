import collections
from mongograte.errors import ValidationError
from mongograte.logger import Logger
from mongograte.mongo_utils import is_system_collection

log = Logger.get()


CollectionDescriptor = collections.namedtuple('CollectionDescriptor', ['name', 'count'])


class CollectionFilter(object):
    """ Filter for collections of a database.

    With include collections only those are migrated, and all of them must exist.
    Ignore collections are removed afterwards, so both lists compose.
    """
    def __init__(self, include_colls=None, ignore_colls=None):
        self._include_colls = list(include_colls) if include_colls else []
        self._ignore_colls = set(ignore_colls) if ignore_colls else set()

    @classmethod
    def from_config(cls, conf):
        return cls(conf.migrate_collections, conf.ignore_collections)

    def missing_colls(self, existing):
        """ Return include collections not found in existing names, in given order.
        """
        existing = set(existing)
        return [collname for collname in self._include_colls if collname not in existing]

    def valid_coll(self, collname):
        if collname in self._ignore_colls:
            return False
        if self._include_colls:
            return collname in self._include_colls
        return True

    def apply(self, collnames):
        """ Filter collection names and sort them.
        """
        missing = self.missing_colls(collnames)
        if missing:
            raise ValidationError('The following collections do not exist in the source database: %s' % ', '.join(missing))
        return sorted(set(collname for collname in collnames if self.valid_coll(collname)))


def resolve_collections(db, coll_filter):
    """ Collect collections of the source database to migrate.

    Return names in lexicographic order.
    """
    collnames = [collname for collname in db.list_collection_names() if not is_system_collection(collname)]
    log.debug('collections in %s: %s' % (db.name, ', '.join(sorted(collnames))))
    return coll_filter.apply(collnames)


def describe_collection(coll):
    return CollectionDescriptor(coll.name, coll.count_documents({}))
