import collections


class Insert(collections.namedtuple('Insert', ['document'])):
    __slots__ = ()
    kind = 'insert'


class Update(collections.namedtuple('Update', ['doc_id', 'updated_fields', 'removed_fields'])):
    __slots__ = ()
    kind = 'update'


class Replace(collections.namedtuple('Replace', ['doc_id', 'document'])):
    __slots__ = ()
    kind = 'replace'


class Delete(collections.namedtuple('Delete', ['doc_id'])):
    __slots__ = ()
    kind = 'delete'


class Other(collections.namedtuple('Other', ['kind'])):
    """ Any operation that is not replayed, e.g. drop, rename, invalidate.
    """
    __slots__ = ()


def parse_change(change):
    """ Convert a change stream document into a change event.
    """
    op = change['operationType']
    if op == 'insert':
        return Insert(change['fullDocument'])
    elif op == 'update':
        desc = change.get('updateDescription') or {}
        return Update(change['documentKey']['_id'],
                      dict(desc.get('updatedFields') or {}),
                      list(desc.get('removedFields') or []))
    elif op == 'replace':
        return Replace(change['documentKey']['_id'], change['fullDocument'])
    elif op == 'delete':
        return Delete(change['documentKey']['_id'])
    else:
        return Other(op)
