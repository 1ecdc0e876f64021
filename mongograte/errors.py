class MigrateError(Exception):
    """ Base error of the migration tool.
    """


class StoreConnectionError(MigrateError):
    """ Source or target is not reachable within the connection timeout.
    """


class ValidationError(MigrateError):
    """ Invalid options or missing collections.
    """


class BatchInsertError(MigrateError):
    """ A bulk insert batch failed.
    """
    def __init__(self, ns, offset, cause):
        self.ns = ns
        self.offset = offset
        self.cause = cause
        super(BatchInsertError, self).__init__(
            'insert batch starting at offset %d into %s failed: %s' % (offset, ns, cause))


class ReplicationEventError(MigrateError):
    """ A change event could not be applied to the target.
    """
    def __init__(self, ns, kind, cause):
        self.ns = ns
        self.kind = kind
        self.cause = cause
        super(ReplicationEventError, self).__init__(
            'replay %s on %s failed: %s' % (kind, ns, cause))


class StoreError(MigrateError):
    """ A source or target operation failed outside of a batch insert.
    """
