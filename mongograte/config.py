import logging
import collections
import pymongo
from mongograte.errors import ValidationError
from mongograte.mongo_utils import mask_uri, is_managed_cloud

DEFAULTS = {
    'databases': [],
    'source': '',
    'target': '',
    'migrate_collections': None,
    'ignore_collections': None,
    'drop': False,
    'drop_all': False,
    'truncate': True,
    'limit': 1000,
    'query_limit': 1000,
    'timeout': 5000,
    'listen': False,
    'insecure': False,
    'verbose': False,
    'logfilepath': '',
}

MIN_TIMEOUT_MS = 1000


class Config(collections.namedtuple('Config', sorted(DEFAULTS))):
    """ Configuration.

    Built once at startup and never mutated.
    """
    __slots__ = ()

    @classmethod
    def create(cls, **options):
        """ Create config from options, missing options take the defaults.
        """
        unknown = set(options) - set(DEFAULTS)
        if unknown:
            raise ValidationError('unknown options: %s' % ', '.join(sorted(unknown)))
        values = dict(DEFAULTS)
        values.update(options)
        values['databases'] = tuple(values['databases'] or ())
        for key in ('migrate_collections', 'ignore_collections'):
            if values[key] is not None:
                values[key] = tuple(values[key])
        return cls(**values)

    def validate(self):
        """ Check options, raise ValidationError on the first violation.
        """
        if not self.databases:
            raise ValidationError('at least one database is required')
        if not self.source:
            raise ValidationError('source is required')
        if not self.target:
            raise ValidationError('target is required')
        if not self.insecure and is_managed_cloud(self.target):
            raise ValidationError('It is not possible to use a remote database as the target database')
        if self.timeout < MIN_TIMEOUT_MS:
            raise ValidationError('Timeout must be greater than %d ms' % MIN_TIMEOUT_MS)
        if self.limit < 1:
            raise ValidationError('limit must be a positive number')
        if self.query_limit < 1:
            raise ValidationError('query limit must be a positive number')
        return self

    @property
    def reset_str(self):
        if self.drop_all:
            return 'drop all'
        if self.drop:
            return 'drop'
        if self.truncate:
            return 'truncate'
        return 'none'

    def info(self, logger):
        """ Output to logfile or stdout.
        """
        if isinstance(logger, logging.Logger):
            f = lambda s: logger.info(s)
        elif hasattr(logger, 'write'):
            f = lambda s: logger.write('%s\n' % s)
        else:
            raise TypeError('error logger')

        f('================================================')
        f('source          :  %s' % mask_uri(self.source))
        f('target          :  %s' % mask_uri(self.target))
        f('databases       :  %s' % ', '.join(self.databases))
        f('collections     :  %s' % (', '.join(self.migrate_collections) if self.migrate_collections else 'all'))
        f('ignore          :  %s' % (', '.join(self.ignore_collections) if self.ignore_collections else ''))
        f('reset           :  %s' % self.reset_str)
        f('limit           :  %d' % self.limit)
        f('query limit     :  %d' % self.query_limit)
        f('timeout         :  %d ms' % self.timeout)
        f('listen          :  %s' % self.listen)
        f('log filepath    :  %s' % self.logfilepath)
        f('pymongo version :  %s' % pymongo.version)
        f('================================================')
