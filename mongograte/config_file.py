import toml
from mongograte.errors import ValidationError

# [section] key => option name
_KEYS = {
    ('src', 'uri'): 'source',
    ('dst', 'uri'): 'target',
    ('migrate', 'databases'): 'databases',
    ('migrate', 'collections'): 'migrate_collections',
    ('migrate', 'ignore_collections'): 'ignore_collections',
    ('migrate', 'drop'): 'drop',
    ('migrate', 'drop_all'): 'drop_all',
    ('migrate', 'truncate'): 'truncate',
    ('migrate', 'limit'): 'limit',
    ('migrate', 'query_limit'): 'query_limit',
    ('migrate', 'timeout'): 'timeout',
    ('migrate', 'listen'): 'listen',
    ('migrate', 'insecure'): 'insecure',
    ('log', 'filepath'): 'logfilepath',
    ('log', 'verbose'): 'verbose',
}


class ConfigFile(object):
    @staticmethod
    def load(filepath):
        """ Load config file and return the options found in it.
        """
        try:
            tml = toml.load(filepath)
        except (IOError, toml.TomlDecodeError) as e:
            raise ValidationError('invalid config file %s: %s' % (filepath, e))
        return ConfigFile.parse(tml)

    @staticmethod
    def parse(tml):
        options = {}
        for section, entries in tml.items():
            if not isinstance(entries, dict):
                raise ValidationError("invalid entry '%s' in config file" % section)
            for key, val in entries.items():
                name = _KEYS.get((section, key))
                if name is None:
                    raise ValidationError("unknown key '%s.%s' in config file" % (section, key))
                if name in ('databases', 'migrate_collections', 'ignore_collections'):
                    if not isinstance(val, list):
                        raise ValidationError("'%s.%s' should be a list" % (section, key))
                    val = [v.strip() for v in val]
                options[name] = val
        return options
