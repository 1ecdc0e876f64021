import argparse
from mongograte import __version__
from mongograte.config import Config
from mongograte.config_file import ConfigFile


class CommandOptions(object):
    """ Command options.
    """
    @staticmethod
    def parser():
        parser = argparse.ArgumentParser(prog='mongograte',
                                         usage='%(prog)s [options]',
                                         description='Copy collections from a MongoDB database to another and optionally keep listening for changes.')
        parser.add_argument('-f', '--config', required=False, help='configuration file, note that command options will override items in config file')
        parser.add_argument('-d', '--databases', nargs='+', required=False, help='databases to migrate')
        parser.add_argument('-s', '--source', required=False, help='source server uri')
        parser.add_argument('-t', '--target', required=False, help='target server uri')
        parser.add_argument('--migrate-collections', nargs='+', required=False, help='collections to migrate from the source database')
        parser.add_argument('--ignore-collections', nargs='+', required=False, help='collections to exclude from the migration process')
        parser.add_argument('--drop', action='store_true', default=None, help='drop target collections in the target database')
        parser.add_argument('--drop-all', action='store_true', default=None, help='drop all collections in the target database')
        parser.add_argument('--truncate', action=argparse.BooleanOptionalAction, default=None, help='truncate target collections in the target database, default is on')
        parser.add_argument('-l', '--limit', type=int, required=False, help='limit of documents to be migrated per collection, default is 1000')
        parser.add_argument('--query-limit', type=int, required=False, help='limit of documents per query, default is 1000')
        parser.add_argument('--timeout', type=int, required=False, help='connection timeout in milliseconds, default is 5000')
        parser.add_argument('--listen', action='store_true', default=None, help='listen changes in the migrated collections')
        parser.add_argument('-i', '--insecure', action='store_true', default=None, help='allow a remote database as the target database')
        parser.add_argument('--logfile', dest='logfilepath', required=False, help='log file path')
        parser.add_argument('--verbose', action='store_true', default=None, help=argparse.SUPPRESS)
        parser.add_argument('-v', '--version', action='version', version='%(prog)s ' + __version__)
        return parser

    @staticmethod
    def parse(argv=None):
        """ Parse command options and generate config.

        Raise ValidationError if the resulting config is invalid.
        """
        args = vars(CommandOptions.parser().parse_args(argv))

        options = {}
        config_filepath = args.pop('config')
        if config_filepath is not None:
            options.update(ConfigFile.load(config_filepath))
        options.update((k, v) for k, v in args.items() if v is not None)

        return Config.create(**options).validate()
