#! /usr/bin/env python
# -*- coding: utf-8 -*-

# summary: MongoDB migration tool

from gevent import monkey
monkey.patch_all()

import sys
from mongograte.command_options import CommandOptions
from mongograte.errors import MigrateError
from mongograte.logger import Logger
from mongograte.migrator import Migrator


def main(argv=None):
    try:
        conf = CommandOptions.parse(argv)
    except MigrateError as e:
        sys.stderr.write('%s\n' % e)
        sys.stderr.write('Specify --help for available options\n')
        return 1

    Logger.init(conf.logfilepath, conf.verbose)
    log = Logger.get()

    conf.info(log)
    if conf.logfilepath:
        conf.info(sys.stdout)

    try:
        Migrator(conf).run()
    except MigrateError as e:
        log.error('%s' % e)
        return 1
    except KeyboardInterrupt:
        log.info('keyboard interrupt')
        return 130

    log.info('exit')
    return 0


if __name__ == '__main__':
    sys.exit(main())
