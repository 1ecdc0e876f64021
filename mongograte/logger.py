import sys
import logging
import logging.handlers


class Logger(object):
    """ Global logger.
    """
    @staticmethod
    def init(filepath='', verbose=False):
        """ Init logger.
        """
        level = logging.DEBUG if verbose else logging.INFO
        logger = logging.getLogger()
        logger.setLevel(level)
        formatter = logging.Formatter('%(asctime)s %(levelname)s %(message)s')
        if filepath:
            handler = logging.handlers.RotatingFileHandler(filepath, mode='a', maxBytes=1024*1024*100, backupCount=3)
        else:
            handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        handler.setLevel(level)
        logger.addHandler(handler)

        # driver internals are too chatty at debug level
        logging.getLogger('pymongo').setLevel(logging.WARNING)

    @staticmethod
    def get():
        """ Get logger.
        """
        return logging.getLogger()
