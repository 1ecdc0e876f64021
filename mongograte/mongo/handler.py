import pymongo
from mongograte.logger import Logger
from mongograte.mongo_utils import mask_uri

log = Logger.get()


class MongoHandler(object):
    """ Connection to a MongoDB deployment.
    """
    def __init__(self, uri, timeout_ms):
        self._uri = uri
        self._timeout_ms = timeout_ms
        self._mc = None

    def __del__(self):
        self.close()

    @property
    def uri(self):
        return mask_uri(self._uri)

    def connect(self):
        """ Connect to server.

        Return False if the server is not ready within the timeout.
        """
        try:
            self._mc = pymongo.MongoClient(self._uri,
                                           serverSelectionTimeoutMS=self._timeout_ms,
                                           connectTimeoutMS=self._timeout_ms)
            self._mc.admin.command('ping')
            return True
        except pymongo.errors.PyMongoError as e:
            log.error('connect to %s failed: %s' % (self.uri, e))
            self.close()
            return False

    def close(self):
        """ Close connection.
        """
        if self._mc is not None:
            self._mc.close()
            self._mc = None

    def database(self, dbname):
        return self._mc[dbname]
