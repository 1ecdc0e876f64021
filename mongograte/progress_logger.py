import sys
import time
from mongograte.logger import Logger

log = Logger.get()


class Progress(object):
    """ Progress attibutes.
    """
    def __init__(self, ns, total):
        self.ns = ns
        self.curr = 0
        self.total = total
        self.start_time = time.time()

    @property
    def percent(self):
        if self.total > 0:
            return float(self.curr) / self.total * 100
        return float(self.curr + 1) / (self.total + 1) * 100


class ProgressLogger(object):
    """ Report copy progress of collections.

    Collections are copied one after another, so there is no queue in between.
    """
    def __init__(self, n_colls, stream=sys.stdout):
        self._n_colls = n_colls
        self._n_colls_done = 0
        self._stream = stream
        self._ns_map = {}

    def register(self, ns, total):
        """ Register collection.
        """
        if ns in self._ns_map:
            raise KeyError('duplicate collection %s' % ns)
        self._ns_map[ns] = Progress(ns, total)

    def update(self, ns, curr):
        """ Set the cumulative count of copied documents.
        """
        prog = self._get(ns)
        prog.curr = curr
        log.info('\t%s\t%d/%d\t[%.2f%%]' % (prog.ns, prog.curr, prog.total, prog.percent))

    def done(self, ns, curr):
        """ Mark collection as done.
        """
        prog = self._get(ns)
        prog.curr = curr
        self._n_colls_done += 1
        log.info('[ OK ] \t%s\t%d/%d\t[%.2f%%]' % (prog.ns, prog.curr, prog.total, prog.percent))
        if self._stream is not None:
            time_used = time.time() - prog.start_time
            self._stream.write('\r[\033[32m OK \033[0m]\t[%d/%d]\t%s\t%d/%d\t%.1fs\n' % (
                self._n_colls_done, self._n_colls, ns, prog.curr, prog.total, time_used))
            self._stream.flush()
        del self._ns_map[ns]

    def _get(self, ns):
        if ns not in self._ns_map:
            raise KeyError('missing namespace: %s' % ns)
        return self._ns_map[ns]
