import time
import gevent
import gevent.queue
import pymongo
from mongograte.change_event import Insert, Update, Replace, Delete, Other, parse_change
from mongograte.errors import ReplicationEventError
from mongograte.logger import Logger
from mongograte.mongo_utils import gen_namespace

log = Logger.get()


class ChangeReplicator(object):
    """ Replay live changes of a source collection on the target collection.

    The change stream starts at the time of `start`, changes made before are not observed.
    A listener greenlet feeds parsed events into a channel, a consumer greenlet applies them.
    Events are applied at most once, a failed event is logged and lost.
    """
    def __init__(self, src_coll, dst_coll, channel_size=1000, log_interval=10, retry_interval=1):
        self._src_coll = src_coll
        self._dst_coll = dst_coll
        self._channel = gevent.queue.Queue(maxsize=channel_size)
        self._log_interval = log_interval
        self._retry_interval = retry_interval
        self._last_logtime = time.time()
        self._handlers = {
            Insert: self._apply_insert,
            Update: self._apply_update,
            Replace: self._apply_replace,
            Delete: self._apply_delete,
            Other: self._apply_other,
        }
        self.n_applied = 0
        self.n_failed = 0
        self.n_ignored = 0

    @property
    def src_ns(self):
        return gen_namespace(self._src_coll.database.name, self._src_coll.name)

    @property
    def dst_ns(self):
        return gen_namespace(self._dst_coll.database.name, self._dst_coll.name)

    def start(self):
        """ Subscribe to the change stream and start replaying.

        Return the listener and consumer greenlets.
        """
        stream = self._src_coll.watch()
        log.info('    Listening changes in: %s' % self.src_ns)
        return [gevent.spawn(self._listen, stream), gevent.spawn(self._consume)]

    def _listen(self, stream):
        """ Read the change stream into the channel, resubscribe if it breaks.
        """
        while True:
            try:
                with stream:
                    for change in stream:
                        event = self._parse(change)
                        if event is not None:
                            self._channel.put(event)
                log.warning('change stream of %s closed' % self.src_ns)
                return
            except pymongo.errors.PyMongoError as e:
                log.error('change stream of %s failed: %s' % (self.src_ns, e))
            gevent.sleep(self._retry_interval)
            stream = self._subscribe()

    def _parse(self, change):
        """ Translate a change document, log and skip it if malformed.
        """
        try:
            return parse_change(change)
        except Exception as e:
            self.n_failed += 1
            kind = change.get('operationType', 'unknown') if isinstance(change, dict) else 'unknown'
            log.error('%s' % ReplicationEventError(self.src_ns, kind, e))
            return None

    def _subscribe(self):
        """ Subscribe again from now, changes in between are lost.
        """
        while True:
            try:
                stream = self._src_coll.watch()
                log.info('resubscribed to changes in %s' % self.src_ns)
                return stream
            except pymongo.errors.PyMongoError as e:
                log.error('resubscribe to %s failed: %s' % (self.src_ns, e))
                gevent.sleep(self._retry_interval)

    def _consume(self):
        while True:
            event = self._channel.get()
            self.handle(event)
            self._log_progress()

    def handle(self, event):
        """ Apply an event, log failures instead of raising.

        Return True if the event was applied.
        """
        try:
            self.apply(event)
            return True
        except ReplicationEventError as e:
            self.n_failed += 1
            log.error('%s' % e)
            return False

    def apply(self, event):
        """ Apply an event to the target collection.
        """
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError('unsupported change event: %r' % (event,))
        log.debug('Change detected in %s: %s' % (self.src_ns, event.kind))
        try:
            handler(event)
        except Exception as e:
            raise ReplicationEventError(self.dst_ns, event.kind, e)

    def _apply_insert(self, event):
        self._dst_coll.insert_one(event.document)
        self.n_applied += 1

    def _apply_update(self, event):
        update = {}
        if event.updated_fields:
            update['$set'] = event.updated_fields
        if event.removed_fields:
            update['$unset'] = dict((field, '') for field in event.removed_fields)
        if not update:
            self.n_ignored += 1
            return
        res = self._dst_coll.update_one({'_id': event.doc_id}, update)
        if res.matched_count == 0:
            log.warning('update on %s matched no document: %s' % (self.dst_ns, event.doc_id))
        self.n_applied += 1

    def _apply_replace(self, event):
        res = self._dst_coll.replace_one({'_id': event.doc_id}, event.document)
        if res.matched_count == 0:
            log.warning('replace on %s matched no document: %s' % (self.dst_ns, event.doc_id))
        self.n_applied += 1

    def _apply_delete(self, event):
        self._dst_coll.delete_one({'_id': event.doc_id})
        self.n_applied += 1

    def _apply_other(self, event):
        self.n_ignored += 1
        log.info('Operation not supported on %s: %s' % (self.src_ns, event.kind))

    def _log_progress(self):
        """ Print counters periodically.
        """
        now = time.time()
        if now - self._last_logtime >= self._log_interval:
            log.info('%s => %s - %d applied - %d failed - %d ignored' % (
                self.src_ns, self.dst_ns, self.n_applied, self.n_failed, self.n_ignored))
            self._last_logtime = now
