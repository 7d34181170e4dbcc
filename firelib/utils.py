import logging
import threading
from contextlib import contextmanager
from firelib.config import auth


## logging

def makeSimpleLogger(name, level=logging.INFO):
    # TODO use extra ...
    logger = logging.getLogger(name)
    logger.setLevel(level)
    ch = logging.StreamHandler()  # FileHander goes to disk
    fmt = ('[%(asctime)s] - %(levelname)8s - '
           '%(name)14s - '
           '%(filename)16s:%(lineno)-4d - '
           '%(message)s')
    formatter = logging.Formatter(fmt)
    ch.setFormatter(formatter)
    logger.addHandler(ch)
    return logger


log = makeSimpleLogger('firelib', level=(auth.get('log-level') or 'INFO').upper())
logh = log.getChild('http')


## locking

class ReaderWriterLock:
    """ Many concurrent readers or exactly one writer.

        Writers queue on the turnstile so a steady stream of
        readers cannot starve them. """

    def __init__(self):
        self._turnstile = threading.Semaphore(1)
        self._readers = 0
        self._readers_lock = threading.Lock()
        self._write_lock = threading.Lock()

    def acquire_read(self):
        self._turnstile.acquire()
        with self._readers_lock:
            self._readers += 1
            if self._readers == 1:
                # first reader locks out writers
                self._write_lock.acquire()
        self._turnstile.release()

    def release_read(self):
        with self._readers_lock:
            self._readers -= 1
            if self._readers == 0:
                # last reader lets writers back in
                self._write_lock.release()

    def acquire_write(self):
        self._turnstile.acquire()
        self._write_lock.acquire()

    def release_write(self):
        self._write_lock.release()
        self._turnstile.release()

    @contextmanager
    def read_locked(self):
        self.acquire_read()
        try:
            yield self
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self):
        self.acquire_write()
        try:
            yield self
        finally:
            self.release_write()


## urls

def sanitize_url(url):
    """ https:// if no scheme was given, never a trailing slash """
    if not url.startswith('https://') and not url.startswith('http://'):
        url = 'https://' + url

    return url.rstrip('/')
