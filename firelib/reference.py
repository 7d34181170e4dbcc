""" A Reference names one location in a realtime database and carries
everything needed to talk to it, the url, the query parameters that go
with every request, optionally a shared auth token store, the timeout,
and the transport (connection pool) it shares with every reference
derived from it.

The url and the parameters belong to exactly one reference. Deriving a
new reference (child, ref, push, the query modifiers) always copies
them so nothing done to the new reference is visible through the old
one or the other way around. The shared auth store and the transport
are the only things that are intentionally shared. """

from urllib.parse import urlencode, urlsplit
from firelib import exceptions as exc
from firelib import serialize
from firelib.config import default_timeout
from firelib.core import Transport, TransportFailure
from firelib.query import Query, authParam
from firelib.utils import ReaderWriterLock, sanitize_url, log

_default = object()


class Reference(Query):
    """ A location in the cloud. """

    def __init__(self, url, transport=None, timeout=_default):
        self._url = sanitize_url(url)
        self._transport = Transport() if transport is None else transport
        self._timeout = default_timeout() if timeout is _default else timeout
        self._shared_auth = None
        self._params_lock = ReaderWriterLock()
        self._params = {}

    def __repr__(self):
        return f'{self.__class__.__name__}({self._url!r})'

    def __str__(self):
        return self.resolve()

    ## configuration

    @property
    def url(self):
        return self._url

    def set_url(self, url):
        self._url = sanitize_url(url)

    @property
    def timeout(self):
        """ seconds to connect and receive headers, None to wait forever """
        return self._timeout

    @timeout.setter
    def timeout(self, seconds):
        self._timeout = seconds

    @property
    def transport(self):
        return self._transport

    def _set_param(self, key, value):
        with self._params_lock.write_locked():
            self._params[key] = [value]

    def _del_param(self, key):
        with self._params_lock.write_locked():
            self._params.pop(key, None)

    def auth(self, token):
        """ authenticate with token as the auth query parameter """
        self._set_param(authParam, token)

    def unauth(self):
        """ stop sending the auth query parameter """
        self._del_param(authParam)

    def set_shared_auth(self, store):
        """ Use the token in store for every request, None to unbind.

            While a store is bound its token replaces anything
            set by auth. The store is held by an ordinary reference,
            not a weakref, so it stays alive as long as it is bound. """
        with self._params_lock.write_locked():
            self._shared_auth = store

    @property
    def shared_auth(self):
        return self._shared_auth

    def resolve(self):
        """ the url a request for this location is actually sent to """
        path = self._url + '/.json'
        with self._params_lock.read_locked():
            params = {k: list(v) for k, v in self._params.items()}
            shared = self._shared_auth

        if shared is not None:
            params[authParam] = [shared.get()]

        if params:
            path += '?' + urlencode(sorted(params.items()), doseq=True)

        return path

    ## derivation

    def _copy(self):
        c = self.__class__(self._url, transport=self._transport, timeout=self._timeout)
        with self._params_lock.read_locked():
            # new lists as well as a new dict, values must never be shared
            c._params = {k: list(v) for k, v in self._params.items()}
            c._shared_auth = self._shared_auth

        return c

    def child(self, segment):
        """ a new reference for the child at segment with the same configuration """
        c = self._copy()
        segment = '/'.join(s for s in segment.split('/') if s)
        if segment:
            c._url = c._url + '/' + segment

        return c

    def ref(self, path):
        """ a new reference at path on the same database """
        url = self._url
        try:
            parts = urlsplit(url)
        except ValueError as e:
            raise exc.MalformedURLError(f'cannot parse {url!r}: {e}') from e

        if not parts.scheme or not parts.netloc:
            raise exc.MalformedURLError(f'no scheme or host in {url!r}')

        c = self._copy()
        c._url = sanitize_url(f'{parts.scheme}://{parts.netloc}/{path.strip("/")}')
        return c

    def push(self, value):
        """ create a child with a generated key holding value and return it """
        body = serialize.dumps(value)
        _, blob = self.create(body)
        response = serialize.loads(blob)
        name = response.get('name') if isinstance(response, dict) else None
        if not name or not isinstance(name, str):
            msg = f'no name in response to create at {self.url}: {blob[:200]!r}'
            raise exc.SerializationError(msg)

        c = self._copy()
        c._url = c._url + '/' + name
        log.info(f'created {c.url}')
        return c

    ## values

    def set(self, value):
        """ replace the value at this location """
        self.replace(serialize.dumps(value))

    def update(self, value):
        """ update only the children named in value """
        self.merge(serialize.dumps(value))

    def value(self, into=None):
        """ the current value at this location, into converts the decoded json """
        _, blob = self.read()
        return serialize.loads(blob, into=into)

    get = value

    def remove(self):
        """ delete this location and everything below it """
        self.delete()

    ## requests

    def create(self, payload=None, headers=None):
        return self._request('POST', payload, headers)

    def replace(self, payload=None, headers=None):
        return self._request('PUT', payload, headers)

    def merge(self, payload=None, headers=None):
        return self._request('PATCH', payload, headers)

    def read(self, headers=None):
        return self._request('GET', None, headers)

    def delete(self, headers=None):
        return self._request('DELETE', None, headers)

    def _request(self, method, body=None, headers=None):
        """ send one request, returns response headers and body bytes """
        url = self._url
        target = self.resolve()
        timeout = self._timeout  # changing it later does not touch this request
        try:
            resp = self._transport.submit(
                method, target, body=body, headers=headers, timeout=timeout)
        except TransportFailure as e:
            if e.timeout:
                msg = f'{method} {url} timed out (timeout={timeout}s): {e.cause}'
                raise exc.TimeoutError(msg) from e.cause

            raise exc.TransportError(f'{method} {url} failed: {e.cause}') from e.cause

        if resp.status_code // 100 != 2:
            log.error(f'{method} {url} {resp.status_code}')
            raise exc.RemoteError(resp.content.decode(errors='replace'),
                                  status_code=resp.status_code,
                                  headers=resp.headers)

        return resp.headers, resp.content
