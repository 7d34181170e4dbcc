import enum
import socket
import requests
from urllib3.exceptions import NewConnectionError, TimeoutError as Urllib3TimeoutError
from urllib3.util import Timeout
from . import exceptions as exc
from .utils import logh

REDIRECT_LIMIT = 30

# these describe the body of the first request, not who is asking
_framing_headers = ('content-length', 'transfer-encoding')


def _scrub(url):
    """ the query string carries the auth token, keep it out of logs """
    return url.split('?', 1)[0]


def redirect_preserve_headers(request, via):
    """ Redirect policy that puts the headers of the first request in
        the chain back on every subsequent request.

        requests drops Authorization when a redirect changes host
        (Session.rebuild_auth) and the follow up would silently go out
        unauthenticated, so overwrite whatever the session decided. """

    if not via:
        # no redirects
        return

    if len(via) > REDIRECT_LIMIT:
        raise exc.TooManyRedirectsError(f'{len(via)} consecutive requests(redirects)')

    for key, value in via[0].headers.items():
        if key.lower() not in _framing_headers:
            request.headers[key] = value


class FailureKind(enum.Enum):
    timeout = 'timeout'
    network = 'network'


class TransportFailure(Exception):
    """ What the transport raises when no response was obtained.
        kind is the only thing callers should need to look at. """

    def __init__(self, kind, cause):
        super().__init__(f'{kind.value}: {cause}')
        self.kind = kind
        self.cause = cause

    @property
    def timeout(self):
        return self.kind is FailureKind.timeout


def _causes(error):
    stack = [error]
    seen = set()
    while stack:
        e = stack.pop()
        if id(e) in seen:
            continue

        seen.add(id(e))
        yield e
        nested = list(e.args) + [getattr(e, 'reason', None), e.__cause__, e.__context__]
        stack.extend(n for n in nested if isinstance(n, BaseException))


def failure_kind(error):
    """ requests only raises Timeout for timeouts it sees while sending,
        a read timeout hit while pulling the body comes back as a plain
        ConnectionError wrapping the urllib3 error, so look inside """
    for e in _causes(error):
        if isinstance(e, NewConnectionError):
            # refused or unresolvable, urllib3 makes it a ConnectTimeoutError anyway
            continue

        if isinstance(e, (requests.exceptions.Timeout,
                          Urllib3TimeoutError,
                          TimeoutError,
                          socket.timeout)):  # only an alias of TimeoutError since 3.10
            return FailureKind.timeout

    return FailureKind.network


def attempt_timeout(seconds):
    """ The urllib3 timeout for one attempt, None means no deadline.

        A single budget of seconds has to cover both establishing the
        connection and receiving the response headers. urllib3 does the
        bookkeeping for Timeout(total=...), connecting starts its clock
        and if that takes d the header wait only gets seconds - d. """
    if seconds is None:
        return None

    if seconds <= 0:
        e = TimeoutError(f'no time to connect with a timeout of {seconds}s')
        raise TransportFailure(FailureKind.timeout, e)

    return Timeout(total=seconds)


class Transport:
    """ The http executor shared by a family of references.

        Wraps a requests.Session (the connection pool) and follows
        redirects itself so that the redirect policy sees every hop. """

    def __init__(self, session=None, redirect_policy=redirect_preserve_headers):
        self.session = requests.Session() if session is None else session
        self.redirect_policy = redirect_policy

    def submit(self, method, url, body=None, headers=None, timeout=None):
        """ Send method to url and follow any redirects.

            Each attempt gets its own budget of timeout seconds.
            The returned response has already been read to completion
            and released. Raises TransportFailure when there is no
            response to return. """
        request = requests.Request(method, url, data=body, headers=headers)
        prepared = self.session.prepare_request(request)
        logh.debug(f'{method} {_scrub(url)}')
        via = []
        while True:
            resp = self._send(prepared, timeout)
            nxt = resp.next if resp.is_redirect else None
            if nxt is None:
                return self._consume(resp)

            # resolve_redirects already consumed the redirect body
            resp.close()
            via.append(prepared)
            self.redirect_policy(nxt, via)
            logh.debug(f'redirect {len(via)} {resp.status_code} {nxt.method} {_scrub(nxt.url)}')
            prepared = nxt

    def _send(self, prepared, timeout):
        # what Session.request would have picked up, ca bundles, proxies, netrc
        settings = self.session.merge_environment_settings(
            prepared.url, {}, True, None, None)
        try:
            return self.session.send(prepared,
                                     allow_redirects=False,
                                     timeout=attempt_timeout(timeout),
                                     **settings)
        except requests.exceptions.RequestException as e:
            raise TransportFailure(failure_kind(e), e) from e

    @staticmethod
    def _consume(resp):
        try:
            resp.content  # read everything before the connection goes back to the pool
        except requests.exceptions.RequestException as e:
            raise TransportFailure(failure_kind(e), e) from e
        finally:
            resp.close()

        return resp

    def close(self):
        self.session.close()
