import io
import requests
from requests.structures import CaseInsensitiveDict
from urllib3.exceptions import ReadTimeoutError
import firelib


class Body(io.BytesIO):
    """ response body that remembers whether it was released """

    released = False

    def release_conn(self):
        self.released = True


class StalledBody(Body):
    """ the headers arrived but the body never does """

    def stream(self, chunk_size, decode_content=True):
        raise ReadTimeoutError(None, None, 'Read timed out.')
        yield


def make_response(request, status=200, body=b'', headers=None, raw=None):
    if isinstance(body, str):
        body = body.encode()

    resp = requests.Response()
    resp.status_code = status
    resp.reason = 'mock'
    resp.headers = CaseInsensitiveDict(headers or {})
    resp.raw = Body(body) if raw is None else raw
    resp.encoding = 'utf-8'
    resp.url = request.url
    resp.request = request
    return resp


class MockAdapter(requests.adapters.HTTPAdapter):
    """ Stands in for the database.

        replies is a list of (status, body) or (status, body, headers)
        tuples, or exceptions to raise, consumed in order with the last
        one repeating. handler(request, **kwargs) can be passed instead
        and may return the same things or a response. """

    def __init__(self, replies=None, handler=None):
        super().__init__()
        self.requests = []
        self.timeouts = []
        self.sends = []
        self.responses = []
        self._replies = list(replies or [(200, b'null')])
        self._handler = handler

    def send(self, request, **kwargs):
        self.requests.append(request)
        self.timeouts.append(kwargs.get('timeout'))
        self.sends.append(kwargs)
        if self._handler is not None:
            reply = self._handler(request, **kwargs)
        elif len(self._replies) > 1:
            reply = self._replies.pop(0)
        else:
            reply = self._replies[0]

        if isinstance(reply, BaseException):
            raise reply

        if isinstance(reply, requests.Response):
            resp = reply
        else:
            resp = make_response(request, *reply)

        resp.connection = self
        self.responses.append(resp)
        return resp


def mock_reference(url='https://x.example.com/a', replies=None, handler=None,
                   timeout=10, **kwargs):
    """ reference whose transport never leaves the process """
    adapter = MockAdapter(replies=replies, handler=handler)
    session = requests.Session()
    session.mount('https://', adapter)
    session.mount('http://', adapter)
    transport = firelib.Transport(session=session, **kwargs)
    ref = firelib.Reference(url, transport=transport, timeout=timeout)
    return ref, adapter
