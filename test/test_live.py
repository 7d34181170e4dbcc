""" requests that go over a real socket to a server in this process """

import json
import socket
import threading
import time
import unittest
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import pytest
import requests
import firelib
from firelib import exceptions as exc

stall = 1.5


class Handler(BaseHTTPRequestHandler):
    protocol_version = 'HTTP/1.1'

    def log_message(self, format, *args):
        pass

    def _reply(self, status, body, headers=()):
        self.send_response(status)
        for key, value in headers:
            self.send_header(key, value)

        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        path = self.path.split('?', 1)[0]
        if path == '/slow/.json':
            time.sleep(stall)  # headers held back
            try:
                self._reply(200, b'null')
            except (BrokenPipeError, ConnectionResetError):
                pass  # the client gave up, as it should
        elif path == '/ok/.json':
            self._reply(200, b'{"a": 1}')
        elif path == '/bounce/.json':
            location = self.server.bounce_to + '/echo/.json'
            self._reply(307, b'', [('Location', location)])
        elif path == '/echo/.json':
            body = {'authorization': self.headers.get('Authorization')}
            self._reply(200, json.dumps(body).encode())
        else:
            self._reply(404, b'not found')

    def do_POST(self):
        self.rfile.read(int(self.headers['Content-Length']))
        self._reply(200, b'{"name": "-Nx1"}')


def serve():
    server = ThreadingHTTPServer(('127.0.0.1', 0), Handler)
    server.daemon_threads = True
    server.bounce_to = None
    threading.Thread(target=server.serve_forever, daemon=True).start()
    return server


def base(server):
    host, port = server.server_address[:2]
    return f'http://{host}:{port}'


def live_reference(url, timeout=5):
    session = requests.Session()
    session.trust_env = False  # no proxies between us and localhost
    return firelib.Reference(url, transport=firelib.Transport(session=session),
                             timeout=timeout)


class TestLive(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.server = serve()
        cls.other = serve()  # different port, so a different origin
        cls.server.bounce_to = base(cls.other)
        cls.base = base(cls.server)

    @classmethod
    def tearDownClass(cls):
        for server in (cls.server, cls.other):
            server.shutdown()
            server.server_close()

    def test_value(self):
        assert live_reference(self.base + '/ok').value() == {'a': 1}

    def test_header_wait_past_timeout(self):
        ref = live_reference(self.base + '/slow', timeout=0.3)
        start = time.monotonic()
        with pytest.raises(exc.TimeoutError):
            ref.value()

        elapsed = time.monotonic() - start
        assert 0.25 <= elapsed < 1.0, elapsed

    def test_remote_error(self):
        with pytest.raises(exc.RemoteError) as e:
            live_reference(self.base + '/missing').value()

        assert e.value.status_code == 404
        assert str(e.value) == 'not found'

    def test_push(self):
        ref = live_reference(self.base + '/list')
        assert ref.push({'a': 1}).url == self.base + '/list/-Nx1'

    def test_cross_origin_redirect_keeps_auth(self):
        ref = live_reference(self.base + '/bounce')
        _, body = ref.read(headers={'Authorization': 'Bearer s3cret'})
        assert json.loads(body) == {'authorization': 'Bearer s3cret'}

    def test_refused(self):
        sock = socket.socket()
        sock.bind(('127.0.0.1', 0))
        port = sock.getsockname()[1]
        sock.close()  # nothing listens here now
        with pytest.raises(exc.TransportError):
            live_reference(f'http://127.0.0.1:{port}/a').value()
