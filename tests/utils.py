# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import json
import logging
import threading
import time

import httplib2

DELAY = 1.0


def log():
    """Sends all chainbatch logging to the console, for running a test
    module directly."""
    logging.basicConfig(level=logging.DEBUG,
        format='%(asctime)s %(threadName)s %(name)s %(levelname)s %(message)s')


def response(body, status=200, content_type='application/json'):
    """Returns an `httplib2.Response` and raw content as a transport would."""
    headers = {'status': str(status)}
    if content_type is not None:
        headers['content-type'] = content_type
    if not isinstance(body, bytes):
        body = json.dumps(body).encode('utf-8')
    return httplib2.Response(headers), body


class FakeTransport(object):

    """A transport that answers from a mapping of URL to response body,
    recording what it was asked to send.

    A route may also be an exception to raise, a callable returning the body
    for the request, or an ``(response, content)`` tuple to return as is.
    Optional `delays` maps URLs to seconds to wait before answering.

    """

    def __init__(self, routes, delays=None):
        self.routes = routes
        self.delays = delays or {}
        self.sent = []
        self.lock = threading.Lock()

    def urls(self):
        with self.lock:
            return [request['url'] for request in self.sent]

    def send(self, method, url, headers=None, params=None, data=None, format='json', timeout=None):
        with self.lock:
            self.sent.append({
                'method': method,
                'url': url,
                'headers': dict(headers or {}),
                'params': dict(params or {}),
                'data': dict(data or {}),
                'format': format,
                'timeout': timeout,
            })
        if url in self.delays:
            time.sleep(self.delays[url])

        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        if isinstance(route, tuple):
            return route
        if callable(route):
            route = route(method, params, data)
        return response(route)


class EchoHandler(BaseHTTPRequestHandler):

    """Answers every request with the JSON list ``[path, method, body]``.

    ``/time`` answers after `DELAY` seconds, ``/text`` answers in plain text
    and ``/broken`` answers with a body that claims to be, but isn't, JSON.

    """

    def echo(self):
        length = int(self.headers.get('content-length') or 0)
        body = self.rfile.read(length).decode('utf-8') if length else ''

        content_type = 'application/json'
        if self.path == '/time':
            time.sleep(DELAY)
        if self.path == '/text':
            content_type = 'text/plain'
            content = 'just text'
        elif self.path == '/broken':
            content = '{"oops": '
        else:
            content = json.dumps([self.path, self.command, body])

        content = content.encode('utf-8')
        self.send_response(200)
        self.send_header('Content-Type', content_type)
        self.send_header('Content-Length', str(len(content)))
        self.end_headers()
        self.wfile.write(content)

    do_GET = do_POST = do_PUT = do_DELETE = echo

    def log_message(self, format, *args):
        pass


class EchoServer(object):

    """An echo HTTP server running on a thread of its own."""

    def __init__(self):
        self.server = ThreadingHTTPServer(('127.0.0.1', 0), EchoHandler)
        self.server.daemon_threads = True
        self.thread = threading.Thread(target=self.server.serve_forever)
        self.thread.daemon = True

    @property
    def base(self):
        host, port = self.server.server_address[:2]
        return 'http://%s:%d' % (host, port)

    def start(self):
        self.thread.start()
        return self

    def stop(self):
        self.server.shutdown()
        self.server.server_close()
