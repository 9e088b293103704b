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

"""

The HTTP transport used by the batch scheduler to perform single operations.

Every request is made through a brand new `httplib2.Http` instance, so no two
operations ever share (and wait on) the same connection.

"""

from http.client import HTTPException
import json
import logging
from urllib.parse import urlencode, urlsplit, urlunsplit

import httplib2

from chainbatch.errors import BatchError, TransportError

log = logging.getLogger(__name__)

JSON_TYPES = ('application/json', 'text/json')


class HTTPClient(httplib2.Http):

    """An `httplib2.Http` that dumps its requests and responses to the
    ``chainbatch.transport.request`` and ``chainbatch.transport.response``
    loggers when they are enabled for debugging."""

    def request(self, uri, method="GET", body=None, headers=None, redirections=httplib2.DEFAULT_MAX_REDIRECTS, connection_type=None):
        req_log = logging.getLogger('.'.join((__name__, 'request')))
        if req_log.isEnabledFor(logging.DEBUG):
            if headers is None:
                headeritems = ()
            else:
                headeritems = headers.items()
            req_log.debug('Making request:\n%s %s\n%s\n\n%s', method, uri,
                '\n'.join([
                    '%s: %s' % (k, v) for k, v in headeritems
                ]), body or '')

        response, content = super(HTTPClient, self).request(uri, method, body, headers, redirections, connection_type)

        resp_log = logging.getLogger('.'.join((__name__, 'response')))
        if resp_log.isEnabledFor(logging.DEBUG):
            resp_log.debug('Got response:\n%s\n\n%s',
                '\n'.join([
                    '%s: %s' % (k, v) for k, v in response.items()
                ]), content)

        return response, content


def build_url(url, params):
    """Returns `url` with the mapping `params` encoded into its query string.

    Parameters already present in `url` are kept. Sequence values become
    repeated parameters.

    """
    if not params:
        return url
    scheme, netloc, path, query, fragment = urlsplit(url)
    extra = urlencode(params, doseq=True)
    query = '&'.join(q for q in (query, extra) if q)
    return urlunsplit((scheme, netloc, path, query, fragment))


def encode_body(data, format):
    """Encodes the mapping `data` as a request body in the given format.

    Returns a tuple of the body text and its content type.

    """
    if format == 'json':
        return json.dumps(data), 'application/json'
    if format == 'form':
        return urlencode(data, doseq=True), 'application/x-www-form-urlencoded'
    raise BatchError('Unknown body format %r' % (format,))


def is_json(response):
    content_type = response.get('content-type', '')
    mimetype = content_type.split(';', 1)[0].strip().lower()
    return mimetype in JSON_TYPES or mimetype.endswith('+json')


def parse_body(response, content, format='json'):
    """Decodes the raw `content` of an HTTP response.

    Bodies declared as JSON by the response's content type are parsed into
    structured values. A response without a content type is parsed as JSON if
    the client speaks JSON. Anything else is returned as text. An empty body
    decodes to `None`.

    If a body that should be JSON cannot be parsed, a `ValueError` is raised.

    """
    if not content:
        return None
    if is_json(response) or ('content-type' not in response and format == 'json'):
        return json.loads(content)
    if isinstance(content, bytes):
        return content.decode('utf-8', 'replace')
    return content


class Transport(object):

    """Performs single HTTP requests for a batch.

    Optional parameter `proxy_info` is passed through to every
    `httplib2.Http` instance the transport creates. By default proxies are
    configured from the environment.

    """

    def __init__(self, proxy_info=httplib2.proxy_info_from_environment):
        self.proxy_info = proxy_info

    def http(self, timeout):
        return HTTPClient(timeout=timeout, proxy_info=self.proxy_info)

    def send(self, method, url, headers=None, params=None, data=None, format='json', timeout=None):
        """Sends one request and returns its `httplib2.Response` and raw
        content.

        Empty `params` and `data` are not sent at all. A ``DELETE`` never
        carries a body.

        If the request cannot be made or times out, a `TransportError` is
        raised.

        """
        headers = dict(headers or {})
        uri = build_url(url, params)
        body = None
        if data and method != 'DELETE':
            body, content_type = encode_body(data, format)
            if not any(k.lower() == 'content-type' for k in headers):
                headers['content-type'] = content_type

        http = self.http(timeout)
        try:
            return http.request(uri, method=method, body=body, headers=headers)
        except (httplib2.HttpLib2Error, HTTPException, OSError) as exc:
            log.debug('Request %s %s failed: %r', method, uri, exc)
            raise TransportError(method, uri, exc)
        finally:
            http.close()
