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

The batch client provides a chaining interface for queueing HTTP requests
against one API and performing them together, dispatching the combined
results to a single callback.

"""

from collections.abc import Mapping
import logging

from chainbatch.errors import BatchError
from chainbatch.operation import METHODS, Operation, merge
from chainbatch.scheduler import Scheduler
from chainbatch.transport import Transport

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
FORMATS = ('json', 'form')


class Batch(object):

    """A collection of HTTP requests that should be performed together.

    Requests are added with `get()`, `post()`, `put()` and `delete()`, each of
    which returns the batch itself so calls can be chained::

    >>> client.get('/users/1').post('/notes', {'owner': jsonpath('$.id')}).execute(callback)

    The `add_data()`, `add_params()`, `add_headers()` and
    `add_post_modifier()` methods apply to the most recently added request
    unless another `Operation` is given.

    A `Batch` can also be used with the ``with`` statement, in which case it
    is executed at the end of the ``with`` block::

    >>> with client.batch(callback) as batch:
    ...     batch.get('/users/1')

    """

    def __init__(self, client, callback=None):
        self.client = client
        self.callback = callback
        self.operations = list()
        self.has_dependencies = False

    def __len__(self):
        """Returns the number of requests in the batch."""
        return len(self.operations)

    def tail(self):
        """Returns the most recently added `Operation`.

        If the batch is empty, a `BatchError` is raised.

        """
        if not self.operations:
            raise BatchError("There's no request in the batch to modify")
        return self.operations[-1]

    def add_operation(self, method, path, data=None, params=None):
        """Adds a request to the batch and returns its `Operation`.

        Parameter `path` is appended to the client's base URL. Optional
        parameters `data` and `params` are mappings of the request body and
        query string parameters. Their values may be dependency references to
        earlier requests in the batch.

        """
        method = method.upper()
        if method not in METHODS:
            raise BatchError('Unsupported request method %r' % (method,))
        operation = Operation(method, self.client.base + path, data, params,
            index=len(self.operations))
        self.operations.append(operation)
        return operation

    def get(self, path, params=None):
        self.add_operation('GET', path, params=params)
        return self

    def post(self, path, data=None, params=None):
        self.add_operation('POST', path, data, params)
        return self

    def put(self, path, data=None, params=None):
        self.add_operation('PUT', path, data, params)
        return self

    def delete(self, path, params=None):
        self.add_operation('DELETE', path, params=params)
        return self

    def _update(self, attr, values, replace, operation):
        if operation is None:
            operation = self.tail()
        if replace:
            setattr(operation, attr, dict(values))
        else:
            merge(getattr(operation, attr), values)
        return self

    def add_data(self, data, replace=False, operation=None):
        """Adds body data to a request, merging it into the data already there
        unless `replace` is true."""
        return self._update('data', data, replace, operation)

    def add_params(self, params, replace=False, operation=None):
        """Adds query string parameters to a request, merging them into the
        parameters already there unless `replace` is true."""
        return self._update('params', params, replace, operation)

    def add_headers(self, headers, replace=False, operation=None):
        return self._update('headers', headers, replace, operation)

    def add_post_modifier(self, modifier, operation=None):
        """Adds a response modifier to a request.

        Response modifiers are called in the order they were added as
        ``modifier(body, response, operation)``, and return the body to use in
        place of `body`.

        """
        if operation is None:
            operation = self.tail()
        operation.post_modifiers.append(modifier)
        return self

    def execute(self, callback=None):
        """Performs the requests in the batch.

        Parameter `callback` (or the callback the batch was opened with) is
        called once, as ``callback(error, results, operations)``, when every
        request has completed or as soon as one fails. The same three values
        are returned.

        The requests performed are copies of the batch's operations, so the
        batch can be executed again. If a dependency reference can't be
        satisfied, a `DependencyError` is raised before any request is made.

        """
        if callback is None:
            callback = self.callback
        operations = [op.snapshot() for op in self.operations]
        scheduler = Scheduler(operations, self.client.transport,
            self.client.modifiers.items(), format=self.client.format,
            timeout=self.client.timeout)

        outcome = []
        def complete(error, results, operations):
            outcome.extend((error, results, operations))
            if callback is not None:
                callback(error, results, operations)

        try:
            scheduler.run(complete)
        finally:
            self.has_dependencies = scheduler.has_dependencies
        return tuple(outcome)

    def clear(self):
        """Discards the requests in the batch without performing them."""
        del self.operations[:]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is not None:
            # Exception! Let's forget the whole thing.
            log.debug('Discarding batch of %d requests after %s',
                len(self), exc_type.__name__)
            self.clear()
        else:
            self.execute()


class Client(object):

    """A client for making batches of HTTP requests to one API.

    Parameter `base` is the base URL of the API, to which the paths of all
    requests are appended. Optional parameter `format` selects how request
    bodies are encoded: ``'json'`` (the default) or ``'form'``. Optional
    parameter `timeout` is the number of seconds to allow each request.
    Optional parameter `transport` is the object that performs single HTTP
    requests; by default it's a new `chainbatch.transport.Transport`.

    """

    def __init__(self, base, format='json', timeout=DEFAULT_TIMEOUT, transport=None):
        if format not in FORMATS:
            raise BatchError('Unknown body format %r' % (format,))
        if transport is None:
            transport = Transport()
        self.base = base
        self.format = format
        self.timeout = timeout
        self.transport = transport
        self.modifiers = dict()

    def add_modifier(self, name, modifier):
        """Registers a request modifier under the given name.

        Request modifiers are called with each `Operation` of every batch just
        before it is sent, in the order they were registered, and may change
        it as they like. If a modifier raises an exception, the batch is
        aborted.

        Modifiers must not be added or removed while a batch of this client
        is executing.

        """
        self.modifiers[name] = modifier

    def add_modifiers(self, modifiers):
        """Registers several request modifiers, given as a mapping or a
        sequence of ``(name, modifier)`` pairs."""
        if isinstance(modifiers, Mapping):
            modifiers = modifiers.items()
        for name, modifier in modifiers:
            self.add_modifier(name, modifier)

    def remove_modifier(self, name):
        self.modifiers.pop(name, None)

    def batch(self, callback=None):
        """Opens a new, empty `Batch`."""
        return Batch(self, callback)

    def get(self, path, params=None):
        return self.batch().get(path, params)

    def post(self, path, data=None, params=None):
        return self.batch().post(path, data, params)

    def put(self, path, data=None, params=None):
        return self.batch().put(path, data, params)

    def delete(self, path, params=None):
        return self.batch().delete(path, params)
