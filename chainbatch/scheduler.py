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

The batch scheduler, which performs the operations of a batch concurrently
while respecting the dependencies between them.

The scheduler runs on the thread that executes the batch. It dispatches every
operation whose prerequisites have all succeeded to a worker thread of its
own, then waits for outcomes, dispatching further operations as the
operations they depend on complete. A batch without dependency references is
just the case where every operation is ready from the start.

Dependency references are replaced and request modifiers are applied on the
scheduler's thread, immediately before an operation is dispatched. Sending,
decoding the response and applying response modifiers happen on the
operation's worker thread.

"""

from concurrent.futures import ThreadPoolExecutor
import logging
import queue

from chainbatch.dependency import analyze, inject
from chainbatch.errors import BatchError, TransportError
from chainbatch.modifiers import apply_request_modifiers, apply_response_modifiers
from chainbatch.operation import Result
from chainbatch.transport import parse_body

log = logging.getLogger(__name__)


class Scheduler(object):

    """Executes a list of operations once.

    Parameter `operations` is the list of `Operation` instances to perform,
    whose `index` attributes must be their positions in the list. They are
    modified as they are executed. Parameter `transport` is the object with a
    `send()` method that performs each HTTP request, and `modifiers` a
    sequence of ``(name, modifier)`` request modifiers to apply to every
    operation.

    """

    def __init__(self, operations, transport, modifiers=(), format='json', timeout=None):
        self.operations = operations
        self.transport = transport
        self.modifiers = tuple(modifiers)
        self.format = format
        self.timeout = timeout
        self.has_dependencies = False

    def run(self, callback):
        """Performs the operations and calls `callback` once with the outcome.

        The callback is called as ``callback(error, results, operations)``.
        If every operation succeeds, `error` is `None` and `results` lists the
        `Result` of each operation in batch order. When there is only one
        operation, `results` is that operation's `Result` (or `None`) instead
        of a list.

        If an operation fails, the callback is called as soon as the failure
        is known, with the error and the results collected so far (`None` for
        operations that did not complete). Operations not yet dispatched never
        are. Operations already in flight are not waited for, and their
        results are not reported.

        If a request modifier fails, the callback receives the error and
        `None` for the results.

        Dependency errors found by analysis are raised before any request is
        made. A path expression that fails on the body it is applied to is
        reported to the callback like a request modifier failure.

        """
        operations = self.operations
        self.has_dependencies = analyze(operations)
        log.debug('Executing batch of %d operations (dependencies: %s)',
            len(operations), self.has_dependencies)
        if not operations:
            callback(None, [], operations)
            return

        error, results = self.schedule(operations)
        if error is not None:
            log.warning('Batch failed: %s', error)
        if results is not None and len(results) == 1:
            results = results[0]
        callback(error, results, operations)

    def schedule(self, operations):
        waiting = dict((op.index, set(op.dependencies)) for op in operations)
        results = [None] * len(operations)
        bodies = {}
        outcomes = queue.Queue()
        inflight = 0

        executor = ThreadPoolExecutor(max_workers=len(operations),
            thread_name_prefix='chainbatch')
        try:
            while True:
                ready = sorted(index for index, deps in waiting.items()
                    if deps.issubset(bodies))
                for index in ready:
                    del waiting[index]
                    operation = operations[index]
                    try:
                        self.prepare(operation, bodies)
                    except BatchError as exc:
                        return exc, None
                    log.debug('Dispatching %r', operation)
                    executor.submit(self.perform, operation, outcomes)
                    inflight += 1

                if not inflight:
                    return None, results

                index, result, error = outcomes.get()
                inflight -= 1
                if error is not None:
                    return error, results
                log.debug('Operation %d completed with status %s', index, result.status)
                results[index] = result
                bodies[index] = result.body
        finally:
            executor.shutdown(wait=False)

    def prepare(self, operation, bodies):
        if operation.dependencies:
            inject(operation, bodies)
        apply_request_modifiers(self.modifiers, operation)

    def perform(self, operation, outcomes):
        """Sends one operation and puts its outcome on the `outcomes`
        queue."""
        try:
            response, content = self.transport.send(operation.method,
                operation.path, headers=operation.headers,
                params=operation.params, data=operation.data,
                format=self.format, timeout=self.timeout)
            try:
                body = parse_body(response, content, self.format)
            except ValueError as exc:
                raise TransportError(operation.method, operation.path, exc)
            body = apply_response_modifiers(operation, body, response)
        except Exception as exc:
            if isinstance(exc, TransportError) and exc.index is None:
                exc.index = operation.index
            outcomes.put((operation.index, None, exc))
        else:
            outcomes.put((operation.index, Result(body, response), None))
