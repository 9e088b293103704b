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

import copy

METHODS = ('GET', 'POST', 'PUT', 'DELETE')


def merge(target, source):
    """Recursively merges the mapping `source` into the mapping `target`,
    returning `target`."""
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
    return target


class Operation(object):

    """One HTTP request queued in a `Batch`.

    `index` is the operation's position in its batch, which is also the
    position of its result in the batch's results. `dependencies` is filled in
    when the batch is executed.

    """

    def __init__(self, method, path, data=None, params=None, headers=None, index=None):
        self.method = method
        self.path = path
        self.data = dict(data or {})
        self.params = dict(params or {})
        self.headers = dict(headers or {})
        self.index = index
        self.post_modifiers = []
        self.dependencies = []

    def snapshot(self):
        """Returns a copy of this operation that can be modified without
        affecting it."""
        op = Operation(self.method, self.path,
            copy.deepcopy(self.data),
            copy.deepcopy(self.params),
            copy.deepcopy(self.headers),
            index=self.index)
        op.post_modifiers = list(self.post_modifiers)
        return op

    def __repr__(self):
        return '<Operation %s: %s %s>' % (self.index, self.method, self.path)


class Result(object):

    """The outcome of a successful operation: its decoded (and modified) body
    and the `httplib2.Response` describing the response."""

    def __init__(self, body, response):
        self.body = body
        self.response = response

    @property
    def status(self):
        return self.response.status

    def __repr__(self):
        return '<Result %s: %r>' % (self.status, self.body)
