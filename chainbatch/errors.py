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

Exceptions raised by the batch client, the dependency analyzer and the batch
scheduler.

Construction errors (`DependencyError` and plain `BatchError` misuse) are
raised synchronously. Everything that goes wrong once the batch is running is
delivered to the batch callback as one of `ModifierError` or
`TransportError`.

"""


class BatchError(Exception):
    """An Exception raised when a `Batch` cannot be built, analyzed, or
    completed."""
    pass


class DependencyError(BatchError):
    """An exception raised when an operation's dependency reference cannot
    be satisfied by the batch it is in."""

    def __init__(self, index, message):
        self.index = index
        super(DependencyError, self).__init__(
            'Operation %d: %s' % (index, message)
        )


class ModifierError(BatchError):
    """An exception raised when a request or response modifier fails.

    The original exception is available as `error` (and as the chained
    `__cause__`).

    """

    def __init__(self, index, modifier, error):
        self.index = index
        self.modifier = modifier
        self.error = error
        self.__cause__ = error
        name = modifier if isinstance(modifier, str) else getattr(modifier, '__name__', repr(modifier))
        super(ModifierError, self).__init__(
            'Modifier %s failed for operation %d: %s' %
            (name, index, error)
        )


class TransportError(BatchError):
    """An exception raised when an operation's HTTP request could not be
    completed, timed out, or returned a body that could not be decoded."""

    def __init__(self, method, url, error, index=None):
        self.method = method
        self.url = url
        self.error = error
        self.index = index
        self.__cause__ = error
        super(TransportError, self).__init__(
            'Request %s %s failed: %s' % (method, url, error)
        )
