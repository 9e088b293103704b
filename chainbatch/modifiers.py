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

Request and response modifiers.

Request modifiers are registered on a `Client` by name and called with each
operation just before it is sent. Response modifiers are attached to single
operations and transform that operation's response body, each one receiving
the body returned by the one before.

"""

import logging

from chainbatch.errors import ModifierError

log = logging.getLogger(__name__)


def apply_request_modifiers(modifiers, operation):
    """Calls each ``(name, modifier)`` pair of `modifiers`, in order, with the
    operation.

    If a modifier raises an exception, a `ModifierError` naming it is raised
    instead.

    """
    for name, modifier in modifiers:
        try:
            modifier(operation)
        except Exception as exc:
            raise ModifierError(operation.index, name, exc)


def apply_response_modifiers(operation, body, response):
    """Passes `body` through the operation's response modifiers and returns
    the result.

    Each modifier is called as ``modifier(body, response, operation)`` and
    returns the body for the next one. The first modifier to raise stops the
    chain; its exception is raised wrapped in a `ModifierError`.

    """
    for modifier in operation.post_modifiers:
        try:
            body = modifier(body, response, operation)
        except Exception as exc:
            log.debug('Response modifier %r failed for operation %d', modifier, operation.index)
            raise ModifierError(operation.index, modifier, exc)
    return body
