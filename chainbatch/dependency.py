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

Dependency references between the operations of a batch.

A value in an operation's `data` or `params` that looks like
``{'jsonpath': '1::$.entry.id'}`` is a reference to the response body of
operation 1 of the same batch. When the prefix is left off, the reference is
to the operation added just before. `analyze()` finds these references before
anything is sent, and `inject()` replaces them with the values they select
once the referenced operations have completed.

"""

from collections.abc import Mapping
import logging
import re

from jsonpath_ng import parse as parse_jsonpath

from chainbatch.errors import DependencyError

log = logging.getLogger(__name__)

REFERENCE_KEY = 'jsonpath'
PREFIX = re.compile(r'^(\d+)::')
REFERENCE = re.compile(r'^(?:(\d+)::)?(.*)$', re.DOTALL)


def jsonpath(path, source=None):
    """Returns a dependency reference selecting `path` out of the response of
    the operation at index `source` (or of the previous operation, if `source`
    is not given)."""
    if source is not None:
        path = '%d::%s' % (source, path)
    return {REFERENCE_KEY: path}


def is_reference(value):
    return isinstance(value, Mapping) and isinstance(value.get(REFERENCE_KEY), str)


def references(operation):
    """Yields the ``(container, key)`` of every dependency reference directly
    inside the operation's `params` and `data`."""
    for container in (operation.params, operation.data):
        for key, value in container.items():
            if is_reference(value):
                yield container, key


def split_reference(reference):
    """Returns the source index and path expression of a reference.

    A reference without an index prefix is taken to refer to operation 0.

    """
    index, path = REFERENCE.match(reference[REFERENCE_KEY]).groups()
    return int(index or 0), path


def analyze(operations):
    """Records the dependencies of each of the given operations.

    Sets each operation's `dependencies` to the list of indices of the
    operations it references, in the order the references were found, and
    rewrites references without an index prefix to name the previous
    operation explicitly. Returns whether any operation has a dependency.

    A `DependencyError` is raised for a reference to an operation that does
    not come before the referring one, and for a path expression that is
    missing or can't be parsed.

    """
    has_dependencies = False
    for index, operation in enumerate(operations):
        operation.dependencies = []
        for container, key in references(operation):
            reference = container[key]
            path = reference[REFERENCE_KEY]
            match = PREFIX.match(path)
            if match:
                source = int(match.group(1))
                if source >= index:
                    raise DependencyError(index, 'dependency on request %d, which is not an earlier request' % source)
                path = path[match.end():]
            elif index == 0:
                raise DependencyError(index, 'dependency on non-existent request')
            else:
                source = index - 1
                container[key] = dict(reference, **{REFERENCE_KEY: '%d::%s' % (source, path)})

            if not path:
                raise DependencyError(index, 'missing path expression in dependency %r' % (key,))
            try:
                parse_jsonpath(path)
            except Exception as exc:
                raise DependencyError(index, 'invalid path expression %r: %s' % (path, exc))

            operation.dependencies.append(source)

        if operation.dependencies:
            log.debug('Operation %d depends on %r', index, operation.dependencies)
            has_dependencies = True

    return has_dependencies


def select(body, path):
    """Returns the values in `body` selected by the path expression `path`.

    A single match is returned as is, several as a list, and no match at all
    as an empty list.

    """
    matches = [match.value for match in parse_jsonpath(path).find(body)]
    if len(matches) == 1:
        return matches[0]
    return matches


def inject(operation, bodies):
    """Replaces the dependency references in the operation's `params` and
    `data` with the values they select from `bodies`, a mapping of operation
    index to response body.

    If a path expression cannot be applied to the body it selects from, a
    `DependencyError` is raised.

    """
    for container, key in list(references(operation)):
        source, path = split_reference(container[key])
        if not path:
            raise DependencyError(operation.index, 'missing path expression in dependency %r' % (key,))
        try:
            container[key] = select(bodies[source], path)
        except Exception as exc:
            raise DependencyError(operation.index, 'path expression %r failed: %s' % (path, exc))
