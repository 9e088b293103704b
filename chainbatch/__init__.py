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

chainbatch performs batches of HTTP requests against one API concurrently,
delivering all of their results to one callback.

Requests in a batch may depend on each other: a value in a request's body or
query parameters can be a reference into the response of an earlier request,
written as a JSONPath expression. Such a request is only made once the
request it refers to has completed, with the selected value substituted in.
Requests that don't depend on each other are made in parallel.

To make a batch request, start a batch on a `Client`, chain the requests to
make, then execute it with a callback::

    >>> client = Client('http://api.example.com')
    >>> client.get('/users/@self').post('/notes', {'author': jsonpath('$.id')}).execute(callback)

"""

from chainbatch.client import Batch, Client
from chainbatch.dependency import jsonpath
from chainbatch.errors import BatchError, DependencyError, ModifierError, TransportError
from chainbatch.operation import Operation, Result

__version__ = '1.0'
__date__ = '19 October 2026'
__author__ = 'Six Apart Ltd.'
