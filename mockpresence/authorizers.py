"""Ready made authorization capabilities for tests.

Each helper returns something that can be passed as ``authorizer`` to
:class:`~mockpresence.realtime.realtime.MockRealtime`.
"""

import asyncio
import logging

log = logging.getLogger(__name__)


def static_authorizer(identity):
    """Resolves synchronously with ``identity``."""
    def authorizer(callback):
        callback(identity)
    return authorizer


def token_authorizer(identity):
    """Resolves synchronously with a token shaped result, ``{'id': identity}``."""
    def authorizer(callback):
        callback({'id': identity})
    return authorizer


def async_authorizer(identity, delay=0):
    """Resolves with ``identity`` after ``delay`` seconds on the running event loop."""
    async def authorizer(callback):
        await asyncio.sleep(delay)
        callback(identity)
    return authorizer


def never_authorizer():
    """Never resolves; the client stays unidentified."""
    def authorizer(callback):
        log.debug('never_authorizer(): dropping completion callback')
    return authorizer


class DeferredAuthorizer:
    """Captures completion callbacks so a test decides when, and with what, each one resolves.

    Attributes
    ----------
    callbacks: list
        Completion callbacks received so far, oldest first

    Methods
    -------
    authorize(callback)
        Records the callback without resolving it
    resolve(identity)
        Resolves every outstanding callback with the identity
    resolve_next(identity)
        Resolves the oldest outstanding callback only
    """

    def __init__(self):
        self.__callbacks = []

    @property
    def callbacks(self):
        return list(self.__callbacks)

    @property
    def outstanding(self):
        return len(self.__callbacks)

    def authorize(self, callback):
        self.__callbacks.append(callback)

    def resolve(self, identity):
        callbacks, self.__callbacks = self.__callbacks, []
        for callback in callbacks:
            callback(identity)
        return len(callbacks)

    def resolve_next(self, identity):
        if not self.__callbacks:
            raise IndexError('DeferredAuthorizer.resolve_next(): no outstanding callbacks')
        self.__callbacks.pop(0)(identity)
