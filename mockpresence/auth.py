from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Callable, Optional, Set

from mockpresence.types.options import Options
from mockpresence.util.exceptions import MockPresenceException
from mockpresence.util.helper import has_authorize, identity_from_result

if TYPE_CHECKING:
    from mockpresence.realtime.realtime import MockRealtime

log = logging.getLogger(__name__)


class Completion:
    """Completion callback handed to an authorizer for a single authorization attempt.

    Only the first invocation resolves an identity; later ones are logged and ignored.
    """

    def __init__(self, on_identity: Callable, attempt: int):
        self.__on_identity = on_identity
        self.__attempt = attempt
        self.__completed = False

    @property
    def completed(self) -> bool:
        return self.__completed

    def __call__(self, result=None):
        if self.__completed:
            log.warning(f'Authorization attempt {self.__attempt} already completed, ignoring result: {result!r}')
            return
        self.__completed = True
        identity = identity_from_result(result)
        log.debug(f'Authorization attempt {self.__attempt} completed with identity: {identity!r}')
        self.__on_identity(identity)


class Auth:
    """Runs the authorization capability configured for a client.

    The authorizer may be a callable taking a completion callback, a callable returning an
    object with an ``authorize(callback)`` method, such an object itself, or a coroutine
    function. Failures raised by the authorizer are left to propagate to the caller.
    """

    def __init__(self, client: MockRealtime, options: Options):
        self.__client = client
        self.__options = options
        self.__attempts = 0
        self.__pending: Set[asyncio.Task] = set()

    @property
    def options(self) -> Options:
        return self.__options

    @property
    def attempts(self) -> int:
        return self.__attempts

    @property
    def pending(self) -> int:
        """Number of coroutine authorizers still running"""
        return len(self.__pending)

    def authorize(self, on_identity: Callable, on_error: Optional[Callable] = None) -> Completion:
        """Starts an authorization attempt.

        Exceptions raised synchronously by the authorizer propagate to the caller. Exceptions raised
        by a scheduled coroutine authorizer are logged and passed to on_error.
        """
        self.__attempts += 1
        completion = Completion(on_identity, self.__attempts)
        authorizer = self.__options.authorizer

        if authorizer is None:
            log.debug(f'Auth.authorize(): no authorizer, using client_id {self.__options.client_id!r}')
            completion(self.__options.client_id)
            return completion

        if asyncio.iscoroutinefunction(authorizer):
            self.__schedule(authorizer(completion), completion, on_error)
        elif has_authorize(authorizer) and not (inspect.isfunction(authorizer) or inspect.isclass(authorizer)):
            self.__run_authorize(authorizer, completion, on_error)
        else:
            result = authorizer(completion)
            if has_authorize(result):
                self.__run_authorize(result, completion, on_error)
            elif inspect.isawaitable(result):
                self.__schedule(result, completion, on_error)
            elif result is not None and not completion.completed:
                completion(result)

        return completion

    def __run_authorize(self, authorizer, completion: Completion, on_error: Optional[Callable]):
        result = authorizer.authorize(completion)
        if inspect.isawaitable(result):
            self.__schedule(result, completion, on_error)
        elif result is not None and not completion.completed:
            completion(result)

    def __schedule(self, awaitable, completion: Completion, on_error: Optional[Callable]):
        loop = self.__options.loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                if inspect.iscoroutine(awaitable):
                    awaitable.close()
                raise MockPresenceException(
                    "Coroutine authorizer requires a running event loop", 400, 40000, cause=e)

        task = loop.create_task(self.__await_authorizer(awaitable, completion))
        self.__pending.add(task)
        task.add_done_callback(self.__pending.discard)

        def on_done(done_task: asyncio.Task):
            if done_task.cancelled():
                return
            error = done_task.exception()
            if error is None:
                return
            log.error(f'Auth: coroutine authorizer failed: {error!r}', exc_info=error)
            if on_error is not None:
                on_error(error)

        task.add_done_callback(on_done)

    @staticmethod
    async def __await_authorizer(awaitable, completion: Completion):
        result = await awaitable
        if result is not None and not completion.completed:
            completion(result)

    def __repr__(self):
        return f'Auth(attempts={self.__attempts}, pending={len(self.__pending)})'
