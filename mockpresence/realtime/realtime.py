import asyncio
import logging
from typing import Any, Optional

from mockpresence.auth import Auth
from mockpresence.realtime.channelview import ChannelView
from mockpresence.realtime.realtime_channel import Channels, default_channels
from mockpresence.types.identity import ABSENT, IdentityEvent, IdentityState, IdentityStateChange, Resolved
from mockpresence.types.options import Options
from mockpresence.util.eventemitter import EventEmitter
from mockpresence.util.exceptions import MockPresenceException


log = logging.getLogger(__name__)


class MockRealtime(EventEmitter):
    """
    Mock Realtime Client

    Attributes
    ----------
    auth: Auth
        authorization object
    options: Options
        client options object
    channels: Channels
        channel registry shared with other clients
    identity: Any
        resolved identity, or ABSENT
    identity_state: IdentityState
        Unresolved (ABSENT) or Resolved(identity)

    Methods
    -------
    subscribe(name)
        Authorizes and returns this client's view of a channel
    wait_for_identity(timeout=None)
        Waits until authorization has resolved an identity
    """

    def __init__(self, authorizer=None, channels: Optional[Channels] = None, loop=None, **kwargs):
        """Constructs a mock realtime client.

        Parameters
        ----------
        authorizer: callable or object, optional
            Authorization capability. Called with a completion callback, which it invokes, now or
            later, with the client's identity. A coroutine function, a callable returning an object
            with an authorize(callback) method, or such an object are also accepted.
        channels: Channels, optional
            Channel registry. Clients sharing a registry share channel state. Defaults to the
            process wide registry returned by default_channels().
        loop: AbstractEventLoop, optional
            asyncio event loop used for coroutine authorizers
        **kwargs: client options
            client_id: str
                Identity to resolve to when no authorizer is given.
            self_key: str
                Key of the self-identity slot in a view's members. The default is 'myID'.
            identity_timeout: float
                Default timeout (in milliseconds) for wait_for_identity(). The default is 10 seconds.

        Raises
        ------
        ValueError
            If neither an authorizer nor a client_id is provided
        """
        EventEmitter.__init__(self)

        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                log.debug('Mock realtime client created outside event loop')

        options = Options(authorizer=authorizer, loop=loop, **kwargs)

        log.info(f'Mock realtime client initialised with options: {options!r}')

        self.__options = options
        self.__auth = Auth(self, options)
        self.__channels = channels if channels is not None else default_channels()
        self.__identity_state: IdentityState = ABSENT
        self.__auth_error: Optional[BaseException] = None

    def subscribe(self, name: str) -> ChannelView:
        """Subscribes to a channel and returns this client's view of it.

        Authorization is started but not waited for: the view is returned straight away and
        reads the identity as ABSENT until the authorizer completes.

        Parameters
        ----------
        name: str
            Channel name
        """
        log.info(f'MockRealtime.subscribe() called, channel = {name}')
        self.__auth_error = None
        self.__auth.authorize(self._on_identity, self._on_auth_error)
        channel = self.__channels.get(name)
        return ChannelView(channel, self)

    async def wait_for_identity(self, timeout: Optional[float] = None) -> Any:
        """Returns the identity, waiting for authorization to resolve one if necessary.

        Parameters
        ----------
        timeout: float, optional
            Timeout in milliseconds, defaults to options.identity_timeout

        Raises
        ------
        MockPresenceException
            If no identity resolves within the timeout
        Exception
            Whatever a coroutine authorizer raised, unchanged
        """
        if self.is_identified:
            return self.identity

        if self.__auth_error is not None:
            raise self.__auth_error

        if timeout is None:
            timeout = self.__options.identity_timeout

        try:
            outcome = await asyncio.wait_for(self.once_async(), timeout / 1000)
        except asyncio.TimeoutError:
            raise MockPresenceException("Timed out waiting for identity", 408, 40800)

        if isinstance(outcome, BaseException):
            raise outcome
        return outcome.identity

    def _on_identity(self, identity) -> None:
        previous = self.__identity_state
        current = Resolved(identity)
        self.__identity_state = current
        log.debug(f'MockRealtime: identity resolved, previous = {previous!r}, current = {identity!r}')
        self._emit(IdentityEvent.RESOLVED, IdentityStateChange(previous, current))

    def _on_auth_error(self, error: BaseException) -> None:
        self.__auth_error = error
        self._emit(IdentityEvent.FAILED, error)

    @property
    def auth(self) -> Auth:
        """Returns the auth object"""
        return self.__auth

    @property
    def options(self) -> Options:
        """Returns the client options object"""
        return self.__options

    @property
    def channels(self) -> Channels:
        """Returns the channel registry"""
        return self.__channels

    @property
    def identity_state(self) -> IdentityState:
        return self.__identity_state

    @property
    def identity(self) -> Any:
        """Returns the resolved identity, or ABSENT while authorization is pending"""
        if isinstance(self.__identity_state, Resolved):
            return self.__identity_state.identity
        return ABSENT

    @property
    def is_identified(self) -> bool:
        return isinstance(self.__identity_state, Resolved)
