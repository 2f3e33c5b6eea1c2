from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from mockpresence.realtime.realtime import MockRealtime
    from mockpresence.realtime.realtime_channel import MockChannel


class ChannelView:
    """
    A subscriber's view of a shared MockChannel.

    Reads of ``members`` and ``my_id`` carry the subscribing client's own identity; every other
    attribute is read from the channel. The identity is looked up on each read, so a view
    created before authorization completes picks up the identity once it resolves.

    Attributes
    ----------
    channel: MockChannel
        The shared channel
    client: MockRealtime
        The subscribing client
    members: dict
        Channel members plus the client's own identity under its self key
    my_id: Any
        The client's identity, or ABSENT

    Methods
    -------
    membership_view()
        Returns a fresh copy of the members including the self-identity slot
    self_identity()
        Returns the client's current identity
    """

    __slots__ = ('__channel', '__client')

    def __init__(self, channel: MockChannel, client: MockRealtime):
        object.__setattr__(self, '_ChannelView__channel', channel)
        object.__setattr__(self, '_ChannelView__client', client)

    @property
    def channel(self) -> MockChannel:
        return self.__channel

    @property
    def client(self) -> MockRealtime:
        return self.__client

    def self_identity(self) -> Any:
        return self.__client.identity

    def membership_view(self) -> Dict[str, Any]:
        members = dict(self.__channel.members)
        members[self.__client.options.self_key] = self.__client.identity
        return members

    @property
    def members(self) -> Dict[str, Any]:
        return self.membership_view()

    @property
    def my_id(self) -> Any:
        return self.self_identity()

    def __getattr__(self, name):
        # only reached for attributes the view does not define itself
        if name.startswith('_ChannelView__'):
            raise AttributeError(name)
        return getattr(self.__channel, name)

    def __setattr__(self, name, value):
        raise AttributeError(f"ChannelView is read-only, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"ChannelView is read-only, cannot delete {name!r}")

    def __dir__(self):
        return sorted(set(dir(type(self))) | set(dir(self.__channel)))

    def __repr__(self):
        return f'ChannelView(channel={self.__channel.name!r}, identity={self.self_identity()!r})'
