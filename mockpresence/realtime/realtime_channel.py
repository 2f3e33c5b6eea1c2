from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Iterator, List, Optional

from mockpresence.types.presence import PresenceAction, PresenceMessage
from mockpresence.util.exceptions import MockPresenceException
from mockpresence.util.helper import decode_channel_name, get_random_id, unix_time_ms

log = logging.getLogger(__name__)


class MockChannel:
    """
    Mock Presence Channel

    Shared state for one named channel. Every client subscribed to the name sees this same
    object, so membership changes made through one subscriber are visible to all of them.

    Attributes
    ----------
    name: str
        Channel name
    members: dict
        Presence members keyed by client id

    Methods
    -------
    enter(client_id, data=None)
        Adds a member
    update(client_id, data=None)
        Updates a member's data
    leave(client_id, data=None)
        Removes a member
    get_members(client_id=None)
        Lists members
    """

    def __init__(self, name: str):
        self.__name = name
        self.__members: Dict[str, PresenceMessage] = {}
        self.__msg_serial = 0
        self.__connection_id = get_random_id()

    @property
    def name(self) -> str:
        return self.__name

    @property
    def members(self) -> Dict[str, PresenceMessage]:
        return self.__members

    def enter(self, client_id: str, data=None) -> PresenceMessage:
        """Enters client_id into the channel's presence set, replacing any existing entry"""
        return self.__put(client_id, data)

    def update(self, client_id: str, data=None) -> PresenceMessage:
        """Updates the data of client_id, entering it if it is not present"""
        return self.__put(client_id, data)

    def leave(self, client_id: str, data=None) -> Optional[PresenceMessage]:
        """Removes client_id from the presence set

        Returns
        -------
        PresenceMessage
            The removed member as a LEAVE message, or None if client_id was not present
        """
        existing = self.__members.pop(client_id, None)
        if existing is None:
            log.debug(f'MockChannel.leave(): {client_id!r} is not present on channel {self.name}')
            return None

        log.debug(f'MockChannel.leave(): {client_id!r} left channel {self.name}')
        return PresenceMessage(
            action=PresenceAction.LEAVE,
            client_id=client_id,
            data=existing.data if data is None else data,
            connection_id=existing.connection_id,
            timestamp=unix_time_ms(),
            id=self.__next_id(),
        )

    def get_members(self, client_id: Optional[str] = None) -> List[PresenceMessage]:
        return [
            member for member in self.__members.values()
            if client_id is None or member.client_id == client_id
        ]

    def __put(self, client_id, data) -> PresenceMessage:
        member = PresenceMessage(
            action=PresenceAction.PRESENT,
            client_id=client_id,
            data=data,
            connection_id=self.__connection_id,
            timestamp=unix_time_ms(),
            id=self.__next_id(),
        )
        self.__members[client_id] = member
        log.debug(f'MockChannel: {client_id!r} present on channel {self.name}, data = {data!r}')
        return member

    def __next_id(self) -> str:
        msg_id = f'{self.__connection_id}:{self.__msg_serial}:0'
        self.__msg_serial += 1
        return msg_id

    def __repr__(self):
        return f'MockChannel(name={self.name!r}, members={len(self.__members)})'


class Channels:
    """Creates MockChannel objects, one per name.

    Methods
    -------
    get(name)
        Gets a channel, creating it on first use
    """

    def __init__(self):
        self.__all: Dict[str, MockChannel] = OrderedDict()

    def get(self, name) -> MockChannel:
        """Creates a new MockChannel object, or returns the existing channel object.

        Parameters
        ----------

        name: str
            Channel name
        """
        name = decode_channel_name(name)
        if not isinstance(name, str):
            raise MockPresenceException(f"Channel name must be a string, got {type(name).__name__}", 400, 40000)

        if name not in self.__all:
            channel = self.__all[name] = MockChannel(name)
            log.debug(f'Channels.get(): created channel {name}')
        else:
            channel = self.__all[name]
        return channel

    get_or_create = get

    def __getitem__(self, key) -> MockChannel:
        return self.get(key)

    def __contains__(self, item) -> bool:
        if isinstance(item, MockChannel):
            return self.__all.get(item.name) is item
        return decode_channel_name(item) in self.__all

    def __iter__(self) -> Iterator[MockChannel]:
        return iter(list(self.__all.values()))

    def __len__(self) -> int:
        return len(self.__all)

    def __repr__(self):
        return f'Channels({list(self.__all)!r})'


_default_channels: Optional[Channels] = None


def default_channels() -> Channels:
    """Returns the process wide registry used by clients constructed without one"""
    global _default_channels
    if _default_channels is None:
        _default_channels = Channels()
    return _default_channels


def reset_default_channels() -> None:
    """Discards the process wide registry; the next default_channels() call creates a fresh one"""
    global _default_channels
    _default_channels = None
