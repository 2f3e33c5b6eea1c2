from enum import IntEnum


class PresenceAction(IntEnum):
    PRESENT = 1
    ENTER = 2
    LEAVE = 3
    UPDATE = 4


class PresenceMessage:
    """Metadata for one member of a presence channel."""

    def __init__(self, action=PresenceAction.PRESENT, client_id=None, data=None,
                 connection_id=None, timestamp=None, id=None):
        self.__action = action
        self.__client_id = client_id
        self.__data = data
        self.__connection_id = connection_id
        self.__timestamp = timestamp
        self.__id = id

    @property
    def action(self):
        return self.__action

    @property
    def client_id(self):
        return self.__client_id

    @property
    def data(self):
        return self.__data

    @property
    def connection_id(self):
        return self.__connection_id

    @property
    def timestamp(self):
        return self.__timestamp

    @property
    def id(self):
        return self.__id

    def with_action(self, action):
        return PresenceMessage(
            action=action,
            client_id=self.client_id,
            data=self.data,
            connection_id=self.connection_id,
            timestamp=self.timestamp,
            id=self.id,
        )

    def __eq__(self, other):
        if not isinstance(other, PresenceMessage):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((self.id, self.client_id, self.connection_id, self.timestamp))

    def __repr__(self):
        return 'PresenceMessage(action=%s, client_id=%r, data=%r)' % (
            self.action.name, self.client_id, self.data)

    def to_dict(self):
        d = {
            'action': int(self.action),
        }
        if self.id is not None:
            d['id'] = self.id
        if self.client_id is not None:
            d['clientId'] = self.client_id
        if self.connection_id is not None:
            d['connectionId'] = self.connection_id
        if self.data is not None:
            d['data'] = self.data
        if self.timestamp is not None:
            d['timestamp'] = self.timestamp
        return d

    @staticmethod
    def from_dict(obj):
        return PresenceMessage(
            action=PresenceAction(obj.get('action', PresenceAction.PRESENT)),
            client_id=obj.get('clientId'),
            data=obj.get('data'),
            connection_id=obj.get('connectionId'),
            timestamp=obj.get('timestamp'),
            id=obj.get('id'),
        )
