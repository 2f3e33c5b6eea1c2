from mockpresence.util.helper import has_authorize


class Defaults:
    self_key = 'myID'
    identity_timeout = 10000  # milliseconds


class Options:
    def __init__(self, authorizer=None, client_id=None, self_key=None, loop=None,
                 identity_timeout=None):
        if authorizer is None and client_id is None:
            raise ValueError("Authorizer is missing. Provide an authorizer or a client_id.")

        if authorizer is not None and not (callable(authorizer) or has_authorize(authorizer)):
            raise ValueError("authorizer must be callable or provide an authorize(callback) method")

        if self_key is None:
            self_key = Defaults.self_key

        if identity_timeout is None:
            identity_timeout = Defaults.identity_timeout

        self.__authorizer = authorizer
        self.__client_id = client_id
        self.__self_key = self_key
        self.__loop = loop
        self.__identity_timeout = identity_timeout

    @property
    def authorizer(self):
        return self.__authorizer

    @property
    def client_id(self):
        return self.__client_id

    @client_id.setter
    def client_id(self, value):
        self.__client_id = value

    @property
    def self_key(self):
        return self.__self_key

    @property
    def loop(self):
        return self.__loop

    @loop.setter
    def loop(self, value):
        self.__loop = value

    @property
    def identity_timeout(self):
        return self.__identity_timeout

    @identity_timeout.setter
    def identity_timeout(self, value):
        self.__identity_timeout = value

    def __repr__(self):
        return 'Options(authorizer=%r, client_id=%r, self_key=%r)' % (
            self.authorizer, self.client_id, self.self_key)
