class MockPresenceException(Exception):
    def __init__(self, message, status_code, code, cause=None):
        super().__init__()
        self.message = message
        self.code = code
        self.status_code = status_code
        self.cause = cause

    def __str__(self):
        str_repr = '%s %s %s' % (self.code, self.status_code, self.message)
        if self.cause is not None:
            str_repr += ' (cause: %s)' % self.cause
        return str_repr

    @property
    def is_timeout(self):
        return self.status_code == 408
