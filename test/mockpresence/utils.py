import random
import string
import unittest
from unittest import IsolatedAsyncioTestCase

from mockpresence import Channels, MockRealtime, static_authorizer


def random_string(length, alphabet=string.ascii_letters):
    return ''.join([random.choice(alphabet) for x in range(length)])


class BaseTestCase(unittest.TestCase):

    def setUp(self):
        self.channels = Channels()

    @classmethod
    def get_channel_name(cls, prefix=''):
        return prefix + random_string(10)

    def get_client(self, identity, **kwargs):
        kwargs.setdefault('channels', self.channels)
        return MockRealtime(authorizer=static_authorizer(identity), **kwargs)


class BaseAsyncTestCase(IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.channels = Channels()

    @classmethod
    def get_channel_name(cls, prefix=''):
        return prefix + random_string(10)

    def get_client(self, identity, **kwargs):
        kwargs.setdefault('channels', self.channels)
        return MockRealtime(authorizer=static_authorizer(identity), **kwargs)
