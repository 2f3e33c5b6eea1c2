import asyncio

import mock
import pytest

from mockpresence import (
    ABSENT, DeferredAuthorizer, IdentityEvent, MockPresenceException, MockRealtime, Resolved, async_authorizer,
    default_channels, never_authorizer, static_authorizer, token_authorizer,
)
from test.mockpresence.utils import BaseAsyncTestCase, BaseTestCase


class TestMockRealtime(BaseTestCase):

    def test_end_to_end_two_clients(self):
        client_a = MockRealtime(authorizer=static_authorizer('alice'), channels=self.channels)
        client_b = MockRealtime(authorizer=static_authorizer('bob'), channels=self.channels)

        view_a = client_a.subscribe('room-1')
        view_b = client_b.subscribe('room-1')

        assert view_a.members['myID'] == 'alice'
        assert view_b.members['myID'] == 'bob'
        assert view_a.my_id == 'alice'
        assert view_b.my_id == 'bob'
        assert view_a.channel is view_b.channel

    def test_init_without_authorizer_or_client_id(self):
        with pytest.raises(ValueError):
            MockRealtime(channels=self.channels)

    def test_init_with_invalid_authorizer(self):
        with pytest.raises(ValueError):
            MockRealtime(authorizer='alice', channels=self.channels)

    def test_client_id_without_authorizer(self):
        client = MockRealtime(client_id='alice', channels=self.channels)
        assert client.identity is ABSENT
        view = client.subscribe('room-1')
        assert view.my_id == 'alice'

    def test_uses_default_channels(self):
        client = MockRealtime(authorizer=static_authorizer('alice'))
        assert client.channels is default_channels()
        view = client.subscribe('room-1')
        assert view.channel is default_channels().get('room-1')

    def test_identity_state(self):
        authorizer = DeferredAuthorizer()
        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        assert client.identity_state is ABSENT
        assert not client.is_identified

        client.subscribe('room-1')
        assert client.identity is ABSENT

        authorizer.resolve('alice')
        assert client.identity_state == Resolved('alice')
        assert client.identity == 'alice'
        assert client.is_identified

    def test_subscribe_authorizes_each_time(self):
        authorizer = mock.Mock(spec=[], side_effect=static_authorizer('alice'))
        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        client.subscribe('room-1')
        client.subscribe('room-2')
        assert authorizer.call_count == 2
        assert client.auth.attempts == 2

    def test_one_client_many_channels(self):
        authorizer = DeferredAuthorizer()
        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        view_1 = client.subscribe('room-1')
        view_2 = client.subscribe('room-2')
        assert view_1.channel is not view_2.channel

        authorizer.resolve_next('alice')
        assert view_1.my_id == 'alice'
        assert view_2.my_id == 'alice'

        authorizer.resolve_next('alice-2')
        assert view_1.my_id == 'alice-2'
        assert view_2.my_id == 'alice-2'

    def test_identity_kept_until_reauthorization_resolves(self):
        authorizer = DeferredAuthorizer()
        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        client.subscribe('room-1')
        authorizer.resolve('alice')

        view = client.subscribe('room-2')
        assert view.my_id == 'alice'
        authorizer.resolve('alice-renewed')
        assert view.my_id == 'alice-renewed'

    def test_completion_only_once_per_subscribe(self):
        callbacks = []

        def authorizer(callback):
            callbacks.append(callback)
            callback('alice')

        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        view = client.subscribe('room-1')
        with self.assertLogs('mockpresence.auth', level='WARNING'):
            callbacks[0]('mallory')
        assert view.my_id == 'alice'

    def test_never_resolving_authorizer(self):
        client = MockRealtime(authorizer=never_authorizer(), channels=self.channels)
        view = client.subscribe('room-1')
        assert view.my_id is ABSENT
        assert view.members == {'myID': ABSENT}

    def test_authorizer_exception_propagates(self):
        def authorizer(callback):
            raise RuntimeError('auth server down')

        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        with pytest.raises(RuntimeError):
            client.subscribe('room-1')
        assert client.identity is ABSENT

    def test_token_authorizer(self):
        client = MockRealtime(authorizer=token_authorizer('alice'), channels=self.channels)
        assert client.subscribe('room-1').my_id == 'alice'

    def test_authorizer_returning_authorize_object(self):
        class Authorization:
            def authorize(self, callback):
                callback('my-id')

        def authorizer(callback):
            return Authorization()

        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        view = client.subscribe('my-channel')
        assert view.members['myID'] == 'my-id'

    def test_authorize_object(self):
        class Authorization:
            def authorize(self, callback):
                callback({'id': 'my-id'})

        client = MockRealtime(authorizer=Authorization(), channels=self.channels)
        assert client.subscribe('my-channel').my_id == 'my-id'

    def test_authorizer_return_value(self):
        def authorizer(callback):
            return 'alice'

        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        assert client.subscribe('room-1').my_id == 'alice'

    def test_authorizer_return_value_ignored_after_callback(self):
        def authorizer(callback):
            callback('alice')
            return 'ignored'

        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        assert client.subscribe('room-1').my_id == 'alice'

    def test_coroutine_authorizer_outside_event_loop(self):
        client = MockRealtime(authorizer=async_authorizer('alice'), channels=self.channels)
        with pytest.raises(MockPresenceException) as excinfo:
            client.subscribe('room-1')
        assert excinfo.value.code == 40000

    def test_identity_resolved_event(self):
        state_changes = []

        def listener(state_change):
            state_changes.append(state_change)

        authorizer = DeferredAuthorizer()
        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        client.on(IdentityEvent.RESOLVED, listener)
        client.subscribe('room-1')
        assert state_changes == []

        authorizer.resolve('alice')
        assert len(state_changes) == 1
        assert state_changes[0].previous is ABSENT
        assert state_changes[0].current == Resolved('alice')
        assert state_changes[0].identity == 'alice'


class TestMockRealtimeAsync(BaseAsyncTestCase):

    async def test_async_authorizer_resolves_after_subscribe(self):
        client = MockRealtime(authorizer=async_authorizer('alice', delay=0.01), channels=self.channels)
        view = client.subscribe('room-1')
        assert view.my_id is ABSENT
        assert client.auth.pending == 1

        assert await client.wait_for_identity() == 'alice'
        assert view.my_id == 'alice'
        assert view.members['myID'] == 'alice'

    async def test_async_authorizer_return_value(self):
        async def authorizer(callback):
            await asyncio.sleep(0)
            return {'id': 'alice'}

        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        view = client.subscribe('room-1')
        assert await client.wait_for_identity() == 'alice'
        assert view.my_id == 'alice'

    async def test_async_authorize_object(self):
        class Authorization:
            async def authorize(self, callback):
                callback('alice')

        client = MockRealtime(authorizer=Authorization(), channels=self.channels)
        view = client.subscribe('room-1')
        assert await client.wait_for_identity() == 'alice'
        assert view.my_id == 'alice'

    async def test_wait_for_identity_already_resolved(self):
        client = self.get_client('alice')
        client.subscribe('room-1')
        assert await client.wait_for_identity(timeout=0) == 'alice'

    async def test_wait_for_identity_timeout(self):
        client = MockRealtime(authorizer=never_authorizer(), channels=self.channels)
        client.subscribe('room-1')
        with pytest.raises(MockPresenceException) as excinfo:
            await client.wait_for_identity(timeout=10)
        assert excinfo.value.is_timeout
        assert excinfo.value.code == 40800

    async def test_two_async_clients_same_channel(self):
        client_a = MockRealtime(authorizer=async_authorizer('alice'), channels=self.channels)
        client_b = MockRealtime(authorizer=async_authorizer('bob', delay=0.01), channels=self.channels)
        view_a = client_a.subscribe('room-1')
        view_b = client_b.subscribe('room-1')

        await client_a.wait_for_identity()
        assert view_a.my_id == 'alice'
        assert view_b.my_id is ABSENT

        await client_b.wait_for_identity()
        assert view_a.members['myID'] == 'alice'
        assert view_b.members['myID'] == 'bob'
        assert view_a.channel is view_b.channel

    async def test_resolved_event_once_async(self):
        authorizer = DeferredAuthorizer()
        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        client.subscribe('room-1')
        future = client.once_async(IdentityEvent.RESOLVED)
        authorizer.resolve('alice')
        state_change = await future
        assert state_change.identity == 'alice'

    async def test_wait_for_identity_timeouts_release_listeners(self):
        client = MockRealtime(authorizer=never_authorizer(), channels=self.channels)
        client.subscribe('room-1')
        for _ in range(5):
            with pytest.raises(MockPresenceException):
                await client.wait_for_identity(timeout=1)
        await asyncio.sleep(0)
        assert client.listener_count() == 0
        assert client.listener_count(IdentityEvent.RESOLVED) == 0

    async def test_wait_for_identity_releases_listener_on_resolution(self):
        authorizer = DeferredAuthorizer()
        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        client.subscribe('room-1')
        waiter = asyncio.ensure_future(client.wait_for_identity())
        await asyncio.sleep(0)
        assert client.listener_count() == 1
        authorizer.resolve('alice')
        assert await waiter == 'alice'
        assert client.listener_count() == 0

    async def test_new_subscribe_clears_previous_error(self):
        calls = []

        async def authorizer(callback):
            calls.append(callback)
            if len(calls) == 1:
                raise RuntimeError('first attempt fails')
            callback('alice')

        client = MockRealtime(authorizer=authorizer, channels=self.channels)
        client.subscribe('room-1')
        with self.assertLogs('mockpresence.auth', level='ERROR'):
            with pytest.raises(RuntimeError):
                await client.wait_for_identity()

        client.subscribe('room-1')
        assert await client.wait_for_identity() == 'alice'
