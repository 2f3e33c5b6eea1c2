import asyncio
import logging

from pyee.asyncio import AsyncIOEventEmitter

from mockpresence.util.helper import is_callable_or_coroutine

log = logging.getLogger(__name__)

# pyee's event emitter doesn't support attaching a listener to all events
# so to patch it, we create a wrapper which uses two event emitters, one
# is used to listen to all events and this arbitrary string is the event name
# used to emit all events on that listener
_all_event = 'all'


def _is_named_event_args(*args):
    return len(args) == 2 and is_callable_or_coroutine(args[1])


def _is_all_event_args(*args):
    return len(args) == 1 and is_callable_or_coroutine(args[0])


def _wrap_listener(listener):
    # coroutine listeners are scheduled by pyee, which reports their failures itself
    if asyncio.iscoroutinefunction(listener):
        return listener

    def wrapped_listener(*args, **kwargs):
        try:
            listener(*args, **kwargs)
        except Exception as err:
            log.exception(f'EventEmitter.emit(): uncaught listener exception: {err}')

    return wrapped_listener


class EventEmitter:
    """
    A generic interface for event registration and delivery. The MockRealtime client emits identity
    resolution events using the EventEmitter pattern.

    Methods
    -------
    on(*args)
        Registers a listener
    once(*args)
        Registers a listener for a single event
    off(*args)
        Removes listeners
    once_async(event=None)
        Returns a future resolved by the next matching event
    """
    def __init__(self):
        self.__named_event_emitter = AsyncIOEventEmitter()
        self.__all_event_emitter = AsyncIOEventEmitter()
        # (is_all_event, event, listener) -> listener registered with pyee
        self.__wrapped_listeners = {}

    def __resolve_args(self, method_name, *args):
        if _is_all_event_args(*args):
            return self.__all_event_emitter, _all_event, args[0], (True, _all_event, args[0])
        elif _is_named_event_args(*args):
            return self.__named_event_emitter, args[0], args[1], (False, args[0], args[1])
        raise ValueError(f"EventEmitter.{method_name}(): invalid args")

    def on(self, *args):
        """
        Registers the provided listener for the specified event, if provided, and otherwise for all events.
        If on() is called more than once with the same listener and event, the listener is added multiple times to
        its listener registry.

        Parameters
        ----------
        name : str
            The named event to listen for.
        listener : callable
            The event listener.
        """
        emitter, event, listener, key = self.__resolve_args('on', *args)
        wrapped_listener = self.__wrapped_listeners.setdefault(key, _wrap_listener(listener))
        emitter.add_listener(event, wrapped_listener)

    def once(self, *args):
        """
        Registers the provided listener for the first event that is emitted.

        Parameters
        ----------
        name : str
            The named event to listen for.
        listener : callable
            The event listener.
        """
        emitter, event, listener, key = self.__resolve_args('once', *args)
        wrapped_listener = _wrap_listener(listener)

        def once_listener(*args, **kwargs):
            if self.__wrapped_listeners.get(key) is once_listener:
                del self.__wrapped_listeners[key]
            return wrapped_listener(*args, **kwargs)

        self.__wrapped_listeners[key] = once_listener
        emitter.once(event, once_listener)

    def off(self, *args):
        """
        Removes all registrations that match both the specified listener and, if provided, the specified event.
        If called with no arguments, deregisters all registrations, for all events and listeners.

        Parameters
        ----------
        name : str
            The named event to listen for.
        listener : callable
            The event listener.
        """
        if len(args) == 0:
            self.__all_event_emitter.remove_all_listeners()
            self.__named_event_emitter.remove_all_listeners()
            self.__wrapped_listeners.clear()
            return

        emitter, event, listener, key = self.__resolve_args('off', *args)
        wrapped_listener = self.__wrapped_listeners.pop(key, None)
        if wrapped_listener is None:
            return

        try:
            emitter.remove_listener(event, wrapped_listener)
        except KeyError:
            log.debug(f'EventEmitter.off(): listener not registered for event {event}')

    def once_async(self, event=None):
        future = asyncio.get_running_loop().create_future()

        def on_event(*args):
            if not future.done():
                future.set_result(args[0] if args else None)

        listener_args = (on_event,) if event is None else (event, on_event)
        self.once(*listener_args)

        def on_done(done_future):
            if done_future.cancelled():
                self.off(*listener_args)

        future.add_done_callback(on_done)
        return future

    def listener_count(self, event=None):
        """Returns the number of listeners registered for event, or for all events if event is None"""
        if event is None:
            return len(self.__all_event_emitter.listeners(_all_event))
        return len(self.__named_event_emitter.listeners(event))

    def _emit(self, *args):
        self.__named_event_emitter.emit(*args)
        self.__all_event_emitter.emit(_all_event, *args[1:])
