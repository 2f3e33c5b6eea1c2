import asyncio
import inspect
import random
import string
import time
from collections.abc import Mapping


def get_random_id():
    # get random string of letters and digits
    source = string.ascii_letters + string.digits
    random_id = ''.join((random.choice(source) for i in range(8)))
    return random_id


def is_callable_or_coroutine(value):
    return asyncio.iscoroutinefunction(value) or inspect.isfunction(value) or inspect.ismethod(value)


def unix_time_ms():
    return round(time.time_ns() / 1_000_000)


def has_authorize(value):
    return callable(getattr(value, 'authorize', None))


def identity_from_result(result):
    """Unwraps a `{'id': ...}` authorization result, passing any other value through."""
    if isinstance(result, Mapping) and 'id' in result:
        return result['id']
    return result


def decode_channel_name(name):
    # surrogateescape keeps undecodable bytes distinct and round-trippable
    if isinstance(name, bytes):
        return name.decode('utf-8', 'surrogateescape')
    return name
