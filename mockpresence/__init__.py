from mockpresence.realtime.realtime import MockRealtime
from mockpresence.realtime.realtime_channel import Channels, MockChannel, default_channels, reset_default_channels
from mockpresence.realtime.channelview import ChannelView
from mockpresence.auth import Auth
from mockpresence.authorizers import (
    DeferredAuthorizer, async_authorizer, never_authorizer, static_authorizer, token_authorizer,
)
from mockpresence.types.identity import ABSENT, IdentityEvent, IdentityStateChange, Resolved, Unresolved
from mockpresence.types.options import Options
from mockpresence.types.presence import PresenceAction, PresenceMessage
from mockpresence.util.exceptions import MockPresenceException

import logging

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

lib_version = '1.0.0'
