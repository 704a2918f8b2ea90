"""SMS channel delivering plain-text alerts through the Twilio API."""

import logging

from stockwatch.core.errors import ChannelUnconfigured
from stockwatch.core.types import Channel
from stockwatch.notifications.channels.base import ChannelAdapter

logger = logging.getLogger(__name__)


class SmsChannel(ChannelAdapter):
    def __init__(self, transport=None):
        self._transport = transport

    @property
    def channel(self):
        return Channel.SMS

    def resolve_target(self, supplier):
        if supplier is None:
            return None
        return supplier.phone or None

    def send(self, target, subject, body):
        # SMS has no subject line; the body already carries the product name.
        if self._transport is None:
            raise ChannelUnconfigured("SMS transport is not configured")
        sid = self._transport.send(target, body)
        logger.info("SMS sent to %s (sid=%s)", target, sid)
        return sid


__all__ = ["SmsChannel"]
