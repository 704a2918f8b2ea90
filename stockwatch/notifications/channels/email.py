"""Email channel delivering HTML alerts through the Resend API."""

import logging

from stockwatch.core.errors import ChannelUnconfigured
from stockwatch.core.types import Channel
from stockwatch.notifications.channels.base import ChannelAdapter

logger = logging.getLogger(__name__)


class EmailChannel(ChannelAdapter):
    def __init__(self, transport=None):
        self._transport = transport

    @property
    def channel(self):
        return Channel.EMAIL

    def resolve_target(self, supplier):
        if supplier is None:
            return None
        return supplier.email or None

    def send(self, target, subject, body):
        if self._transport is None:
            raise ChannelUnconfigured("Email transport is not configured")
        message_id = self._transport.send(target, subject, body)
        logger.info("Email sent to %s (id=%s)", target, message_id)
        return message_id


__all__ = ["EmailChannel"]
