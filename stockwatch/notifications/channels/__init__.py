from stockwatch.notifications.channels.base import ChannelAdapter
from stockwatch.notifications.channels.email import EmailChannel
from stockwatch.notifications.channels.sms import SmsChannel

__all__ = ["ChannelAdapter", "EmailChannel", "SmsChannel"]
