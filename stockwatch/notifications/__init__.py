from stockwatch.notifications.channels import ChannelAdapter, EmailChannel, SmsChannel
from stockwatch.notifications.factory import build_channels, parse_channel_list
from stockwatch.notifications.messages import build_message

__all__ = [
    "ChannelAdapter",
    "EmailChannel",
    "SmsChannel",
    "build_channels",
    "build_message",
    "parse_channel_list",
]
