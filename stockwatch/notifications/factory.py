import logging

from stockwatch.core.types import Channel
from stockwatch.notifications.channels import EmailChannel, SmsChannel
from stockwatch.notifications.transports import ResendEmailTransport, TwilioSmsTransport

logger = logging.getLogger(__name__)


def parse_channel_list(value):
    channels = []
    for item in (value or "").split(","):
        item = item.strip().lower()
        if not item:
            continue
        channel = Channel(item)
        if channel not in channels:
            channels.append(channel)
    return channels


def build_email_channel(settings):
    transport = ResendEmailTransport(
        api_url=settings.RESEND_API_URL,
        api_key=settings.RESEND_API_KEY,
        sender=settings.EMAIL_FROM,
        timeout=settings.TRANSPORT_TIMEOUT_SECONDS,
    )
    if not transport.configured:
        logger.warning("Email channel enabled without Resend credentials; sends will be skipped.")
    return EmailChannel(transport)


def build_sms_channel(settings):
    transport = TwilioSmsTransport(
        api_base_url=settings.TWILIO_API_BASE_URL,
        account_sid=settings.TWILIO_ACCOUNT_SID,
        auth_token=settings.TWILIO_AUTH_TOKEN,
        from_number=settings.TWILIO_FROM_NUMBER,
        timeout=settings.TRANSPORT_TIMEOUT_SECONDS,
    )
    if not transport.configured:
        logger.warning("SMS channel enabled without Twilio credentials; sends will be skipped.")
    return SmsChannel(transport)


_BUILDERS = {
    Channel.EMAIL: build_email_channel,
    Channel.SMS: build_sms_channel,
}


def build_channels(settings):
    """Channel adapters in NOTIFY_CHANNELS order."""
    return {channel: _BUILDERS[channel](settings) for channel in parse_channel_list(settings.NOTIFY_CHANNELS)}


__all__ = ["build_channels", "build_email_channel", "build_sms_channel", "parse_channel_list"]
