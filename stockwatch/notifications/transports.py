import base64
import json
import logging
from urllib import error, parse, request
from urllib.parse import urlparse

from stockwatch.core.errors import ChannelUnconfigured, TransportError

logger = logging.getLogger(__name__)

_ALLOWED_HTTP_SCHEMES = {"http", "https"}


def validate_api_url(api_url, setting_name):
    parsed = urlparse(api_url)
    scheme = parsed.scheme.lower()
    if scheme not in _ALLOWED_HTTP_SCHEMES or not parsed.netloc:
        raise ChannelUnconfigured("{} must be an absolute HTTP(S) URL".format(setting_name))
    return api_url


def is_retryable_status(status_code):
    return status_code == 429 or status_code >= 500


def _read_error_body(exc):
    try:
        body_bytes = exc.read()
        if body_bytes:
            return body_bytes.decode("utf-8", errors="replace").strip()
    except (OSError, ValueError):
        return ""
    return ""


def post(url, data, headers, *, provider, timeout):
    """POST and return the decoded JSON body; provider failures raise TransportError."""
    req = request.Request(url, data=data, method="POST", headers=headers)
    logger.debug("POST %s request to %s", provider, urlparse(url).netloc)
    try:
        with request.urlopen(req, timeout=timeout) as response:  # nosec B310
            status_code = response.getcode()
            raw = response.read()
    except error.HTTPError as exc:
        body = _read_error_body(exc)
        message = "{} API error: HTTP {}".format(provider, exc.code)
        if body:
            message = "{} {}".format(message, body)
        raise TransportError(
            message,
            retryable=is_retryable_status(exc.code),
            status_code=exc.code,
        ) from exc
    except error.URLError as exc:
        raise TransportError("{} API error: {}".format(provider, exc.reason)) from exc
    except OSError as exc:
        raise TransportError("{} API error: {}".format(provider, exc)) from exc

    if status_code < 200 or status_code >= 300:
        raise TransportError(
            "{} API error: HTTP {}".format(provider, status_code),
            retryable=is_retryable_status(status_code),
            status_code=status_code,
        )
    if not raw:
        return {}
    try:
        return json.loads(raw.decode("utf-8"))
    except ValueError:
        return {}


class ResendEmailTransport:
    def __init__(self, *, api_url, api_key, sender, timeout=15.0):
        self._api_url = (api_url or "").strip()
        self._api_key = (api_key or "").strip()
        self._sender = (sender or "").strip()
        self._timeout = timeout

    @property
    def configured(self):
        return bool(self._api_url and self._api_key and self._sender)

    def send(self, to, subject, html):
        if not self._api_key:
            raise ChannelUnconfigured("RESEND_API_KEY is not configured")
        if not self._sender:
            raise ChannelUnconfigured("EMAIL_FROM is not configured")
        api_url = validate_api_url(self._api_url, "RESEND_API_URL")

        if self._api_key.lower().startswith("bearer "):
            auth_header = self._api_key
        else:
            auth_header = "Bearer {}".format(self._api_key)

        payload = json.dumps(
            {"from": self._sender, "to": to, "subject": subject, "html": html}
        ).encode("utf-8")
        data = post(
            api_url,
            payload,
            {"Content-Type": "application/json", "Authorization": auth_header},
            provider="Resend",
            timeout=self._timeout,
        )
        return data.get("id")


class TwilioSmsTransport:
    def __init__(self, *, api_base_url, account_sid, auth_token, from_number, timeout=15.0):
        self._api_base_url = (api_base_url or "").strip()
        self._account_sid = (account_sid or "").strip()
        self._auth_token = (auth_token or "").strip()
        self._from_number = (from_number or "").strip()
        self._timeout = timeout

    @property
    def configured(self):
        return bool(self._account_sid and self._auth_token and self._from_number)

    def messages_url(self):
        base_url = validate_api_url(self._api_base_url, "TWILIO_API_BASE_URL")
        return "{}/Accounts/{}/Messages.json".format(
            base_url.rstrip("/"), parse.quote(self._account_sid, safe="")
        )

    def send(self, to, body):
        if not self.configured:
            raise ChannelUnconfigured("Twilio credentials are not configured")

        credentials = "{}:{}".format(self._account_sid, self._auth_token).encode("utf-8")
        form = parse.urlencode({"To": to, "From": self._from_number, "Body": body}).encode("utf-8")
        data = post(
            self.messages_url(),
            form,
            {
                "Content-Type": "application/x-www-form-urlencoded",
                "Authorization": "Basic {}".format(base64.b64encode(credentials).decode("ascii")),
            },
            provider="Twilio",
            timeout=self._timeout,
        )
        return data.get("sid")


__all__ = [
    "ResendEmailTransport",
    "TwilioSmsTransport",
    "is_retryable_status",
    "post",
    "validate_api_url",
]
