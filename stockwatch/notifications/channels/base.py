"""Channel adapter base class.

Every delivery channel (email, SMS) implements this interface. Adapters only
hold immutable configuration and an injected transport, so the dispatcher can
call ``send`` from several worker threads at once without locking.
"""

from abc import ABC, abstractmethod
from typing import Optional

from stockwatch.core.types import Channel, SupplierContact


class ChannelAdapter(ABC):
    @property
    @abstractmethod
    def channel(self) -> Channel:
        """Channel identifier used for routing and in outcomes."""

    @abstractmethod
    def resolve_target(self, supplier: Optional[SupplierContact]) -> Optional[str]:
        """Return the supplier address this channel delivers to, or None.

        A missing address is a skip, not an error.
        """

    @abstractmethod
    def send(self, target: str, subject: str, body: str) -> Optional[str]:
        """Deliver one message and return the provider message id, if any.

        Raises:
            ChannelUnconfigured: no transport credential is available.
            TransportError: the provider rejected the call or was unreachable.
        """


__all__ = ["ChannelAdapter"]
