import os
from dataclasses import dataclass, field, replace
from typing import Tuple


@dataclass(frozen=True)
class TransportConfig:
    """Configuration for the outbound bidding request."""
    timeout_s: float = 5.0
    user_agent: str = "audience-network-adapter/1.0"


@dataclass(frozen=True)
class AdapterConfig:
    """
    Master configuration for one adapter instance.

    The bidder code is fixed for the lifetime of the config; aliasing the
    adapter produces a new config via with_bidder_code().
    """
    bidder_code: str = "audienceNetwork"
    # Short tag echoed on every bid as hb_bidder
    bidder_tag: str = "fan"
    endpoint: str = "https://an.facebook.com/v2/placementbid.json"

    # Ad formats accepted by the network
    supported_sizes: Tuple[str, ...] = ("300x250", "320x50")
    native_format: str = "native"
    fullwidth_format: str = "fullwidth"

    # Input validation
    max_string_length: int = 512

    transport: TransportConfig = field(default_factory=TransportConfig)

    def with_bidder_code(self, bidder_code: str) -> "AdapterConfig":
        return replace(self, bidder_code=bidder_code)

    @classmethod
    def from_env(cls) -> "AdapterConfig":
        """Build a config, overriding defaults with AN_ADAPTER_* variables."""
        defaults = cls()
        transport = replace(
            defaults.transport,
            timeout_s=float(os.getenv("AN_ADAPTER_TIMEOUT_S", defaults.transport.timeout_s)),
        )
        return replace(
            defaults,
            bidder_code=os.getenv("AN_ADAPTER_BIDDER_CODE", defaults.bidder_code),
            endpoint=os.getenv("AN_ADAPTER_ENDPOINT", defaults.endpoint),
            transport=transport,
        )


# Global default config instance
config = AdapterConfig()
