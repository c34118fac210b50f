from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple


class BidStatus(IntEnum):
    """Status codes understood by the host auction."""

    GOOD = 1
    NO_BID = 2


@dataclass
class BidRequestDescriptor:
    """
    One ad slot the host auction wants priced by this bidder.
    Field names mirror the host auction's wire format.
    """

    bidder: str
    placementCode: str = ""
    params: Dict[str, Any] = field(default_factory=dict)
    sizes: List[Any] = field(default_factory=list)

    @property
    def placementId(self) -> Optional[Any]:
        return (self.params or {}).get("placementId")


@dataclass
class BidderRequest:
    """The batch of descriptors handed to the adapter for one auction round."""

    bidderCode: str
    bids: List[BidRequestDescriptor] = field(default_factory=list)


@dataclass(frozen=True)
class ValidatedSlot:
    """A descriptor that passed validation together with its recognized ad formats."""

    descriptor: BidRequestDescriptor
    placementId: str
    formats: Tuple[str, ...]

    @property
    def primary_format(self) -> str:
        return self.formats[0]


@dataclass(frozen=True)
class NetworkBid:
    placement_id: str
    bid_id: str
    bid_price_cents: int
    bid_price_currency: str = "usd"
    bid_price_model: str = "cpm"


@dataclass(frozen=True)
class NetworkResponse:
    """Decoded body of the network's placementbid.json response."""

    errors: Tuple[str, ...] = ()
    bids: Dict[str, Tuple[NetworkBid, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class BidResponse:
    """
    Standardized bid handed to the host auction.
    Created once per resolved descriptor and never mutated afterwards.
    """

    placementCode: str
    bidderCode: str
    statusCode: BidStatus
    cpm: float = 0.0
    width: int = 0
    height: int = 0
    ad: Optional[str] = None
    hb_bidder: Optional[str] = None
    fb_bidid: Optional[str] = None
    fb_format: Optional[str] = None
    fb_placementid: Optional[str] = None

    def get_status_code(self) -> BidStatus:
        return self.statusCode
