import logging
from typing import Callable, List, Optional, Sequence, Tuple, Union

import httpx

from audience_adapter.adapter.bid_factory import build_bid_response
from audience_adapter.adapter.config import AdapterConfig, config
from audience_adapter.adapter.errors import MalformedResponseError
from audience_adapter.adapter.request_builder import build_request_url
from audience_adapter.adapter.response_parser import match_bid, parse_network_response
from audience_adapter.adapter.schema import BidderRequest, BidResponse, ValidatedSlot
from audience_adapter.adapter.validator import placement_format_pairs, validate_batch
from audience_adapter.transport.http import HttpTransport

logger = logging.getLogger(__name__)

AddBidResponse = Callable[[str, BidResponse], None]


class AudienceNetworkAdapter:
    """
    Bridges the host auction to the Audience Network placementbid endpoint.

    Responsibilities:
        1. Validation (placementId, size normalization)
        2. Request building (one GET per auction round)
        3. Response parsing (network errors, first-bid-wins matching)
        4. Bid response creation (cpm, dimensions, markup)

    Attributes:
        config (AdapterConfig): Immutable identity and endpoint settings.
        transport (HttpTransport): Issues the outbound GET.
        log_error (Callable[[str], None]): Error sink, one message per call.
    """

    def __init__(
        self,
        conf: AdapterConfig = config,
        transport: Optional[HttpTransport] = None,
        log_error: Optional[Callable[[str], None]] = None,
    ):
        self.config = conf
        self.transport = transport or HttpTransport(conf.transport)
        self.log_error = log_error or logger.error

    def get_bidder_code(self) -> str:
        return self.config.bidder_code

    def with_bidder_code(self, bidder_code: str) -> "AudienceNetworkAdapter":
        """Alias this adapter under another bidder code, sharing the transport."""
        return AudienceNetworkAdapter(
            conf=self.config.with_bidder_code(bidder_code),
            transport=self.transport,
            log_error=self.log_error,
        )

    def prepare(self, bidder_request: BidderRequest) -> Tuple[List[ValidatedSlot], Optional[str]]:
        """
        Validate the batch and build the request url.
        The url is None when no descriptor survived validation.
        """
        slots = validate_batch(bidder_request.bids, self.log_error, self.config)
        url = build_request_url(placement_format_pairs(slots), self.config)
        return slots, url

    def interpret_response(
        self,
        slots: Sequence[ValidatedSlot],
        body: Union[str, bytes, dict],
        add_bid_response: AddBidResponse,
    ) -> List[Tuple[str, BidResponse]]:
        """
        Turn the network response into one bid response per slot, in slot order.

        Network-level error strings are reported individually and do not stop
        per-slot resolution. A malformed body yields no responses.
        """
        try:
            response = parse_network_response(body)
        except MalformedResponseError as e:
            self.log_error(f"{self.config.bidder_code}: {e}")
            return []

        for error in response.errors:
            self.log_error(error)

        results = []
        for slot in slots:
            bid_response = build_bid_response(slot, match_bid(slot, response), self.config)
            add_bid_response(bid_response.placementCode, bid_response)
            results.append((bid_response.placementCode, bid_response))
        return results

    async def call_bids(
        self,
        bidder_request: BidderRequest,
        add_bid_response: AddBidResponse,
    ) -> List[Tuple[str, BidResponse]]:
        """
        Run one auction round.

        Execution Flow:
            1. Validate descriptors (invalid ones are logged and dropped)
            2. Build the GET url, or stop if nothing is left to bid on
            3. Await the network response
            4. Emit bid responses in descriptor order
        """
        slots, url = self.prepare(bidder_request)
        if url is None:
            logger.info(f"{self.config.bidder_code}: no valid placements, skipping request")
            return []

        try:
            body = await self.transport.get(url)
        except httpx.HTTPError as e:
            self.log_error(f"{self.config.bidder_code}: bid request failed: {e}")
            return []

        return self.interpret_response(slots, body, add_bid_response)
