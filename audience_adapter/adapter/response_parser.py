import json
import logging
from typing import Any, Dict, Optional, Union

from audience_adapter.adapter.errors import MalformedResponseError
from audience_adapter.adapter.schema import NetworkBid, NetworkResponse, ValidatedSlot
from audience_adapter.utils.validation import Validator

logger = logging.getLogger(__name__)


def _parse_bid(entry: Any, placement_id: str) -> Optional[NetworkBid]:
    if not isinstance(entry, dict) or not entry.get("bid_id"):
        logger.debug(f"Skipping unusable bid entry for {placement_id}: {entry!r}")
        return None
    return NetworkBid(
        placement_id=str(entry.get("placement_id", placement_id)),
        bid_id=str(entry["bid_id"]),
        bid_price_cents=Validator.parse_cents(entry.get("bid_price_cents")),
        bid_price_currency=str(entry.get("bid_price_currency", "usd")),
        bid_price_model=str(entry.get("bid_price_model", "cpm")),
    )


def parse_network_response(body: Union[str, bytes, Dict[str, Any]]) -> NetworkResponse:
    """
    Decode a placementbid.json payload.

    Both top-level keys are optional. Entries inside a placement's bid list
    that are not usable bids are dropped.

    Raises:
        MalformedResponseError: body is not JSON or not a JSON object.
    """
    if isinstance(body, (str, bytes)):
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise MalformedResponseError(f"Response is not valid JSON: {e}") from e
    else:
        payload = body

    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(payload).__name__}")

    errors = payload.get("errors")
    bids = payload.get("bids")
    errors = [] if errors is None else errors
    bids = {} if bids is None else bids
    if not isinstance(errors, list) or not isinstance(bids, dict):
        raise MalformedResponseError("Response 'errors' must be a list and 'bids' an object")

    parsed_bids = {}
    for placement_id, entries in bids.items():
        if not isinstance(entries, list):
            logger.debug(f"Ignoring non-list bids for {placement_id}")
            continue
        parsed = [bid for bid in (_parse_bid(e, placement_id) for e in entries) if bid]
        parsed_bids[placement_id] = tuple(parsed)

    return NetworkResponse(errors=tuple(str(e) for e in errors), bids=parsed_bids)


def match_bid(slot: ValidatedSlot, response: NetworkResponse) -> Optional[NetworkBid]:
    """
    First bid wins per placementId.

    Descriptors sharing a placementId each see the same first entry; the list
    is never consumed.
    """
    candidates = response.bids.get(slot.placementId)
    if not candidates:
        return None
    return candidates[0]
