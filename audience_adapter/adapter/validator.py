import logging
import math
import re
from numbers import Real
from typing import Any, Callable, Iterable, List, Optional, Tuple

from audience_adapter.adapter.config import AdapterConfig, config
from audience_adapter.adapter.errors import (
    InvalidBidRequestError,
    InvalidSizeError,
    MissingPlacementIdError,
)
from audience_adapter.adapter.schema import BidRequestDescriptor, ValidatedSlot
from audience_adapter.utils.validation import Validator

logger = logging.getLogger(__name__)

SIZE_PATTERN = re.compile(r"^(\d+)x(\d+)$")


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    if not math.isfinite(value) or value <= 0 or int(value) != value:
        return None
    return int(value)


def canonicalize_size(size: Any, conf: AdapterConfig = config) -> Optional[str]:
    """
    Map one size token onto a recognized ad format.

    Accepts [w, h] pairs, "WxH" strings and the literal "native"/"fullwidth"
    tokens. Returns None for anything the network does not accept.
    """
    if isinstance(size, (list, tuple)):
        if len(size) != 2:
            return None
        width, height = (_positive_int(v) for v in size)
        if width is None or height is None:
            return None
        size = f"{width}x{height}"

    if not isinstance(size, str):
        return None

    if size in (conf.native_format, conf.fullwidth_format):
        return size
    if SIZE_PATTERN.match(size) and size in conf.supported_sizes:
        return size
    return None


def validate_descriptor(descriptor: BidRequestDescriptor, conf: AdapterConfig = config) -> ValidatedSlot:
    """
    Validate a single descriptor.

    Raises:
        MissingPlacementIdError: params.placementId is absent or empty.
        InvalidBidRequestError: params.placementId exceeds max_string_length.
        InvalidSizeError: none of the sizes is a recognized ad format.
    """
    placement_code = descriptor.placementCode
    placement_id = Validator.sanitize_string(descriptor.placementId)
    if not placement_id:
        raise MissingPlacementIdError(
            f"{conf.bidder_code}: missing placementId parameter for {placement_code!r}",
            placement_code,
        )
    if Validator.is_too_long(placement_id, conf.max_string_length):
        raise InvalidBidRequestError(
            f"{conf.bidder_code}: placementId longer than {conf.max_string_length} characters for {placement_code!r}",
            placement_code,
        )

    # One entry per recognized token, duplicates kept
    formats = tuple(
        fmt for fmt in (canonicalize_size(size, conf) for size in descriptor.sizes or ()) if fmt
    )
    if not formats:
        raise InvalidSizeError(
            f"{conf.bidder_code}: invalid size parameter {descriptor.sizes!r} for placementId {placement_id!r}",
            placement_code,
        )
    return ValidatedSlot(descriptor=descriptor, placementId=placement_id, formats=formats)


def validate_batch(
    descriptors: Iterable[BidRequestDescriptor],
    log_error: Callable[[str], None],
    conf: AdapterConfig = config,
) -> List[ValidatedSlot]:
    """
    Validate every descriptor of a batch, preserving order.
    Invalid descriptors are dropped and reported once each.
    """
    slots = []
    for descriptor in descriptors:
        try:
            slots.append(validate_descriptor(descriptor, conf))
        except InvalidBidRequestError as e:
            log_error(str(e))
    logger.debug(f"Validated {len(slots)} slot(s)")
    return slots


def placement_format_pairs(slots: Iterable[ValidatedSlot]) -> List[Tuple[str, str]]:
    """Flatten validated slots into (placementId, adFormat) pairs in request order."""
    return [(slot.placementId, fmt) for slot in slots for fmt in slot.formats]
