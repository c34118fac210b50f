import logging
from typing import Optional, Sequence, Tuple
from urllib.parse import quote

from audience_adapter.adapter.config import AdapterConfig, config

logger = logging.getLogger(__name__)

PLACEMENT_KEY = "placementids[]"
FORMAT_KEY = "adformats[]"


def encode_query(pairs: Sequence[Tuple[str, str]]) -> str:
    """
    Encode (placementId, adFormat) pairs as parallel repeated keys.
    Keys keep their literal brackets; values are percent-encoded.
    """
    parts = []
    for placement_id, ad_format in pairs:
        parts.append(f"{PLACEMENT_KEY}={quote(placement_id, safe='')}")
        parts.append(f"{FORMAT_KEY}={quote(ad_format, safe='')}")
    return "&".join(parts)


def build_request_url(pairs: Sequence[Tuple[str, str]], conf: AdapterConfig = config) -> Optional[str]:
    """
    Build the single bidding GET url for a batch.
    Returns None when there is nothing to bid on.
    """
    if not pairs:
        return None
    url = f"{conf.endpoint}?{encode_query(pairs)}"
    logger.debug(f"Built bid request for {len(pairs)} placement/format pair(s)")
    return url
