"""
Bid response factory.

Pure functions turning a matched network bid into the standardized response
the host auction consumes: price conversion, dimensions and creative markup.
"""
from typing import Optional, Tuple

from audience_adapter.adapter.config import AdapterConfig, config
from audience_adapter.adapter.schema import BidResponse, BidStatus, NetworkBid, ValidatedSlot

SDK_URL = "https://connect.facebook.net/en_US/fbadnw.js"

# Copies the host page styles into the creative iframe
NATIVE_STYLE = (
    "<script>window.onload=function(){if(parent){"
    "var o=document.getElementsByTagName(\"head\")[0];"
    "var s=parent.document.getElementsByTagName(\"style\");"
    "for(var i=0;i<s.length;i++)o.appendChild(s[i].cloneNode(true));"
    "}}</script>"
)

NATIVE_CONTAINER = (
    '<div class="thirdPartyRoot"><a class="fbAdLink">'
    '<div class="fbAdMedia thirdPartyMediaClass"></div>'
    '<div class="fbAdSubtitle thirdPartySubtitleClass"></div>'
    '<div class="fbDefaultNativeAdWrapper">'
    '<div class="fbAdCallToAction thirdPartyCallToActionClass"></div>'
    '<div class="fbAdTitle thirdPartyTitleClass"></div>'
    "</div></a></div>"
)

AD_TEMPLATE = (
    "<html><head>{style}</head><body>"
    '<div style="display:none;position:relative;">'
    "<script type='text/javascript'>var data = {{"
    "placementid:'{placement_id}',format:'{ad_format}',bidid:'{bid_id}',"
    "onAdLoaded:function(e){{console.log('Audience Network [{placement_id}] ad loaded');e.style.display = 'block';}},"
    "onAdError:function(c,m){{console.log('Audience Network [{placement_id}] error (' + c + ') ' + m);}}"
    "}};</script>"
    "<script type='text/javascript' src='{sdk_url}' async></script>"
    "{container}"
    "</div></body></html>"
)


# Characters that would end or break a single-quoted JS string inside <script>
JS_STRING_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "<": "\\x3c",
    ">": "\\x3e",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def js_string(value: str) -> str:
    """Escape a value for embedding between single quotes in inline script."""
    return "".join(JS_STRING_ESCAPES.get(ch, ch) for ch in value)


def cpm_from_cents(cents: int) -> float:
    """Convert network cents to a two-decimal cpm. Currency and price model are not checked."""
    return round(cents / 100.0, 2)


def dimensions_for_format(ad_format: str, conf: AdapterConfig = config) -> Tuple[int, int]:
    """Native and fullwidth creatives are fluid and report 0x0."""
    if ad_format in (conf.native_format, conf.fullwidth_format):
        return 0, 0
    width, height = ad_format.split("x")
    return int(width), int(height)


def create_ad_html(placement_id: str, ad_format: str, bid_id: str, conf: AdapterConfig = config) -> str:
    is_native = ad_format == conf.native_format
    return AD_TEMPLATE.format(
        style=NATIVE_STYLE if is_native else "",
        container=NATIVE_CONTAINER if is_native else "",
        placement_id=js_string(placement_id),
        ad_format=js_string(ad_format),
        bid_id=js_string(bid_id),
        sdk_url=SDK_URL,
    )


def build_bid_response(
    slot: ValidatedSlot,
    bid: Optional[NetworkBid],
    conf: AdapterConfig = config,
) -> BidResponse:
    """
    Build the standardized response for one validated slot.

    A missing bid yields NO_BID. Otherwise the slot's first recognized format
    drives dimensions and markup.
    """
    placement_code = slot.descriptor.placementCode
    if bid is None:
        return BidResponse(
            placementCode=placement_code,
            bidderCode=conf.bidder_code,
            statusCode=BidStatus.NO_BID,
        )

    ad_format = slot.primary_format
    width, height = dimensions_for_format(ad_format, conf)
    return BidResponse(
        placementCode=placement_code,
        bidderCode=conf.bidder_code,
        statusCode=BidStatus.GOOD,
        cpm=cpm_from_cents(bid.bid_price_cents),
        width=width,
        height=height,
        ad=create_ad_html(slot.placementId, ad_format, bid.bid_id, conf),
        hb_bidder=conf.bidder_tag,
        fb_bidid=bid.bid_id,
        fb_format=ad_format,
        fb_placementid=slot.placementId,
    )
