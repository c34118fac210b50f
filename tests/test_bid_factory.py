import pytest

from audience_adapter.adapter.bid_factory import (
    build_bid_response,
    cpm_from_cents,
    create_ad_html,
    dimensions_for_format,
    js_string,
)
from audience_adapter.adapter.schema import (
    BidRequestDescriptor,
    BidStatus,
    NetworkBid,
    ValidatedSlot,
)

placement_id = "test-placement-id"
placement_code = "/test/placement/code"

NATIVE_STYLE_MARKER = 'getElementsByTagName("style")'
NATIVE_CONTAINER_MARKER = '<div class="thirdPartyRoot"><a class="fbAdLink">'


@pytest.fixture
def network_bid():
    return NetworkBid(placement_id=placement_id, bid_id="test-bid-id", bid_price_cents=123)


def make_slot(*formats):
    descriptor = BidRequestDescriptor(
        bidder="audienceNetwork", placementCode=placement_code, params={"placementId": placement_id}
    )
    return ValidatedSlot(descriptor=descriptor, placementId=placement_id, formats=formats)


@pytest.mark.parametrize("cents, cpm", [(123, 1.23), (456, 4.56), (0, 0.0), (100, 1.0), (1, 0.01)])
def test_cpm_from_cents(cents, cpm):
    assert cpm_from_cents(cents) == cpm


@pytest.mark.parametrize("ad_format, dims", [
    ("native", (0, 0)),
    ("fullwidth", (0, 0)),
    ("300x250", (300, 250)),
    ("320x50", (320, 50)),
])
def test_dimensions_for_format(ad_format, dims):
    assert dimensions_for_format(ad_format) == dims


def test_native_markup_includes_native_fragments():
    ad = create_ad_html(placement_id, "native", "test-bid-id")
    assert f"placementid:'{placement_id}',format:'native',bidid:'test-bid-id'" in ad
    assert NATIVE_STYLE_MARKER in ad
    assert NATIVE_CONTAINER_MARKER in ad


def test_banner_markup_excludes_native_fragments():
    ad = create_ad_html(placement_id, "300x250", "test-bid-id")
    assert f"placementid:'{placement_id}',format:'300x250',bidid:'test-bid-id'" in ad
    assert NATIVE_STYLE_MARKER not in ad
    assert NATIVE_CONTAINER_MARKER not in ad


def test_good_native_response(network_bid):
    response = build_bid_response(make_slot("native"), network_bid)
    assert response.get_status_code() == BidStatus.GOOD
    assert response.placementCode == placement_code
    assert response.bidderCode == "audienceNetwork"
    assert response.cpm == 1.23
    assert (response.width, response.height) == (0, 0)
    assert response.hb_bidder == "fan"
    assert response.fb_bidid == "test-bid-id"
    assert response.fb_format == "native"
    assert response.fb_placementid == placement_id


def test_good_banner_response_uses_first_format(network_bid):
    response = build_bid_response(make_slot("300x250", "native"), network_bid)
    assert response.statusCode == BidStatus.GOOD
    assert (response.width, response.height) == (300, 250)
    assert response.fb_format == "300x250"
    assert NATIVE_CONTAINER_MARKER not in response.ad


def test_no_bid_response():
    response = build_bid_response(make_slot("native"), None)
    assert response.statusCode == BidStatus.NO_BID
    assert response.placementCode == placement_code
    assert response.bidderCode == "audienceNetwork"
    assert response.cpm == 0.0
    assert response.ad is None


def test_factory_is_deterministic(network_bid):
    slot = make_slot("native")
    assert build_bid_response(slot, network_bid) == build_bid_response(slot, network_bid)


def test_markup_escapes_quotes_in_ids():
    ad = create_ad_html("it's-a-placement", "300x250", "bid'</script>")
    assert "placementid:'it\\'s-a-placement',format:'300x250',bidid:'bid\\'\\x3c/script\\x3e'" in ad
    assert "</script>'" not in ad


def test_js_string_leaves_plain_ids_untouched():
    assert js_string("123_456") == "123_456"
    assert js_string("a\\b\nc") == "a\\\\b\\nc"
