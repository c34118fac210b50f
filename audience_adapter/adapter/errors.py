class AdapterError(Exception):
    """Base class for all adapter failures."""


class InvalidBidRequestError(AdapterError):
    """A descriptor cannot contribute to the outbound request."""

    def __init__(self, message: str, placement_code: str = ""):
        super().__init__(message)
        self.placement_code = placement_code


class MissingPlacementIdError(InvalidBidRequestError):
    pass


class InvalidSizeError(InvalidBidRequestError):
    pass


class MalformedResponseError(AdapterError):
    """The response body is not a placementbid.json payload."""
