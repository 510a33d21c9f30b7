"""Marketplace error taxonomy.

Every failure is a synchronous rejection of the attempted transaction.
Nothing is committed when one of these is raised, and each carries the
reason surfaced to the caller verbatim.
"""

from __future__ import annotations


class MarketError(RuntimeError):
    """Base class for rejected marketplace transactions."""

    reason: str = "transaction rejected"

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or self.reason)


class InvalidPrice(MarketError):
    reason = "price must be greater than 0"


class IncorrectFee(MarketError):
    reason = "price must be equal to listing price"


class IncorrectPayment(MarketError):
    reason = "please submit the asking price in order to complete the purchase"


class UnknownItem(MarketError):
    reason = "item is not listed for sale"


class NotOwner(MarketError):
    reason = "only item owner can perform this operation"


class NotSeller(MarketError):
    reason = "only the seller can cancel this listing"


class NotMarketOwner(MarketError):
    reason = "only marketplace owner can update listing price"


class InvalidTokenURI(MarketError):
    reason = "token URI must not be empty"


class ReservedCaller(MarketError):
    reason = "marketplace address cannot initiate transactions"
