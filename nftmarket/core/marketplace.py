"""Marketplace ledger — mint, list, buy, resell and cancel NFT listings.

The ledger owns a sequential token id counter, the id -> ``MarketItem``
mapping and a balance book recording every value transfer.  While an item
is listed the marketplace itself (its custodial address) owns it.

Every mutating operation validates all of its inputs before touching any
state, so a rejected transaction leaves items, balances, the counter and
the journal exactly as they were.  Mutations are assumed to be serialized
by the caller; the ledger does no locking.

Money flow
----------
- ``create_token`` / ``resell_token``: the listing fee is held in escrow
  by the custodial address.
- ``create_market_sale``: the payment goes to the seller and one listing
  fee paid for that listing moves from escrow to the fee payee.
- ``cancel_item_listing``: custody returns to the seller, no value moves.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterator
from typing import Any

from nftmarket.core.errors import (
    IncorrectFee,
    IncorrectPayment,
    InvalidPrice,
    InvalidTokenURI,
    MarketError,
    NotMarketOwner,
    NotOwner,
    NotSeller,
    ReservedCaller,
    UnknownItem,
)
from nftmarket.core.event_bus import EventBus
from nftmarket.core.journal import TransactionJournal
from nftmarket.models.config import MarketConfig
from nftmarket.models.events import MarketItemCreated
from nftmarket.models.items import MarketItem
from nftmarket.models.journal import JournalEntry, TransactionKind

logger = logging.getLogger(__name__)


class Marketplace:
    """In-memory NFT marketplace ledger.

    Parameters
    ----------
    config:
        Marketplace identities and the initial listing fee.
    journal:
        Optional ``TransactionJournal``.  When provided, every committed
        transaction is appended to it.  The journal must be empty; it
        receives a genesis ``deploy`` entry holding *config*.  Use
        ``restore`` to load a marketplace from an existing journal.
    events:
        Optional ``EventBus`` for creation notifications.  A new one is
        created if not provided.

    Examples
    --------
    >>> config = MarketConfig(owner="0xowner", custodial_address="0xmarket")
    >>> market = Marketplace(config)
    >>> fee = market.get_listing_price()
    >>> token_id = market.create_token("ipfs://a", 100, caller="0xalice", value=fee)
    >>> market.owner_of(token_id)
    '0xmarket'
    """

    def __init__(
        self,
        config: MarketConfig,
        journal: TransactionJournal | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._config = config
        self._listing_fee = config.listing_fee
        self._journal = journal
        self.events = events or EventBus()
        self._items: dict[int, MarketItem] = {}
        self._token_counter = 0
        self._balances: defaultdict[str, int] = defaultdict(int)
        self._escrow: dict[int, int] = {}
        self._replaying = False

        if journal is not None:
            if len(journal) > 0:
                raise ValueError(
                    f"Journal {journal.path} already holds a marketplace; "
                    "use Marketplace.restore() to load it."
                )
            journal.append(
                JournalEntry(
                    kind=TransactionKind.DEPLOY,
                    caller=config.owner,
                    arguments={"config": config.model_dump(mode="json")},
                )
            )
            logger.info(
                "Deployed marketplace %s (owner %s).",
                config.custodial_address,
                config.owner,
            )

    # -- Restoration --------------------------------------------------------

    @classmethod
    def restore(
        cls,
        journal: TransactionJournal,
        events: EventBus | None = None,
    ) -> Marketplace:
        """Rebuild a marketplace by replaying *journal*.

        The journal's chain is verified first.  Notifications are not
        re-published during replay.

        Raises
        ------
        JournalIntegrityError
            If the journal has been tampered with.
        ValueError
            If the journal has no deploy entry.
        """
        journal.verify_chain()
        genesis = journal.get_genesis()
        if genesis is None:
            raise ValueError(f"Journal {journal.path} has no deploy entry.")

        config = MarketConfig.model_validate(genesis.arguments["config"])
        market = cls(config, journal=None, events=events)
        market._replaying = True
        try:
            for entry in journal.get_entries():
                market._apply(entry)
        finally:
            market._replaying = False
        market._journal = journal
        logger.info(
            "Restored marketplace %s from %d journal entries (%d items).",
            config.custodial_address,
            len(journal),
            market.item_count,
        )
        return market

    def _apply(self, entry: JournalEntry) -> None:
        args = entry.arguments
        value = int(entry.value)
        if entry.kind is TransactionKind.DEPLOY:
            return
        if entry.kind is TransactionKind.CREATE_TOKEN:
            self.create_token(
                args["token_uri"], int(args["price"]), caller=entry.caller, value=value
            )
        elif entry.kind is TransactionKind.MARKET_SALE:
            self.create_market_sale(entry.token_id, caller=entry.caller, value=value)
        elif entry.kind is TransactionKind.RESELL_TOKEN:
            self.resell_token(
                entry.token_id, int(args["price"]), caller=entry.caller, value=value
            )
        elif entry.kind is TransactionKind.CANCEL_LISTING:
            self.cancel_item_listing(entry.token_id, caller=entry.caller)
        elif entry.kind is TransactionKind.UPDATE_LISTING_PRICE:
            self.update_listing_price(int(args["listing_fee"]), caller=entry.caller)

    # -- Properties ---------------------------------------------------------

    @property
    def config(self) -> MarketConfig:
        return self._config

    @property
    def address(self) -> str:
        """The marketplace's own custodial identity."""
        return self._config.custodial_address

    @property
    def journal(self) -> TransactionJournal | None:
        return self._journal

    @property
    def item_count(self) -> int:
        """Number of tokens minted so far."""
        return self._token_counter

    def connect(self, caller: str) -> MarketSession:
        """Return a view of this marketplace bound to *caller*."""
        return MarketSession(self, caller)

    # -- Listing fee --------------------------------------------------------

    def get_listing_price(self) -> int:
        """Return the fee that must accompany every create/resell."""
        return self._listing_fee

    def update_listing_price(self, listing_fee: int, *, caller: str) -> None:
        """Change the listing fee.  Only the marketplace owner may do this.

        Listings already on the market keep the fee they were created with.

        Raises
        ------
        NotMarketOwner
            If *caller* is not the owner.
        InvalidPrice
            If *listing_fee* is not strictly positive.
        """
        if caller != self._config.owner:
            raise self._rejected(NotMarketOwner(), "update_listing_price", caller)
        if listing_fee <= 0:
            raise self._rejected(InvalidPrice(), "update_listing_price", caller)

        self._commit(
            TransactionKind.UPDATE_LISTING_PRICE,
            caller,
            arguments={"listing_fee": str(listing_fee)},
        )
        old_fee, self._listing_fee = self._listing_fee, listing_fee
        logger.info("Listing fee changed from %d to %d.", old_fee, listing_fee)

    # -- Mutating operations ------------------------------------------------

    def create_token(
        self, token_uri: str, price: int, *, caller: str, value: int
    ) -> int:
        """Mint a new token and list it for sale in one step.

        Parameters
        ----------
        token_uri:
            Non-empty descriptive URI, immutable after minting.
        price:
            Asking price; must be strictly positive.
        caller:
            Identity minting the token.  Becomes creator and seller.
        value:
            Amount paid with the call; must equal the listing fee.

        Returns
        -------
        int
            The new token id.

        Raises
        ------
        ReservedCaller
            If *caller* is the marketplace's own custodial address.
        InvalidTokenURI, InvalidPrice, IncorrectFee
        """
        self._require_external_caller("create_token", caller)
        if not token_uri:
            raise self._rejected(InvalidTokenURI(), "create_token", caller)
        if price <= 0:
            raise self._rejected(InvalidPrice(), "create_token", caller)
        if value != self._listing_fee:
            raise self._rejected(IncorrectFee(), "create_token", caller)

        token_id = self._token_counter + 1
        item = MarketItem(
            token_id=token_id,
            token_uri=token_uri,
            creator=caller,
            seller=caller,
            owner=self.address,
            price=price,
        )
        self._commit(
            TransactionKind.CREATE_TOKEN,
            caller,
            token_id=token_id,
            arguments={"token_uri": token_uri, "price": str(price)},
            value=value,
        )
        self._token_counter = token_id
        self._items[token_id] = item
        self._hold_fee(token_id, value)
        logger.info(
            "Token %d minted and listed by %s for %d.", token_id, caller, price
        )
        self._publish(
            MarketItemCreated(
                token_id=token_id,
                seller=item.seller,
                owner=item.owner,
                price=item.price,
                sold=item.sold,
            )
        )
        return token_id

    def create_market_sale(self, token_id: int, *, caller: str, value: int) -> None:
        """Buy a listed token at its asking price.

        Custody moves to *caller*, *value* is paid to the seller and the
        escrowed listing fee is paid to the fee payee.

        Raises
        ------
        ReservedCaller
            If *caller* is the marketplace's own custodial address.
        UnknownItem
            If the token does not exist or is not currently listed.
        IncorrectPayment
            If *value* differs from the asking price.
        """
        self._require_external_caller("create_market_sale", caller, token_id)
        item = self._items.get(token_id)
        if item is None or not item.is_listed_by(self.address):
            raise self._rejected(UnknownItem(), "create_market_sale", caller, token_id)
        if value != item.price:
            raise self._rejected(
                IncorrectPayment(), "create_market_sale", caller, token_id
            )

        self._commit(
            TransactionKind.MARKET_SALE, caller, token_id=token_id, value=value
        )
        self._items[token_id] = item.model_copy(
            update={"owner": caller, "sold": True}
        )
        self._balances[item.seller] += value
        fee = self._escrow.pop(token_id, 0)
        self._balances[self.address] -= fee
        self._balances[self._config.fee_payee] += fee
        logger.info(
            "Token %d sold by %s to %s for %d.", token_id, item.seller, caller, value
        )

    def resell_token(
        self, token_id: int, price: int, *, caller: str, value: int
    ) -> None:
        """Put an owned token back on the market at a new price.

        Raises
        ------
        UnknownItem
            If the token does not exist.
        NotOwner
            If *caller* does not currently own the token.  The custodial
            address never counts as an owner, even while it holds a listing.
        InvalidPrice, IncorrectFee
        """
        item = self._require_item(token_id, "resell_token", caller)
        if item.owner != caller or caller == self.address:
            raise self._rejected(NotOwner(), "resell_token", caller, token_id)
        if price <= 0:
            raise self._rejected(InvalidPrice(), "resell_token", caller, token_id)
        if value != self._listing_fee:
            raise self._rejected(IncorrectFee(), "resell_token", caller, token_id)

        self._commit(
            TransactionKind.RESELL_TOKEN,
            caller,
            token_id=token_id,
            arguments={"price": str(price)},
            value=value,
        )
        self._items[token_id] = item.model_copy(
            update={
                "owner": self.address,
                "seller": caller,
                "price": price,
                "sold": False,
                "cancelled": False,
            }
        )
        self._hold_fee(token_id, value)
        logger.info("Token %d relisted by %s for %d.", token_id, caller, price)

    def cancel_item_listing(self, token_id: int, *, caller: str) -> None:
        """Withdraw an active listing and return the token to its seller.

        No value is transferred; the listing fee already paid stays with the
        marketplace.

        Raises
        ------
        UnknownItem
            If the token does not exist or is not currently listed.
        NotSeller
            If *caller* did not list the token.
        """
        item = self._require_item(token_id, "cancel_item_listing", caller)
        if item.seller != caller:
            raise self._rejected(NotSeller(), "cancel_item_listing", caller, token_id)
        if not item.is_listed_by(self.address):
            raise self._rejected(UnknownItem(), "cancel_item_listing", caller, token_id)

        self._commit(TransactionKind.CANCEL_LISTING, caller, token_id=token_id)
        self._items[token_id] = item.model_copy(
            update={"owner": caller, "sold": True, "cancelled": True}
        )
        self._escrow.pop(token_id, None)
        logger.info("Listing for token %d cancelled by %s.", token_id, caller)

    # -- Queries ------------------------------------------------------------

    def fetch_market_items(self) -> list[MarketItem]:
        """Return every active listing in ascending token id order."""
        return [
            item for item in self._iter_items() if item.is_listed_by(self.address)
        ]

    def fetch_purchased_nfts(self, *, caller: str) -> list[MarketItem]:
        """Return the tokens *caller* currently owns, in ascending id order."""
        return [item for item in self._iter_items() if item.owner == caller]

    def fetch_items_listed(self, *, caller: str) -> list[MarketItem]:
        """Return the active listings *caller* is selling, in ascending id order."""
        return [
            item
            for item in self._iter_items()
            if item.seller == caller and item.is_listed_by(self.address)
        ]

    def get_item(self, token_id: int) -> MarketItem:
        """Return the record for *token_id*.

        Raises
        ------
        UnknownItem
            If the token was never minted.
        """
        item = self._items.get(token_id)
        if item is None:
            raise UnknownItem("item does not exist")
        return item

    def token_uri(self, token_id: int) -> str:
        return self.get_item(token_id).token_uri

    def owner_of(self, token_id: int) -> str:
        return self.get_item(token_id).owner

    def balance_of(self, identity: str) -> int:
        """Total value credited to *identity* by marketplace transactions."""
        return self._balances.get(identity, 0)

    def get_stats(self) -> dict[str, Any]:
        """Return summary statistics about the marketplace.

        Returns
        -------
        dict[str, Any]
            Keys: ``minted``, ``listed``, ``sold``, ``cancelled``,
            ``listing_fee`` and ``escrow`` (fees held by the marketplace).
        """
        listed = sold = cancelled = 0
        for item in self._items.values():
            if item.cancelled:
                cancelled += 1
            elif item.sold:
                sold += 1
            elif item.is_listed_by(self.address):
                listed += 1
        return {
            "minted": self._token_counter,
            "listed": listed,
            "sold": sold,
            "cancelled": cancelled,
            "listing_fee": self._listing_fee,
            "escrow": self.balance_of(self.address),
        }

    # -- Internal helpers ---------------------------------------------------

    def _iter_items(self) -> Iterator[MarketItem]:
        logger.debug("Scanning %d item(s).", len(self._items))
        for token_id in sorted(self._items):
            yield self._items[token_id]

    def _hold_fee(self, token_id: int, fee: int) -> None:
        self._escrow[token_id] = fee
        self._balances[self.address] += fee

    def _require_item(self, token_id: int, operation: str, caller: str) -> MarketItem:
        item = self._items.get(token_id)
        if item is None:
            raise self._rejected(
                UnknownItem("item does not exist"), operation, caller, token_id
            )
        return item

    def _require_external_caller(
        self, operation: str, caller: str, token_id: int | None = None
    ) -> None:
        # The custodial address only ever receives custody; it never transacts.
        if caller == self.address:
            raise self._rejected(ReservedCaller(), operation, caller, token_id)

    @staticmethod
    def _rejected(
        error: MarketError,
        operation: str,
        caller: str,
        token_id: int | None = None,
    ) -> MarketError:
        logger.warning(
            "Rejected %s by %s (token %s): %s", operation, caller, token_id, error
        )
        return error

    def _commit(
        self,
        kind: TransactionKind,
        caller: str,
        token_id: int | None = None,
        arguments: dict[str, Any] | None = None,
        value: int = 0,
    ) -> None:
        """Journal a validated transaction before it is applied in memory."""
        if self._journal is None or self._replaying:
            return
        self._journal.append(
            JournalEntry(
                kind=kind,
                caller=caller,
                token_id=token_id,
                arguments=arguments or {},
                value=str(value),
            )
        )

    def _publish(self, event: MarketItemCreated) -> None:
        if self._replaying:
            return
        self.events.publish(event)


class MarketSession:
    """A marketplace view bound to one caller identity.

    Mirrors the ledger operations without the ``caller`` argument.

    Examples
    --------
    >>> buyer = market.connect("0xbob")
    >>> buyer.create_market_sale(1, value=100)
    >>> [item.token_id for item in buyer.fetch_purchased_nfts()]
    [1]
    """

    def __init__(self, market: Marketplace, caller: str) -> None:
        self.market = market
        self.caller = caller

    def create_token(self, token_uri: str, price: int, *, value: int) -> int:
        return self.market.create_token(
            token_uri, price, caller=self.caller, value=value
        )

    def create_market_sale(self, token_id: int, *, value: int) -> None:
        self.market.create_market_sale(token_id, caller=self.caller, value=value)

    def resell_token(self, token_id: int, price: int, *, value: int) -> None:
        self.market.resell_token(token_id, price, caller=self.caller, value=value)

    def cancel_item_listing(self, token_id: int) -> None:
        self.market.cancel_item_listing(token_id, caller=self.caller)

    def update_listing_price(self, listing_fee: int) -> None:
        self.market.update_listing_price(listing_fee, caller=self.caller)

    def fetch_market_items(self) -> list[MarketItem]:
        return self.market.fetch_market_items()

    def fetch_purchased_nfts(self) -> list[MarketItem]:
        return self.market.fetch_purchased_nfts(caller=self.caller)

    def fetch_items_listed(self) -> list[MarketItem]:
        return self.market.fetch_items_listed(caller=self.caller)

    def balance(self) -> int:
        return self.market.balance_of(self.caller)
