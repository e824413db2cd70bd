"""Order context handed to the orchestrator by the host application."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class OrderLinks:
    """Links the gateway returned with the order."""

    payment_authorization: str | None = None
    card_payment: str | None = None
    wallet_pay: str | None = None
    three_ds_completion: str | None = None


@dataclass(frozen=True)
class OrderContext:
    """
    The checkout order being paid.

    The orchestrator only reads from it. Both ``authorization_code`` and
    ``links.payment_authorization`` are needed before a flow can start.
    """

    reference: str
    authorization_code: str | None = None
    amount_minor: int | None = None
    currency: str | None = None
    links: OrderLinks = field(default_factory=OrderLinks)

    @property
    def can_authorize(self) -> bool:
        """True when the order carries everything needed to request a token."""
        return bool(self.authorization_code) and bool(self.links.payment_authorization)

    @classmethod
    def from_gateway(cls, payload: dict) -> "OrderContext":
        """
        Build an order context from a gateway order document.

        Reads the ``_links`` section in HAL form as well as the authorization
        code embedded in the payment authorization href (``?code=...``).
        """
        links = payload.get("_links") or {}
        embedded = payload.get("_embedded") or {}
        payments = embedded.get("payment") or []
        payment_links = (payments[0].get("_links") or {}) if payments else {}

        auth_href = _href(links, "cnp:payment-authorization") or _href(
            payment_links, "cnp:payment-authorization"
        )
        auth_code = None
        if auth_href and "?code=" in auth_href:
            auth_href, auth_code = auth_href.split("?code=", 1)

        amount = payload.get("amount") or {}
        return cls(
            reference=payload.get("reference", ""),
            authorization_code=auth_code or None,
            amount_minor=amount.get("value"),
            currency=amount.get("currencyCode"),
            links=OrderLinks(
                payment_authorization=auth_href,
                card_payment=_href(payment_links, "payment:card"),
                wallet_pay=_href(payment_links, "payment:apple_pay"),
                three_ds_completion=_href(payment_links, "cnp:3ds"),
            ),
        )


def _href(links: dict, rel: str) -> str | None:
    entry = links.get(rel)
    if isinstance(entry, dict):
        return entry.get("href")
    return None
