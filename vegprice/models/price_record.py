# vegprice/models/price_record.py

"""Price record models shared by the pipeline, store, and projections."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PriceRecord:
    """One item's average price on one publication date.

    ``date`` is an ISO ``yyyy-mm-dd`` string end to end so that stored
    values compare by plain string equality.
    """

    date: str
    item: str
    price: float


@dataclass(frozen=True)
class PricePoint:
    """A price observed on a date, keyed by item in the read views."""

    price: float
    date: str

    def to_dict(self) -> dict[str, object]:
        """Serialise for the JSON API."""
        return {"date": self.date, "price": self.price}
