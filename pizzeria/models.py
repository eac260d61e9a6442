"""Data models for sheets, records and push subscriptions."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# A Record maps stable field names to typed cell values
Record = Dict[str, Any]

# Value of a "limit" cell that does not hold an integer. Serializes as JSON null.
UNLIMITED = None


@dataclass(frozen=True)
class SheetSpec:
    """One published spreadsheet tab and how to read it."""
    key: str  # Key in the JSON response, e.g. "cardapio"
    url: str
    headers: Dict[str, str]  # Literal column title -> stable field name
    id_field: str = "id"
    name_field: str = "name"

    @property
    def configured(self) -> bool:
        return bool(self.url)


@dataclass
class IngredientOption:
    """A selectable ingredient for the build-your-own burger."""
    name: str
    price: float = 0.0

    def to_dict(self) -> Record:
        return {"name": self.name, "price": self.price}


@dataclass
class PushSubscription:
    """Browser push endpoint plus its encryption keys."""
    endpoint: str
    keys: Dict[str, str] = field(default_factory=dict)
    expiration_time: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PushSubscription":
        return cls(
            endpoint=(data.get("endpoint") or "").strip(),
            keys=dict(data.get("keys") or {}),
            expiration_time=data.get("expirationTime"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Shape expected by the browser Push API and by pywebpush."""
        return {
            "endpoint": self.endpoint,
            "keys": self.keys,
            "expirationTime": self.expiration_time,
        }


@dataclass
class DeliveryOutcome:
    """Result of one push attempt (one notification to one subscription)."""
    endpoint: str
    notification_id: str
    success: bool = True
    status_code: Optional[int] = None
    permanent_failure: bool = False


@dataclass
class DispatchReport:
    """Summary of one dispatch cycle."""
    outcomes: List[DeliveryOutcome] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def sent(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return self.attempted - self.sent

    @property
    def status_line(self) -> str:
        msg = f"{self.sent}/{self.attempted} push message(s) delivered"
        if self.removed:
            msg += f", {len(self.removed)} dead subscription(s) removed"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": "Notification process completed.",
            "attempted": self.attempted,
            "sentCount": self.sent,
            "failedCount": self.failed,
            "removedCount": len(self.removed),
        }
