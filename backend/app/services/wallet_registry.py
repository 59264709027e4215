"""Static catalog of the shop's wallets and their cash rules."""

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional


class WalletId(str, enum.Enum):
    """Wallet identifier enumeration."""
    cash = "cash"
    bank = "bank"
    safe = "safe"
    postal_card = "postal_card"
    banker_card = "banker_card"


@dataclass(frozen=True)
class WalletConfig:
    id: WalletId
    name: str
    is_physical: bool
    min_balance: Decimal = Decimal("0")
    max_balance: Optional[Decimal] = None
    optimal_balance: Optional[Decimal] = None
    transfer_excess_to: Optional[WalletId] = None
    replenish_from: Optional[WalletId] = None
    alert_threshold: Decimal = Decimal("0")


WALLETS: Dict[WalletId, WalletConfig] = {
    WalletId.cash: WalletConfig(
        id=WalletId.cash,
        name="Caisse",
        is_physical=True,
        min_balance=Decimal("50"),
        max_balance=Decimal("500"),
        optimal_balance=Decimal("100"),
        transfer_excess_to=WalletId.safe,
        replenish_from=WalletId.safe,
        alert_threshold=Decimal("50"),
    ),
    WalletId.bank: WalletConfig(
        id=WalletId.bank,
        name="Banque",
        is_physical=False,
    ),
    WalletId.safe: WalletConfig(
        id=WalletId.safe,
        name="Coffre",
        is_physical=True,
        alert_threshold=Decimal("100"),
    ),
    WalletId.postal_card: WalletConfig(
        id=WalletId.postal_card,
        name="Carte Postal",
        is_physical=False,
        transfer_excess_to=WalletId.bank,
        alert_threshold=Decimal("10"),
    ),
    WalletId.banker_card: WalletConfig(
        id=WalletId.banker_card,
        name="Carte Banker",
        is_physical=False,
        transfer_excess_to=WalletId.bank,
        alert_threshold=Decimal("10"),
    ),
}


def get_wallet(wallet_id: WalletId) -> WalletConfig:
    return WALLETS[WalletId(wallet_id)]


def list_wallets() -> List[WalletConfig]:
    return list(WALLETS.values())


def physical_wallets() -> List[WalletConfig]:
    return [w for w in WALLETS.values() if w.is_physical]


def find_wallet(value: Optional[str]) -> Optional[WalletId]:
    """
    Resolve a stored wallet value to its identifier.
    Accepts the identifier itself or the display name (legacy rows store
    "Caisse", "Carte Postal", ...). Returns None for anything unknown.
    """
    if not value:
        return None
    if isinstance(value, WalletId):
        return value
    needle = str(value).strip().lower()
    for config in WALLETS.values():
        if needle == config.id.value or needle == config.name.lower():
            return config.id
    return None
