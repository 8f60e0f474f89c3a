"""
Muse Drop - off-chain mint engine.

Plain-Python mirror of the accounting rules enforced by the on-chain
application in muse_drop.py.  The CLI loads live application state into a
`MintController` and runs the requested call against it before submitting, so a
call that the contract would reject is reported locally with the same error
name and nothing is paid in fees.

Every call is all-or-nothing: checks run before any counter moves, and if the
issuance primitive refuses (pause, or no balance left for the box storage
deposit), the counter reservation is rolled back.
"""

import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import allowlist

# ─────────────────────────────────────────────
#  CONSTANTS
# ─────────────────────────────────────────────
FIRST_TOKEN_ID = 1
MICROALGOS_PER_ALGO = 1_000_000

DEFAULT_MAX_SUPPLY = 5555
DEFAULT_WHITELIST_CAP = 3
DEFAULT_AIRDROP_CAP = 1
DEFAULT_PER_TX_CAP = 5
DEFAULT_UNIT_PRICE = 25 * MICROALGOS_PER_ALGO
DEFAULT_FEE_DENOMINATOR = 100

# Box storage deposit charged to the application account (protocol constants)
BOX_FLAT_MBR = 2_500
BOX_BYTE_MBR = 400
TOKEN_BOX_MBR = BOX_FLAT_MBR + BOX_BYTE_MBR * (1 + 8 + 32)      # "t" + itob(id) -> owner
COUNTER_BOX_MBR = BOX_FLAT_MBR + BOX_BYTE_MBR * (2 + 32 + 8)    # "wl"/"ad" + pubkey -> itob(count)


class Variant(Enum):
    WHITELIST = "whitelist"
    AIRDROP = "airdrop"
    OPEN = "open"

    @property
    def code(self) -> int:
        return _VARIANT_CODES[self]

    @property
    def proof_gated(self) -> bool:
        return self is not Variant.OPEN


_VARIANT_CODES = {Variant.WHITELIST: 0, Variant.AIRDROP: 1, Variant.OPEN: 2}


# ─────────────────────────────────────────────
#  ERRORS
# ─────────────────────────────────────────────
class DropError(Exception):
    """Base class; the class name matches the assert comment in the contract."""


class PhaseClosed(DropError):
    def __init__(self, variant: Variant) -> None:
        self.variant = variant
        super().__init__(f"{variant.value} phase is closed")


class InvalidProof(DropError):
    def __init__(self, address: str, variant: Variant) -> None:
        self.address = address
        self.variant = variant
        super().__init__(f"{address} is not on the {variant.value} allowlist")


class CapExceeded(DropError):
    def __init__(self, scope: str, current: int, requested: int, cap: int) -> None:
        self.scope = scope
        self.current = current
        self.requested = requested
        self.cap = cap
        super().__init__(f"{scope} cap exceeded (current={current}, requested={requested}, cap={cap})")


class PaymentMismatch(DropError):
    def __init__(self, sent: int, required: int) -> None:
        self.sent = sent
        self.required = required
        super().__init__(f"payment must be exactly {required} microALGO (sent={sent})")


class SupplyExceeded(DropError):
    def __init__(self, minted: int, requested: int, ceiling: int) -> None:
        self.minted = minted
        self.requested = requested
        self.ceiling = ceiling
        super().__init__(f"supply ceiling reached (minted={minted}, requested={requested}, ceiling={ceiling})")


class PerTxExceeded(DropError):
    def __init__(self, requested: int, cap: int) -> None:
        self.requested = requested
        self.cap = cap
        super().__init__(f"at most {cap} per transaction (requested={requested})")


class InvalidQuantity(DropError):
    def __init__(self, quantity: int) -> None:
        self.quantity = quantity
        super().__init__(f"quantity must be a positive integer (got {quantity!r})")


class TransfersPaused(DropError):
    def __init__(self) -> None:
        super().__init__("transfers are paused")


class NoBalance(DropError):
    def __init__(self, needed: int = 0) -> None:
        self.needed = needed
        if needed:
            super().__init__(f"application account cannot fund {needed} microALGO of box storage")
        else:
            super().__init__("nothing to withdraw")


class Unauthorized(DropError):
    def __init__(self, caller: str) -> None:
        self.caller = caller
        super().__init__(f"{caller} is not authorized")


class ConfigInvalid(DropError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"invalid configuration: {reason}")


class TransferRejected(DropError):
    def __init__(self, receiver: str, amount: int) -> None:
        self.receiver = receiver
        self.amount = amount
        super().__init__(f"payout of {amount} microALGO to {receiver} rejected")


class UnknownToken(DropError):
    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(f"token {token_id} does not exist")


# ─────────────────────────────────────────────
#  CONFIGURATION RECORDS
# ─────────────────────────────────────────────
@dataclass
class SaleConfig:
    unit_price: int = DEFAULT_UNIT_PRICE
    max_supply: int = DEFAULT_MAX_SUPPLY
    whitelist_cap: int = DEFAULT_WHITELIST_CAP
    airdrop_cap: int = DEFAULT_AIRDROP_CAP
    per_tx_cap: int = DEFAULT_PER_TX_CAP
    whitelist_root: bytes = bytes(allowlist.NODE_LEN)
    airdrop_root: bytes = bytes(allowlist.NODE_LEN)
    whitelist_open: bool = False
    airdrop_open: bool = False
    public_open: bool = False
    base_uri: str = ""
    approval_registry: Optional[str] = None

    def cap_for(self, variant: Variant) -> Optional[int]:
        """Per-address cap; None for the open variant, which has none."""
        if variant is Variant.WHITELIST:
            return self.whitelist_cap
        if variant is Variant.AIRDROP:
            return self.airdrop_cap
        return None

    def root_for(self, variant: Variant) -> bytes:
        if variant is Variant.WHITELIST:
            return self.whitelist_root
        if variant is Variant.AIRDROP:
            return self.airdrop_root
        raise ValueError(f"{variant.value} has no allowlist")


@dataclass
class FeeSplit:
    beneficiary_1: str
    beneficiary_2: str
    weight_1: int = 50
    weight_2: int = 50
    denominator: int = DEFAULT_FEE_DENOMINATOR

    @property
    def over_allocated(self) -> bool:
        return self.weight_1 + self.weight_2 > self.denominator

    def shares(self, balance: int) -> Tuple[int, int]:
        if self.denominator == 0:
            raise ConfigInvalid("fee denominator is zero")
        return (
            balance * self.weight_1 // self.denominator,
            balance * self.weight_2 // self.denominator,
        )


# ─────────────────────────────────────────────
#  GATES
# ─────────────────────────────────────────────
class PhaseGate:
    """Three independent flags; any subset may be open at once."""

    def __init__(self, config: SaleConfig):
        self._config = config

    def is_open(self, variant: Variant) -> bool:
        if variant is Variant.WHITELIST:
            return self._config.whitelist_open
        if variant is Variant.AIRDROP:
            return self._config.airdrop_open
        return self._config.public_open

    def require(self, variant: Variant) -> None:
        if not self.is_open(variant):
            raise PhaseClosed(variant)


class PauseGate:
    def __init__(self, paused: bool = False):
        self.paused = paused

    def require_unpaused(self) -> None:
        if self.paused:
            raise TransfersPaused()


# ─────────────────────────────────────────────
#  SUPPLY LEDGER
# ─────────────────────────────────────────────
@dataclass(frozen=True)
class Reservation:
    address: str
    variant: Variant
    quantity: int


class SupplyLedger:
    def __init__(self, config: SaleConfig, total_minted: int = 0):
        self._config = config
        self._total = total_minted
        self._minted: Dict[Tuple[Variant, str], int] = {}

    def total_minted(self) -> int:
        return self._total

    def address_minted(self, address: str, variant: Variant) -> int:
        if not variant.proof_gated:
            return 0
        return self._minted.get((variant, address), 0)

    def load(self, address: str, variant: Variant, count: int) -> None:
        """Seed a counter from chain state."""
        if variant.proof_gated:
            self._minted[(variant, address)] = count

    def reserve(self, address: str, variant: Variant, quantity: int) -> Reservation:
        cap = self._config.cap_for(variant)
        current = self.address_minted(address, variant)
        if cap is not None and current + quantity > cap:
            raise CapExceeded(variant.value, current, quantity, cap)
        if self._total + quantity > self._config.max_supply:
            raise CapExceeded("supply", self._total, quantity, self._config.max_supply)

        if variant.proof_gated:
            self._minted[(variant, address)] = current + quantity
        self._total += quantity
        return Reservation(address, variant, quantity)

    def release(self, reservation: Reservation) -> None:
        """Undo a reservation whose issuance failed."""
        if reservation.variant.proof_gated:
            key = (reservation.variant, reservation.address)
            self._minted[key] -= reservation.quantity
        self._total -= reservation.quantity


# ─────────────────────────────────────────────
#  TOKEN LEDGER  (issuance + transfers)
# ─────────────────────────────────────────────
ApprovalLookup = Callable[[str, str], bool]


def operator_registry(operator: Optional[str]) -> ApprovalLookup:
    """Approval lookup that trusts one marketplace operator for every holder."""
    def is_approved(holder: str, candidate: str) -> bool:
        return operator is not None and candidate == operator
    return is_approved


class TokenLedger:
    """Sequential-ID ownership records with a pause-gated transfer hook."""

    def __init__(
        self,
        pause: PauseGate,
        is_approved: Optional[ApprovalLookup] = None,
        next_token_id: int = FIRST_TOKEN_ID,
    ):
        self.pause = pause
        self._owners: Dict[int, str] = {}
        self._next_id = next_token_id
        self.is_approved = is_approved or operator_registry(None)

    def issue(self, receiver: str, quantity: int) -> List[int]:
        self.pause.require_unpaused()
        ids = list(range(self._next_id, self._next_id + quantity))
        for token_id in ids:
            self._owners[token_id] = receiver
        self._next_id += quantity
        return ids

    def load(self, token_id: int, owner: str) -> None:
        """Seed an ownership record from chain state."""
        self._owners[token_id] = owner

    def owner_of(self, token_id: int) -> str:
        try:
            return self._owners[token_id]
        except KeyError:
            raise UnknownToken(token_id) from None

    def balance_of(self, holder: str) -> int:
        return sum(1 for owner in self._owners.values() if owner == holder)

    def transfer(self, caller: str, token_id: int, receiver: str) -> None:
        self.pause.require_unpaused()
        holder = self.owner_of(token_id)
        if caller != holder and not self.is_approved(holder, caller):
            raise Unauthorized(caller)
        self._owners[token_id] = receiver


# ─────────────────────────────────────────────
#  TREASURY  (application account)
# ─────────────────────────────────────────────
class Treasury:
    """
    Application account balance above its minimum balance, and the payouts it made.

    Box storage deposits move out of `balance` into `locked` as boxes are
    created, the way the account's minimum balance grows on-chain.
    """

    def __init__(self, balance: int = 0, rejecting: Iterable[str] = ()):
        self.balance = balance
        self.paid: Dict[str, int] = {}
        self.rejecting = set(rejecting)
        self.locked = 0

    def credit(self, amount: int) -> None:
        self.balance += amount

    def lock(self, amount: int) -> None:
        """Move a storage deposit out of the spendable balance."""
        if amount > self.balance:
            raise NoBalance(amount)
        self.balance -= amount
        self.locked += amount

    def pay_all(self, payouts: List[Tuple[str, int]], keep: int = 0) -> None:
        """Pay every (receiver, amount) in order without dipping below `keep`, or pay nobody."""
        remaining = self.balance - keep
        for receiver, amount in payouts:
            if receiver in self.rejecting or amount > remaining:
                raise TransferRejected(receiver, amount)
            remaining -= amount
        for receiver, amount in payouts:
            self.paid[receiver] = self.paid.get(receiver, 0) + amount
        self.balance = remaining + keep


# ─────────────────────────────────────────────
#  MINT CONTROLLER
# ─────────────────────────────────────────────
@dataclass
class MintReceipt:
    receiver: str
    variant: Variant
    token_ids: List[int] = field(default_factory=list)
    paid: int = 0


class MintController:
    """
    Phase-gated mint entry points plus the owner's administrative surface.

    Args:
        owner:      administrative identity
        config:     sale configuration, read fresh on every call
        fees:       proceeds split for withdraw()
        tokens:     issuance primitive; built on a fresh PauseGate if omitted
    """

    def __init__(
        self,
        owner: str,
        config: Optional[SaleConfig] = None,
        fees: Optional[FeeSplit] = None,
        tokens: Optional[TokenLedger] = None,
        treasury: Optional[Treasury] = None,
        total_minted: int = 0,
    ):
        self.owner = owner
        self.config = config or SaleConfig()
        self.fees = fees or FeeSplit(owner, owner)
        self.pause = tokens.pause if tokens is not None else PauseGate()
        self.tokens = tokens or TokenLedger(
            self.pause,
            operator_registry(self.config.approval_registry),
            next_token_id=FIRST_TOKEN_ID + total_minted,
        )
        self.treasury = treasury or Treasury()
        self.phases = PhaseGate(self.config)
        self.supply = SupplyLedger(self.config, total_minted)

    # ── reads ──
    def total_minted(self) -> int:
        return self.supply.total_minted()

    def address_minted(self, address: str, variant: Variant) -> int:
        return self.supply.address_minted(address, variant)

    def required_payment(self, quantity: int) -> int:
        return quantity * self.config.unit_price

    def storage_deposit(self, address: str, variant: Variant, quantity: int) -> int:
        """Box deposit a mint adds to the application's minimum balance."""
        deposit = quantity * TOKEN_BOX_MBR
        if variant.proof_gated and self.address_minted(address, variant) == 0:
            deposit += COUNTER_BOX_MBR
        return deposit

    def storage_reserve(self) -> int:
        """
        Balance withdraw() leaves behind so the unminted supply can still be
        issued: one token box and, worst case, one new wallet counter per unit.
        """
        remaining = max(self.config.max_supply - self.total_minted(), 0)
        return remaining * (TOKEN_BOX_MBR + COUNTER_BOX_MBR)

    # ── mint entry points ──
    def whitelist_mint(self, caller: str, quantity: int, proof: List[bytes], payment: int) -> MintReceipt:
        self._require_quantity(quantity)
        self._require_payment(quantity, payment)
        self.phases.require(Variant.WHITELIST)
        self._require_member(caller, Variant.WHITELIST, proof)
        return self._issue(caller, Variant.WHITELIST, quantity, payment)

    def airdrop_mint(self, caller: str, quantity: int, proof: List[bytes]) -> MintReceipt:
        self._require_quantity(quantity)
        self.phases.require(Variant.AIRDROP)
        # Ceiling is checked before the proof on this path only.
        self._require_supply(quantity)
        self._require_member(caller, Variant.AIRDROP, proof)
        return self._issue(caller, Variant.AIRDROP, quantity, 0)

    def public_mint(self, caller: str, quantity: int, payment: int) -> MintReceipt:
        self._require_quantity(quantity)
        self.phases.require(Variant.OPEN)
        self._require_supply(quantity)
        if quantity > self.config.per_tx_cap:
            raise PerTxExceeded(quantity, self.config.per_tx_cap)
        self._require_payment(quantity, payment)
        return self._issue(caller, Variant.OPEN, quantity, payment)

    def transfer(self, caller: str, token_id: int, receiver: str) -> None:
        self.tokens.transfer(caller, token_id, receiver)

    # ── proceeds ──
    def withdraw(self, caller: str) -> Tuple[int, int]:
        self._only_owner(caller)
        reserve = self.storage_reserve()
        spendable = self.treasury.balance - reserve
        if spendable <= 0:
            raise NoBalance()
        share_1, share_2 = self.fees.shares(spendable)
        self.treasury.pay_all([
            (self.fees.beneficiary_1, share_1),
            (self.fees.beneficiary_2, share_2),
        ], keep=reserve)
        return share_1, share_2

    # ── administration ──
    def set_unit_price(self, caller: str, price: int) -> None:
        self._only_owner(caller)
        self.config.unit_price = price

    def set_max_supply(self, caller: str, max_supply: int) -> None:
        self._only_owner(caller)
        self.config.max_supply = max_supply

    def set_whitelist_cap(self, caller: str, cap: int) -> None:
        self._only_owner(caller)
        self.config.whitelist_cap = cap

    def set_airdrop_cap(self, caller: str, cap: int) -> None:
        self._only_owner(caller)
        self.config.airdrop_cap = cap

    def set_per_tx_cap(self, caller: str, cap: int) -> None:
        self._only_owner(caller)
        self.config.per_tx_cap = cap

    def set_whitelist_root(self, caller: str, root: bytes) -> None:
        self._only_owner(caller)
        self.config.whitelist_root = bytes(root)

    def set_airdrop_root(self, caller: str, root: bytes) -> None:
        self._only_owner(caller)
        self.config.airdrop_root = bytes(root)

    def set_phase(self, caller: str, variant: Variant, is_open: bool) -> None:
        self._only_owner(caller)
        if variant is Variant.WHITELIST:
            self.config.whitelist_open = is_open
        elif variant is Variant.AIRDROP:
            self.config.airdrop_open = is_open
        else:
            self.config.public_open = is_open

    def set_beneficiaries(self, caller: str, beneficiary_1: str, beneficiary_2: str) -> None:
        self._only_owner(caller)
        self.fees.beneficiary_1 = beneficiary_1
        self.fees.beneficiary_2 = beneficiary_2

    def set_fee_split(self, caller: str, weight_1: int, weight_2: int, denominator: int) -> None:
        self._only_owner(caller)
        self.fees.weight_1 = weight_1
        self.fees.weight_2 = weight_2
        self.fees.denominator = denominator
        if self.fees.over_allocated:
            warnings.warn(
                f"fee weights {weight_1}+{weight_2} exceed denominator {denominator}",
                UserWarning,
                stacklevel=2,
            )

    def set_base_uri(self, caller: str, base_uri: str) -> None:
        self._only_owner(caller)
        self.config.base_uri = base_uri

    def set_approval_registry(self, caller: str, operator: Optional[str]) -> None:
        self._only_owner(caller)
        self.config.approval_registry = operator
        self.tokens.is_approved = operator_registry(operator)

    def set_paused(self, caller: str, paused: bool) -> None:
        self._only_owner(caller)
        self.pause.paused = paused

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        self._only_owner(caller)
        self.owner = new_owner

    # ── internals ──
    def _only_owner(self, caller: str) -> None:
        if caller != self.owner:
            raise Unauthorized(caller)

    def _require_quantity(self, quantity: int) -> None:
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise InvalidQuantity(quantity)

    def _require_payment(self, quantity: int, payment: int) -> None:
        required = self.required_payment(quantity)
        if payment != required:
            raise PaymentMismatch(payment, required)

    def _require_supply(self, quantity: int) -> None:
        minted = self.supply.total_minted()
        if minted + quantity > self.config.max_supply:
            raise SupplyExceeded(minted, quantity, self.config.max_supply)

    def _require_member(self, caller: str, variant: Variant, proof: List[bytes]) -> None:
        if not allowlist.verify(caller, self.config.root_for(variant), proof):
            raise InvalidProof(caller, variant)

    def _issue(self, receiver: str, variant: Variant, quantity: int, payment: int) -> MintReceipt:
        deposit = self.storage_deposit(receiver, variant, quantity)
        reservation = self.supply.reserve(receiver, variant, quantity)
        try:
            self.pause.require_unpaused()
            if deposit > self.treasury.balance + payment:
                raise NoBalance(deposit)
            token_ids = self.tokens.issue(receiver, quantity)
        except DropError:
            self.supply.release(reservation)
            raise
        self.treasury.credit(payment)
        self.treasury.lock(deposit)
        return MintReceipt(receiver, variant, token_ids, payment)
