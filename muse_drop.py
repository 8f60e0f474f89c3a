"""
╔══════════════════════════════════════════════════════════════════╗
║          MUSE DROP - Phased Collectible Issuance on Algorand     ║
║          Smart Contract: muse_drop.py                            ║
║                                                                  ║
║  Features:                                                       ║
║  • Whitelist phase  - Merkle-proof gated, paid, per-wallet cap   ║
║  • Airdrop phase    - Merkle-proof gated, free, per-wallet cap   ║
║  • Open phase       - paid, per-transaction cap                  ║
║  • Hard supply ceiling across all phases                         ║
║  • Two-way proceeds split with configurable weights              ║
║  • Pause switch covering mints and transfers                     ║
╚══════════════════════════════════════════════════════════════════╝

Built with: Beaker (PyTeal), AVM 8 boxes
Export:     python muse_drop.py   → ./artifacts/application.json
"""

from typing import Literal

from beaker import *
from pyteal import *


# ─────────────────────────────────────────────
#  CONSTANTS
# ─────────────────────────────────────────────
DEFAULT_MAX_SUPPLY    = Int(5555)
DEFAULT_WHITELIST_CAP = Int(3)
DEFAULT_AIRDROP_CAP   = Int(1)
DEFAULT_PER_TX_CAP    = Int(5)
DEFAULT_UNIT_PRICE    = Int(25_000_000)   # 25 ALGO in microALGO
DEFAULT_FEE_WEIGHT    = Int(50)
DEFAULT_FEE_DENOM     = Int(100)

FIRST_TOKEN_ID   = Int(1)
NODE_LEN         = Int(32)               # Merkle node / sibling size

# Minimum-balance deposit per box: 2500 + 400 * (key + value bytes)
TOKEN_BOX_MBR    = Int(18_900)           # "t" + itob(id) -> owner pubkey
COUNTER_BOX_MBR  = Int(19_300)           # "wl"/"ad" + pubkey -> itob(count)

VARIANT_WHITELIST = Int(0)
VARIANT_AIRDROP   = Int(1)


# ─────────────────────────────────────────────
#  BOX LAYOUT
# ─────────────────────────────────────────────
# Per-wallet counters:
#   key   = Bytes("wl") + sender pubkey (32)   → whitelist minted
#   key   = Bytes("ad") + sender pubkey (32)   → airdrop minted
#   value = itob(count)
#
# Token ownership:
#   key   = Bytes("t") + itob(token_id)
#   value = owner pubkey (32)
WHITELIST_PREFIX = Bytes("wl")
AIRDROP_PREFIX   = Bytes("ad")
TOKEN_PREFIX     = Bytes("t")


# ─────────────────────────────────────────────
#  APPLICATION STATE
# ─────────────────────────────────────────────
class MuseDropState:
    # ── Administration ──
    owner             = GlobalStateValue(TealType.bytes,  descr="Administrator wallet")
    paused            = GlobalStateValue(TealType.uint64, default=Int(0), descr="1 = all mints and transfers blocked")

    # ── Sale configuration ──
    unit_price        = GlobalStateValue(TealType.uint64, default=DEFAULT_UNIT_PRICE, descr="Price per unit in microALGO")
    max_supply        = GlobalStateValue(TealType.uint64, default=DEFAULT_MAX_SUPPLY, descr="Hard ceiling across all phases")
    whitelist_cap     = GlobalStateValue(TealType.uint64, default=DEFAULT_WHITELIST_CAP, descr="Per-wallet whitelist allocation")
    airdrop_cap       = GlobalStateValue(TealType.uint64, default=DEFAULT_AIRDROP_CAP, descr="Per-wallet airdrop allocation")
    per_tx_cap        = GlobalStateValue(TealType.uint64, default=DEFAULT_PER_TX_CAP, descr="Open-phase units per call")
    whitelist_root    = GlobalStateValue(TealType.bytes,  descr="Merkle root of the whitelist")
    airdrop_root      = GlobalStateValue(TealType.bytes,  descr="Merkle root of the airdrop list")

    # ── Phase flags (independent) ──
    whitelist_open    = GlobalStateValue(TealType.uint64, default=Int(0), descr="1 = whitelist phase open")
    airdrop_open      = GlobalStateValue(TealType.uint64, default=Int(0), descr="1 = airdrop phase open")
    public_open       = GlobalStateValue(TealType.uint64, default=Int(0), descr="1 = open phase open")

    # ── Supply ──
    total_minted      = GlobalStateValue(TealType.uint64, default=Int(0), descr="Units minted across all phases")

    # ── Proceeds split ──
    beneficiary_1     = GlobalStateValue(TealType.bytes,  descr="First payout wallet")
    beneficiary_2     = GlobalStateValue(TealType.bytes,  descr="Second payout wallet")
    fee_weight_1      = GlobalStateValue(TealType.uint64, default=DEFAULT_FEE_WEIGHT, descr="Share numerator, beneficiary 1")
    fee_weight_2      = GlobalStateValue(TealType.uint64, default=DEFAULT_FEE_WEIGHT, descr="Share numerator, beneficiary 2")
    fee_denominator   = GlobalStateValue(TealType.uint64, default=DEFAULT_FEE_DENOM, descr="Common share denominator")

    # ── Passthrough ──
    base_uri          = GlobalStateValue(TealType.bytes,  descr="Metadata base path")
    approval_registry = GlobalStateValue(TealType.bytes,  descr="Marketplace operator approved for every holder")


app = Application(
    "MuseDrop",
    descr="Phased whitelist / airdrop / open issuance with a hard supply ceiling and a two-way proceeds split",
    state=MuseDropState(),
    build_options=BuildOptions(avm_version=8),
)


# ─────────────────────────────────────────────
#  DEPLOY / BOOTSTRAP
# ─────────────────────────────────────────────
@app.create(bare=True)
def create() -> Expr:
    """Deployer becomes owner and (until reconfigured) both beneficiaries."""
    return Seq(
        app.initialize_global_state(),
        app.state.owner.set(Txn.sender()),
        app.state.beneficiary_1.set(Txn.sender()),
        app.state.beneficiary_2.set(Txn.sender()),
        app.state.whitelist_root.set(BytesZero(NODE_LEN)),
        app.state.airdrop_root.set(BytesZero(NODE_LEN)),
    )


# ─────────────────────────────────────────────
#  INTERNAL HELPERS
# ─────────────────────────────────────────────
def only_owner() -> Expr:
    return Assert(Txn.sender() == app.state.owner.get(), comment="Unauthorized")


def token_key(token_id: Expr) -> Expr:
    return Concat(TOKEN_PREFIX, Itob(token_id))


def hash_pair(a: Expr, b: Expr) -> Expr:
    """Sorted-pair parent: H(min ‖ max)."""
    return If(BytesLt(b, a), Sha512_256(Concat(b, a)), Sha512_256(Concat(a, b)))


def require_quantity(quantity: Expr) -> Expr:
    return Assert(quantity > Int(0), comment="InvalidQuantity")


def require_exact_payment(payment: abi.PaymentTransaction, quantity: Expr) -> Expr:
    return Seq(
        Assert(payment.get().receiver() == Global.current_application_address(), comment="PaymentMismatch"),
        Assert(payment.get().amount() == quantity * app.state.unit_price.get(), comment="PaymentMismatch"),
    )


def require_supply(quantity: Expr) -> Expr:
    return Assert(
        app.state.total_minted.get() + quantity <= app.state.max_supply.get(),
        comment="SupplyExceeded",
    )


@Subroutine(TealType.uint64)
def verify_membership(leaf: Expr, root: Expr, proof: Expr) -> Expr:
    """
    Fold `leaf` with each 32-byte sibling packed in `proof` and compare to `root`.
    A proof whose length is not a multiple of 32 never verifies.
    """
    node   = ScratchVar(TealType.bytes)
    offset = ScratchVar(TealType.uint64)
    return Seq(
        node.store(leaf),
        For(
            offset.store(Int(0)),
            offset.load() + NODE_LEN <= Len(proof),
            offset.store(offset.load() + NODE_LEN),
        ).Do(
            node.store(hash_pair(node.load(), Extract(proof, offset.load(), NODE_LEN))),
        ),
        And(
            Len(proof) % NODE_LEN == Int(0),
            Len(root) == NODE_LEN,
            node.load() == root,
        ),
    )


@Subroutine(TealType.uint64)
def minted_count(key: Expr) -> Expr:
    stored = App.box_get(key)
    return Seq(
        stored,
        If(stored.hasValue(), Btoi(stored.value()), Int(0)),
    )


@Subroutine(TealType.none)
def reserve(key: Expr, cap: Expr, quantity: Expr) -> Expr:
    """Per-wallet cap and the global ceiling, then advance the wallet counter."""
    already = ScratchVar(TealType.uint64)
    return Seq(
        already.store(minted_count(key)),
        Assert(already.load() + quantity <= cap, comment="CapExceeded"),
        Assert(
            app.state.total_minted.get() + quantity <= app.state.max_supply.get(),
            comment="CapExceeded",
        ),
        App.box_put(key, Itob(already.load() + quantity)),
    )


@Subroutine(TealType.uint64)
def issue(receiver: Expr, quantity: Expr) -> Expr:
    """
    Write `quantity` sequential ownership boxes for `receiver` and advance
    total_minted.  Returns the first token id.
    """
    first = ScratchVar(TealType.uint64)
    i     = ScratchVar(TealType.uint64)
    return Seq(
        Assert(app.state.paused.get() == Int(0), comment="TransfersPaused"),
        first.store(app.state.total_minted.get() + FIRST_TOKEN_ID),
        For(i.store(Int(0)), i.load() < quantity, i.store(i.load() + Int(1))).Do(
            App.box_put(token_key(first.load() + i.load()), receiver),
        ),
        app.state.total_minted.set(app.state.total_minted.get() + quantity),
        # New boxes raise the app's min balance; free claims draw on its spare balance
        Assert(
            Balance(Global.current_application_address()) >= MinBalance(Global.current_application_address()),
            comment="NoBalance",
        ),
        Log(Concat(Bytes("mint"), receiver, Itob(first.load()), Itob(quantity))),
        first.load(),
    )


# ══════════════════════════════════════════════════════════════
#  ABI: whitelist_mint
# ══════════════════════════════════════════════════════════════

@app.external
def whitelist_mint(
    payment:  abi.PaymentTransaction,  # exactly quantity × unit_price to the app
    quantity: abi.Uint64,
    proof:    abi.DynamicBytes,        # packed 32-byte siblings
    *,
    output: abi.Uint64,
) -> Expr:
    """
    Paid mint for whitelisted wallets.
    Order: payment → phase → proof → wallet cap & ceiling → issue.
    Returns the first token id.
    """
    return Seq(
        require_quantity(quantity.get()),
        require_exact_payment(payment, quantity.get()),
        Assert(app.state.whitelist_open.get() == Int(1), comment="PhaseClosed"),
        Assert(
            verify_membership(Sha512_256(Txn.sender()), app.state.whitelist_root.get(), proof.get()),
            comment="InvalidProof",
        ),
        reserve(Concat(WHITELIST_PREFIX, Txn.sender()), app.state.whitelist_cap.get(), quantity.get()),
        output.set(issue(Txn.sender(), quantity.get())),
    )


# ══════════════════════════════════════════════════════════════
#  ABI: airdrop_mint
# ══════════════════════════════════════════════════════════════

@app.external
def airdrop_mint(
    quantity: abi.Uint64,
    proof:    abi.DynamicBytes,
    *,
    output: abi.Uint64,
) -> Expr:
    """
    Free claim for airdrop-listed wallets.
    The ceiling is checked before the proof on this path.
    Returns the first token id.
    """
    return Seq(
        require_quantity(quantity.get()),
        Assert(app.state.airdrop_open.get() == Int(1), comment="PhaseClosed"),
        require_supply(quantity.get()),
        Assert(
            verify_membership(Sha512_256(Txn.sender()), app.state.airdrop_root.get(), proof.get()),
            comment="InvalidProof",
        ),
        reserve(Concat(AIRDROP_PREFIX, Txn.sender()), app.state.airdrop_cap.get(), quantity.get()),
        output.set(issue(Txn.sender(), quantity.get())),
    )


# ══════════════════════════════════════════════════════════════
#  ABI: public_mint
# ══════════════════════════════════════════════════════════════

@app.external
def public_mint(
    payment:  abi.PaymentTransaction,
    quantity: abi.Uint64,
    *,
    output: abi.Uint64,
) -> Expr:
    """Open-phase mint; no allowlist and no per-wallet counter. Returns the first token id."""
    return Seq(
        require_quantity(quantity.get()),
        Assert(app.state.public_open.get() == Int(1), comment="PhaseClosed"),
        require_supply(quantity.get()),
        Assert(quantity.get() <= app.state.per_tx_cap.get(), comment="PerTxExceeded"),
        require_exact_payment(payment, quantity.get()),
        output.set(issue(Txn.sender(), quantity.get())),
    )


# ══════════════════════════════════════════════════════════════
#  ABI: transfer_token
# ══════════════════════════════════════════════════════════════

@app.external
def transfer_token(
    token_id: abi.Uint64,
    receiver: abi.Address,
) -> Expr:
    """Holder, or the approved marketplace operator, moves a token. Blocked while paused."""
    holder = App.box_get(token_key(token_id.get()))
    return Seq(
        Assert(app.state.paused.get() == Int(0), comment="TransfersPaused"),
        holder,
        Assert(holder.hasValue(), comment="UnknownToken"),
        Assert(
            Or(
                Txn.sender() == holder.value(),
                Txn.sender() == app.state.approval_registry.get(),
            ),
            comment="Unauthorized",
        ),
        App.box_put(token_key(token_id.get()), receiver.get()),
        Log(Concat(Bytes("xfer"), Itob(token_id.get()), holder.value(), receiver.get())),
    )


# ══════════════════════════════════════════════════════════════
#  ABI: withdraw  - two-way proceeds split
# ══════════════════════════════════════════════════════════════

@app.external
def withdraw(*, output: abi.Uint64) -> Expr:
    """
    Pays beneficiary 1 then beneficiary 2 their floor share of the spendable
    balance in one inner group; the rounding remainder stays in the app.
    Spendable excludes a storage reserve covering one token box and one wallet
    counter box for every unit not yet minted.
    Caller must cover both inner fees (fee pooling). Returns the amount paid out.
    """
    app_addr  = Global.current_application_address()
    spendable = ScratchVar(TealType.uint64)
    reserved  = ScratchVar(TealType.uint64)
    share_1   = ScratchVar(TealType.uint64)
    share_2   = ScratchVar(TealType.uint64)
    return Seq(
        only_owner(),
        reserved.store(
            If(
                app.state.max_supply.get() > app.state.total_minted.get(),
                (app.state.max_supply.get() - app.state.total_minted.get()) * (TOKEN_BOX_MBR + COUNTER_BOX_MBR),
                Int(0),
            )
        ),
        Assert(Balance(app_addr) > MinBalance(app_addr) + reserved.load(), comment="NoBalance"),
        Assert(app.state.fee_denominator.get() > Int(0), comment="ConfigInvalid"),
        spendable.store(Balance(app_addr) - MinBalance(app_addr) - reserved.load()),
        share_1.store(WideRatio([spendable.load(), app.state.fee_weight_1.get()], [app.state.fee_denominator.get()])),
        share_2.store(WideRatio([spendable.load(), app.state.fee_weight_2.get()], [app.state.fee_denominator.get()])),
        Assert(share_1.load() + share_2.load() <= spendable.load(), comment="TransferRejected"),

        InnerTxnBuilder.Begin(),
        InnerTxnBuilder.SetFields({
            TxnField.type_enum: TxnType.Payment,
            TxnField.receiver:  app.state.beneficiary_1.get(),
            TxnField.amount:    share_1.load(),
            TxnField.fee:       Int(0),
            TxnField.note:      Bytes("MUSE:drop-proceeds:1"),
        }),
        InnerTxnBuilder.Next(),
        InnerTxnBuilder.SetFields({
            TxnField.type_enum: TxnType.Payment,
            TxnField.receiver:  app.state.beneficiary_2.get(),
            TxnField.amount:    share_2.load(),
            TxnField.fee:       Int(0),
            TxnField.note:      Bytes("MUSE:drop-proceeds:2"),
        }),
        InnerTxnBuilder.Submit(),

        Log(Concat(Bytes("wdrw"), Itob(share_1.load()), Itob(share_2.load()))),
        output.set(share_1.load() + share_2.load()),
    )


# ══════════════════════════════════════════════════════════════
#  ADMIN SETTERS  (owner only, no further validation)
# ══════════════════════════════════════════════════════════════

@app.external
def set_unit_price(price: abi.Uint64) -> Expr:
    return Seq(only_owner(), app.state.unit_price.set(price.get()))


@app.external
def set_max_supply(max_supply: abi.Uint64) -> Expr:
    return Seq(only_owner(), app.state.max_supply.set(max_supply.get()))


@app.external
def set_whitelist_cap(cap: abi.Uint64) -> Expr:
    return Seq(only_owner(), app.state.whitelist_cap.set(cap.get()))


@app.external
def set_airdrop_cap(cap: abi.Uint64) -> Expr:
    return Seq(only_owner(), app.state.airdrop_cap.set(cap.get()))


@app.external
def set_per_tx_cap(cap: abi.Uint64) -> Expr:
    return Seq(only_owner(), app.state.per_tx_cap.set(cap.get()))


@app.external
def set_whitelist_root(root: abi.StaticArray[abi.Byte, Literal[32]]) -> Expr:
    """Replacing the root invalidates every proof built against the old one."""
    return Seq(only_owner(), app.state.whitelist_root.set(root.encode()))


@app.external
def set_airdrop_root(root: abi.StaticArray[abi.Byte, Literal[32]]) -> Expr:
    return Seq(only_owner(), app.state.airdrop_root.set(root.encode()))


@app.external
def set_whitelist_open(enabled: abi.Bool) -> Expr:
    return Seq(only_owner(), app.state.whitelist_open.set(enabled.get()))


@app.external
def set_airdrop_open(enabled: abi.Bool) -> Expr:
    return Seq(only_owner(), app.state.airdrop_open.set(enabled.get()))


@app.external
def set_public_open(enabled: abi.Bool) -> Expr:
    return Seq(only_owner(), app.state.public_open.set(enabled.get()))


@app.external
def set_beneficiaries(beneficiary_1: abi.Address, beneficiary_2: abi.Address) -> Expr:
    return Seq(
        only_owner(),
        app.state.beneficiary_1.set(beneficiary_1.get()),
        app.state.beneficiary_2.set(beneficiary_2.get()),
    )


@app.external
def set_fee_split(weight_1: abi.Uint64, weight_2: abi.Uint64, denominator: abi.Uint64) -> Expr:
    """Weights are not required to sum to the denominator."""
    return Seq(
        only_owner(),
        app.state.fee_weight_1.set(weight_1.get()),
        app.state.fee_weight_2.set(weight_2.get()),
        app.state.fee_denominator.set(denominator.get()),
    )


@app.external
def set_base_uri(uri: abi.String) -> Expr:
    return Seq(only_owner(), app.state.base_uri.set(uri.get()))


@app.external
def set_approval_registry(operator: abi.Address) -> Expr:
    return Seq(only_owner(), app.state.approval_registry.set(operator.get()))


@app.external
def pause() -> Expr:
    return Seq(only_owner(), app.state.paused.set(Int(1)))


@app.external
def unpause() -> Expr:
    return Seq(only_owner(), app.state.paused.set(Int(0)))


@app.external
def transfer_ownership(new_owner: abi.Address) -> Expr:
    return Seq(only_owner(), app.state.owner.set(new_owner.get()))


# ══════════════════════════════════════════════════════════════
#  READ-ONLY
# ══════════════════════════════════════════════════════════════

@app.external(read_only=True)
def minted_by(
    account: abi.Address,
    variant: abi.Uint8,   # 0 = whitelist, 1 = airdrop, anything else = 0
    *,
    output: abi.Uint64,
) -> Expr:
    """Units a wallet has minted under a proof-gated variant."""
    return output.set(
        If(variant.get() == VARIANT_WHITELIST).Then(
            minted_count(Concat(WHITELIST_PREFIX, account.get()))
        ).ElseIf(variant.get() == VARIANT_AIRDROP).Then(
            minted_count(Concat(AIRDROP_PREFIX, account.get()))
        ).Else(
            Int(0)
        )
    )


@app.external(read_only=True)
def owner_of(
    token_id: abi.Uint64,
    *,
    output: abi.Address,
) -> Expr:
    holder = App.box_get(token_key(token_id.get()))
    return Seq(
        holder,
        Assert(holder.hasValue(), comment="UnknownToken"),
        output.set(holder.value()),
    )


# ══════════════════════════════════════════════════════════════
#  ENTRY POINT
# ══════════════════════════════════════════════════════════════

if __name__ == "__main__":
    app_spec = app.build()
    app_spec.export("./artifacts")
    print("✅ Exported MuseDrop application spec to ./artifacts")
