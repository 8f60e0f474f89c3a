"""
╔══════════════════════════════════════════════════════════════════╗
║       MUSE DROP - Deployment & Client Script                     ║
║       deploy_and_interact.py                                     ║
║                                                                  ║
║  Usage:                                                          ║
║    python deploy_and_interact.py deploy                          ║
║    python deploy_and_interact.py allowlist --input wl.txt        ║
║    python deploy_and_interact.py phase --variant whitelist --open║
║    python deploy_and_interact.py whitelist-mint --quantity 2     ║
║    python deploy_and_interact.py withdraw                        ║
╚══════════════════════════════════════════════════════════════════╝

Every mint, transfer and withdraw is first replayed against the off-chain
engine (drop_engine.py) loaded with live application state; a call the
contract would reject is reported without being submitted.
"""

import argparse
import json
import os
from decimal import Decimal, InvalidOperation
from typing import Optional

from algosdk import account, constants, encoding, mnemonic
from algosdk.atomic_transaction_composer import (
    AccountTransactionSigner,
    TransactionWithSigner,
)
from algosdk.error import AlgodHTTPError
from algosdk.transaction import PaymentTxn
from algosdk.v2client import algod
from beaker.client import ApplicationClient

import allowlist
import drop_engine
from drop_engine import (
    DropError,
    FeeSplit,
    MintController,
    SaleConfig,
    Variant,
)

# ─────────────────────────────────────────────
#  CONFIGURATION
# ─────────────────────────────────────────────

# Algorand Testnet endpoints (free public nodes)
ALGOD_ADDRESS = os.environ.get("ALGOD_ADDRESS", "https://testnet-api.algonode.cloud")
ALGOD_TOKEN   = os.environ.get("ALGOD_TOKEN", "")   # AlgoNode doesn't need a token

# App ID after first deploy (update this once you deploy)
APP_ID = int(os.environ.get("MUSE_APP_ID", "0"))

# Seed balance for the app account: covers its min balance plus box storage
APP_FUND_MICROALGO = 1_000_000

# Box references per app call (protocol limit on foreign references)
MAX_BOX_REFS = 8

BOX_PREFIXES = {
    Variant.WHITELIST: b"wl",
    Variant.AIRDROP:   b"ad",
}
TOKEN_BOX_PREFIX = b"t"


# ─────────────────────────────────────────────
#  CLIENTS
# ─────────────────────────────────────────────
def get_algod() -> algod.AlgodClient:
    return algod.AlgodClient(ALGOD_TOKEN, ALGOD_ADDRESS)


def load_account(env_var: str = "MUSE_MNEMONIC") -> tuple[str, str]:
    """
    Load an Algorand account from a mnemonic stored in env variable.
    Returns (private_key, address)
    """
    mn = os.environ.get(env_var)
    if not mn:
        # Generate a fresh testnet account for demo purposes
        private_key, address = account.generate_account()
        print(f"\n⚠  No {env_var} set. Generated fresh account:")
        print(f"   Address  : {address}")
        print(f"   Mnemonic : {mnemonic.from_private_key(private_key)}")
        print(f"\n   Fund this address at: https://bank.testnet.algorand.network/")
        print(f"   Then set: export {env_var}='<your mnemonic>'\n")
        return private_key, address
    private_key = mnemonic.to_private_key(mn)
    address     = account.address_from_private_key(private_key)
    return private_key, address


def get_app_client(private_key: Optional[str] = None, sender: Optional[str] = None) -> ApplicationClient:
    from muse_drop import app as drop_app

    signer = AccountTransactionSigner(private_key) if private_key else None
    return ApplicationClient(get_algod(), drop_app, app_id=APP_ID, signer=signer, sender=sender)


# ─────────────────────────────────────────────
#  CHAIN STATE → ENGINE
# ─────────────────────────────────────────────
def counter_box(variant: Variant, address: str) -> bytes:
    return BOX_PREFIXES[variant] + encoding.decode_address(address)


def token_box(token_id: int) -> bytes:
    return TOKEN_BOX_PREFIX + token_id.to_bytes(8, "big")


def mint_box_refs(variant: Variant, address: str, first_token_id: int, quantity: int) -> list[tuple[int, bytes]]:
    """Box references a mint call touches: the wallet counter and one box per new token."""
    refs = []
    if variant.proof_gated:
        refs.append((0, counter_box(variant, address)))
    refs.extend((0, token_box(first_token_id + i)) for i in range(quantity))
    if len(refs) > MAX_BOX_REFS:
        raise ValueError(
            f"a single call can reference {MAX_BOX_REFS} boxes; "
            f"mint at most {MAX_BOX_REFS - (1 if variant.proof_gated else 0)} units per call"
        )
    return refs


def _address_or_none(raw: bytes) -> Optional[str]:
    if len(raw) != 32 or raw == bytes(32):
        return None
    return encoding.encode_address(raw)


def controller_from_state(
    state: dict,
    spendable: int,
    counters: Optional[dict] = None,
) -> MintController:
    """
    Build an engine mirror of the application.

    Args:
        state:      global state with str keys; bytes values stay raw bytes
        spendable:  app account balance above its min balance, microALGO
        counters:   {(address, Variant): minted} for wallets of interest
    """
    config = SaleConfig(
        unit_price        = state.get("unit_price", 0),
        max_supply        = state.get("max_supply", 0),
        whitelist_cap     = state.get("whitelist_cap", 0),
        airdrop_cap       = state.get("airdrop_cap", 0),
        per_tx_cap        = state.get("per_tx_cap", 0),
        whitelist_root    = state.get("whitelist_root", b""),
        airdrop_root      = state.get("airdrop_root", b""),
        whitelist_open    = state.get("whitelist_open", 0) == 1,
        airdrop_open      = state.get("airdrop_open", 0) == 1,
        public_open       = state.get("public_open", 0) == 1,
        base_uri          = state.get("base_uri", b"").decode("utf-8", errors="replace"),
        approval_registry = _address_or_none(state.get("approval_registry", b"")),
    )
    owner = encoding.encode_address(state["owner"])
    fees = FeeSplit(
        beneficiary_1 = encoding.encode_address(state["beneficiary_1"]),
        beneficiary_2 = encoding.encode_address(state["beneficiary_2"]),
        weight_1      = state.get("fee_weight_1", 0),
        weight_2      = state.get("fee_weight_2", 0),
        denominator   = state.get("fee_denominator", 0),
    )
    controller = MintController(owner, config, fees, total_minted=state.get("total_minted", 0))
    controller.pause.paused = state.get("paused", 0) == 1
    controller.treasury.credit(spendable)
    for (address, variant), minted in (counters or {}).items():
        controller.supply.load(address, variant, minted)
    return controller


def read_global_state(app_client: ApplicationClient) -> dict:
    raw = app_client.get_global_state(raw=True)
    return {(k.decode() if isinstance(k, bytes) else k): v for k, v in raw.items()}


def read_counter(app_client: ApplicationClient, variant: Variant, address: str) -> int:
    try:
        stored = app_client.get_box_contents(counter_box(variant, address))
    except AlgodHTTPError as exc:
        if exc.code == 404:
            return 0
        raise
    return int.from_bytes(stored, "big")


def load_controller(app_client: ApplicationClient, wallet: str) -> MintController:
    info      = app_client.client.account_info(app_client.app_addr)
    spendable = max(info["amount"] - info["min-balance"], 0)
    counters  = {(wallet, v): read_counter(app_client, v, wallet) for v in BOX_PREFIXES}
    return controller_from_state(read_global_state(app_client), spendable, counters)


def algo_to_microalgo(amount) -> int:
    """Exact ALGO -> microALGO conversion; fractional microALGO is refused."""
    try:
        micro = Decimal(str(amount)) * drop_engine.MICROALGOS_PER_ALGO
    except InvalidOperation:
        raise ValueError(f"not an ALGO amount: {amount!r}") from None
    if not micro.is_finite() or micro != micro.to_integral_value() or micro < 0:
        raise ValueError(f"{amount} ALGO is not a whole number of microALGO")
    return int(micro)


def preflight(action, *args) -> bool:
    """Run an engine call; print and return False if the contract would reject it."""
    try:
        action(*args)
    except DropError as exc:
        print(f"⛔ {type(exc).__name__}: {exc}")
        return False
    return True


def box_refs_or_none(variant: Variant, address: str, first_token_id: int, quantity: int) -> Optional[list[tuple[int, bytes]]]:
    """Box references for a mint, or None (reported) when one call cannot carry them."""
    try:
        return mint_box_refs(variant, address, first_token_id, quantity)
    except ValueError as exc:
        print(f"⛔ {exc}")
        return None


# ─────────────────────────────────────────────
#  DEPLOY
# ─────────────────────────────────────────────
def deploy(private_key: str, address: str) -> int:
    """Compile and deploy the Muse Drop contract, then fund its account."""
    app_client = get_app_client(private_key)

    print("🔨 Compiling Muse Drop contract...")
    app_id, app_addr, tx_id = app_client.create()
    print(f"   Transaction: {tx_id}")

    app_client.fund(APP_FUND_MICROALGO)

    print(f"✅ Deployed! App ID: {app_id}")
    print(f"   App account: {app_addr}")
    print(f"   Set: export MUSE_APP_ID={app_id}")
    return app_id


def fund(private_key: str, amount_algo) -> None:
    """Top up the app account; free claims draw their box deposits from it."""
    try:
        amount = algo_to_microalgo(amount_algo)
    except ValueError as exc:
        print(f"⛔ {exc}")
        return
    get_app_client(private_key).fund(amount)
    print(f"✅ Funded app with {amount} microALGO")


# ─────────────────────────────────────────────
#  ALLOWLISTS
# ─────────────────────────────────────────────
def build_allowlist(input_path: str, output_path: str) -> bytes:
    """Build a commitment + proof bundle from an address file."""
    tree = allowlist.AllowlistTree(allowlist.load_addresses(input_path))
    with open(output_path, "w") as fh:
        fh.write(tree.to_json())
    print(f"🌳 Allowlist of {len(tree)} wallets")
    print(f"   Root  : {tree.root.hex()}")
    print(f"   Proofs: {output_path}")
    return tree.root


def load_proof(bundle_path: str, address: str) -> list[bytes]:
    with open(bundle_path) as fh:
        bundle = json.load(fh)
    return [bytes.fromhex(p) for p in bundle.get("proofs", {}).get(address, [])]


def load_root(bundle_path: str) -> bytes:
    with open(bundle_path) as fh:
        return bytes.fromhex(json.load(fh)["root"])


# ─────────────────────────────────────────────
#  ADMINISTRATION
# ─────────────────────────────────────────────
ROOT_SETTERS = {
    Variant.WHITELIST: "set_whitelist_root",
    Variant.AIRDROP:   "set_airdrop_root",
}
PHASE_SETTERS = {
    Variant.WHITELIST: "set_whitelist_open",
    Variant.AIRDROP:   "set_airdrop_open",
    Variant.OPEN:      "set_public_open",
}


def set_root(private_key: str, variant: Variant, bundle_path: str) -> None:
    root = load_root(bundle_path)
    get_app_client(private_key).call(ROOT_SETTERS[variant], root=list(root))
    print(f"✅ {variant.value} root set to {root.hex()}")


def set_phase(private_key: str, variant: Variant, is_open: bool) -> None:
    get_app_client(private_key).call(PHASE_SETTERS[variant], enabled=is_open)
    print(f"✅ {variant.value} phase {'OPEN' if is_open else 'CLOSED'}")


def configure(
    private_key: str,
    price_algo: Optional[Decimal] = None,
    max_supply: Optional[int] = None,
    whitelist_cap: Optional[int] = None,
    airdrop_cap: Optional[int] = None,
    per_tx_cap: Optional[int] = None,
    base_uri: Optional[str] = None,
    registry: Optional[str] = None,
) -> None:
    """Apply any subset of the sale parameters; each is its own owner call."""
    price = None
    if price_algo is not None:
        try:
            price = algo_to_microalgo(price_algo)
        except ValueError as exc:
            print(f"⛔ {exc}")
            return

    app_client = get_app_client(private_key)
    if price is not None:
        app_client.call("set_unit_price", price=price)
    if max_supply is not None:
        app_client.call("set_max_supply", max_supply=max_supply)
    if whitelist_cap is not None:
        app_client.call("set_whitelist_cap", cap=whitelist_cap)
    if airdrop_cap is not None:
        app_client.call("set_airdrop_cap", cap=airdrop_cap)
    if per_tx_cap is not None:
        app_client.call("set_per_tx_cap", cap=per_tx_cap)
    if base_uri is not None:
        app_client.call("set_base_uri", uri=base_uri)
    if registry is not None:
        app_client.call("set_approval_registry", operator=registry)
    print("✅ Sale configuration updated")


def set_fees(
    private_key: str,
    beneficiary_1: str,
    beneficiary_2: str,
    weight_1: int,
    weight_2: int,
    denominator: int,
) -> None:
    if weight_1 + weight_2 > denominator:
        print(f"⚠  Weights {weight_1}+{weight_2} exceed denominator {denominator}; withdraw will fail")
    app_client = get_app_client(private_key)
    app_client.call("set_beneficiaries", beneficiary_1=beneficiary_1, beneficiary_2=beneficiary_2)
    app_client.call("set_fee_split", weight_1=weight_1, weight_2=weight_2, denominator=denominator)
    print(f"✅ Proceeds split {weight_1}/{weight_2} of {denominator}")


def set_paused(private_key: str, paused: bool) -> None:
    get_app_client(private_key).call("pause" if paused else "unpause")
    print("⏸  Paused" if paused else "▶  Unpaused")


def transfer_ownership(private_key: str, new_owner: str) -> None:
    get_app_client(private_key).call("transfer_ownership", new_owner=new_owner)
    print(f"✅ Ownership transferred to {new_owner}")


# ─────────────────────────────────────────────
#  MINTING
# ─────────────────────────────────────────────
def _payment(app_client: ApplicationClient, private_key: str, address: str, amount: int) -> TransactionWithSigner:
    sp  = app_client.client.suggested_params()
    txn = PaymentTxn(sender=address, sp=sp, receiver=app_client.app_addr, amt=amount)
    return TransactionWithSigner(txn=txn, signer=AccountTransactionSigner(private_key))


def whitelist_mint(private_key: str, address: str, quantity: int, bundle_path: str) -> Optional[int]:
    """
    Paid whitelist mint.

    Args:
        quantity:     units to mint
        bundle_path:  allowlist JSON produced by the `allowlist` command
    """
    app_client = get_app_client(private_key)
    controller = load_controller(app_client, address)
    proof      = load_proof(bundle_path, address)
    price      = controller.required_payment(quantity)
    first_id   = drop_engine.FIRST_TOKEN_ID + controller.total_minted()

    if not preflight(controller.whitelist_mint, address, quantity, proof, price):
        return None
    boxes = box_refs_or_none(Variant.WHITELIST, address, first_id, quantity)
    if boxes is None:
        return None

    print(f"🎟  Whitelist mint: {quantity} × {controller.config.unit_price} microALGO...")
    result = app_client.call(
        "whitelist_mint",
        payment  = _payment(app_client, private_key, address, price),
        quantity = quantity,
        proof    = allowlist.pack_proof(proof),
        boxes    = boxes,
    )
    print(f"✅ Minted tokens {result.return_value}..{result.return_value + quantity - 1}")
    return result.return_value


def airdrop_mint(private_key: str, address: str, quantity: int, bundle_path: str) -> Optional[int]:
    app_client = get_app_client(private_key)
    controller = load_controller(app_client, address)
    proof      = load_proof(bundle_path, address)
    first_id   = drop_engine.FIRST_TOKEN_ID + controller.total_minted()

    if not preflight(controller.airdrop_mint, address, quantity, proof):
        return None
    boxes = box_refs_or_none(Variant.AIRDROP, address, first_id, quantity)
    if boxes is None:
        return None

    print(f"🪂 Airdrop claim: {quantity} unit(s)...")
    result = app_client.call(
        "airdrop_mint",
        quantity = quantity,
        proof    = allowlist.pack_proof(proof),
        boxes    = boxes,
    )
    print(f"✅ Claimed tokens {result.return_value}..{result.return_value + quantity - 1}")
    return result.return_value


def public_mint(private_key: str, address: str, quantity: int) -> Optional[int]:
    app_client = get_app_client(private_key)
    controller = load_controller(app_client, address)
    price      = controller.required_payment(quantity)
    first_id   = drop_engine.FIRST_TOKEN_ID + controller.total_minted()

    if not preflight(controller.public_mint, address, quantity, price):
        return None
    boxes = box_refs_or_none(Variant.OPEN, address, first_id, quantity)
    if boxes is None:
        return None

    print(f"🛒 Public mint: {quantity} × {controller.config.unit_price} microALGO...")
    result = app_client.call(
        "public_mint",
        payment  = _payment(app_client, private_key, address, price),
        quantity = quantity,
        boxes    = boxes,
    )
    print(f"✅ Minted tokens {result.return_value}..{result.return_value + quantity - 1}")
    return result.return_value


def transfer_token(private_key: str, address: str, token_id: int, receiver: str) -> None:
    app_client = get_app_client(private_key)
    controller = load_controller(app_client, address)
    holder     = app_client.call("owner_of", token_id=token_id, boxes=[(0, token_box(token_id))]).return_value
    controller.tokens.load(token_id, holder)

    if not preflight(controller.transfer, address, token_id, receiver):
        return
    app_client.call("transfer_token", token_id=token_id, receiver=receiver, boxes=[(0, token_box(token_id))])
    print(f"✅ Token {token_id} → {receiver}")


# ─────────────────────────────────────────────
#  PROCEEDS
# ─────────────────────────────────────────────
def withdraw(private_key: str, address: str) -> None:
    """Split the app's spendable balance between the two beneficiaries."""
    app_client = get_app_client(private_key)
    controller = load_controller(app_client, address)

    try:
        share_1, share_2 = controller.withdraw(address)
    except DropError as exc:
        print(f"⛔ {type(exc).__name__}: {exc}")
        return

    # Outer call pays for itself plus both inner payments
    sp = app_client.client.suggested_params()
    sp.flat_fee = True
    sp.fee = 3 * constants.MIN_TXN_FEE

    print("💸 Withdrawing proceeds...")
    result = app_client.call("withdraw", suggested_params=sp)
    print(f"✅ Paid out {result.return_value} microALGO")
    print(f"   {controller.fees.beneficiary_1}: {share_1}")
    print(f"   {controller.fees.beneficiary_2}: {share_2}")


# ─────────────────────────────────────────────
#  READ-ONLY QUERIES
# ─────────────────────────────────────────────
def query_info(address: str) -> dict:
    """Fetch sale configuration, phase flags and this wallet's counters."""
    app_client = get_app_client(sender=address)
    controller = load_controller(app_client, address)
    config     = controller.config

    info = {
        "owner":             controller.owner,
        "paused":            controller.pause.paused,
        "unit_price_algo":   config.unit_price / drop_engine.MICROALGOS_PER_ALGO,
        "total_minted":      controller.total_minted(),
        "max_supply":        config.max_supply,
        "whitelist_open":    config.whitelist_open,
        "airdrop_open":      config.airdrop_open,
        "public_open":       config.public_open,
        "whitelist_cap":     config.whitelist_cap,
        "airdrop_cap":       config.airdrop_cap,
        "per_tx_cap":        config.per_tx_cap,
        "whitelist_root":    config.whitelist_root.hex(),
        "airdrop_root":      config.airdrop_root.hex(),
        "fee_split":         f"{controller.fees.weight_1}/{controller.fees.weight_2} of {controller.fees.denominator}",
        "wallet_whitelist":  controller.address_minted(address, Variant.WHITELIST),
        "wallet_airdrop":    controller.address_minted(address, Variant.AIRDROP),
    }

    print(f"\n{'─'*50}")
    print(f"  MUSE DROP - App {APP_ID}")
    print(f"{'─'*50}")
    for k, v in info.items():
        print(f"  {k:<20} {v}")
    print(f"{'─'*50}\n")
    return info


# ─────────────────────────────────────────────
#  CLI ENTRYPOINT
# ─────────────────────────────────────────────
VARIANT_CHOICES = [v.value for v in Variant]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Muse Drop - phased collectible issuance CLI for Algorand",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Deploy the contract
  python deploy_and_interact.py deploy
  python deploy_and_interact.py fund --algo 5

  # Build and publish the whitelist
  python deploy_and_interact.py allowlist --input whitelist.txt --output whitelist.json
  python deploy_and_interact.py set-root --variant whitelist --bundle whitelist.json

  # Configure and open the whitelist phase
  python deploy_and_interact.py configure --price 25 --max-supply 5555 --whitelist-cap 3
  python deploy_and_interact.py phase --variant whitelist --open

  # Mint
  python deploy_and_interact.py whitelist-mint --quantity 2 --bundle whitelist.json
  python deploy_and_interact.py airdrop-mint --quantity 1 --bundle airdrop.json
  python deploy_and_interact.py public-mint --quantity 3

  # Proceeds
  python deploy_and_interact.py fees --b1 ADDR1 --b2 ADDR2 --w1 40 --w2 60 --denominator 100
  python deploy_and_interact.py withdraw
"""
    )

    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("deploy", help="Deploy the contract to testnet")

    p_fund = sub.add_parser("fund", help="Top up the app account for box storage")
    p_fund.add_argument("--algo", type=Decimal, required=True)

    p_list = sub.add_parser("allowlist", help="Build a Merkle allowlist bundle")
    p_list.add_argument("--input",  required=True, help="Text (one per line) or JSON array of addresses")
    p_list.add_argument("--output", default="allowlist.json")

    p_root = sub.add_parser("set-root", help="Publish an allowlist root")
    p_root.add_argument("--variant", choices=VARIANT_CHOICES[:2], required=True)
    p_root.add_argument("--bundle",  required=True)

    p_phase = sub.add_parser("phase", help="Open or close a sale phase")
    p_phase.add_argument("--variant", choices=VARIANT_CHOICES, required=True)
    p_phase.add_argument("--open", action="store_true", help="Open (default: close)")

    p_cfg = sub.add_parser("configure", help="Set sale parameters")
    p_cfg.add_argument("--price",         type=Decimal, help="Unit price in ALGO")
    p_cfg.add_argument("--max-supply",    type=int)
    p_cfg.add_argument("--whitelist-cap", type=int)
    p_cfg.add_argument("--airdrop-cap",   type=int)
    p_cfg.add_argument("--per-tx-cap",    type=int)
    p_cfg.add_argument("--base-uri")
    p_cfg.add_argument("--registry", help="Marketplace operator address")

    p_fees = sub.add_parser("fees", help="Set beneficiaries and split")
    p_fees.add_argument("--b1", required=True)
    p_fees.add_argument("--b2", required=True)
    p_fees.add_argument("--w1", type=int, required=True)
    p_fees.add_argument("--w2", type=int, required=True)
    p_fees.add_argument("--denominator", type=int, default=drop_engine.DEFAULT_FEE_DENOMINATOR)

    sub.add_parser("pause",   help="Block all mints and transfers")
    sub.add_parser("unpause", help="Resume mints and transfers")

    p_own = sub.add_parser("transfer-ownership", help="Hand over the admin role")
    p_own.add_argument("--to", required=True)

    for name, needs_bundle in (("whitelist-mint", True), ("airdrop-mint", True), ("public-mint", False)):
        p = sub.add_parser(name, help=f"{name.split('-')[0].capitalize()} phase mint")
        p.add_argument("--quantity", type=int, default=1)
        if needs_bundle:
            p.add_argument("--bundle", required=True, help="Allowlist JSON bundle")

    p_xfer = sub.add_parser("transfer", help="Transfer a token")
    p_xfer.add_argument("--token", type=int, required=True)
    p_xfer.add_argument("--to",    required=True)

    sub.add_parser("withdraw", help="Split proceeds between beneficiaries")
    sub.add_parser("info",     help="Show sale state and wallet counters")
    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    if not args.cmd:
        parser.print_help()
        return

    if args.cmd == "allowlist":
        build_allowlist(args.input, args.output)
        return

    private_key, address = load_account()
    print(f"\n👛 Wallet: {address}")
    print(f"   App ID: {APP_ID}\n")

    if args.cmd == "deploy":
        deploy(private_key, address)

    elif args.cmd == "fund":
        fund(private_key, args.algo)

    elif args.cmd == "set-root":
        set_root(private_key, Variant(args.variant), args.bundle)

    elif args.cmd == "phase":
        set_phase(private_key, Variant(args.variant), args.open)

    elif args.cmd == "configure":
        configure(
            private_key,
            price_algo=args.price, max_supply=args.max_supply,
            whitelist_cap=args.whitelist_cap, airdrop_cap=args.airdrop_cap,
            per_tx_cap=args.per_tx_cap, base_uri=args.base_uri,
            registry=args.registry,
        )

    elif args.cmd == "fees":
        set_fees(private_key, args.b1, args.b2, args.w1, args.w2, args.denominator)

    elif args.cmd in ("pause", "unpause"):
        set_paused(private_key, args.cmd == "pause")

    elif args.cmd == "transfer-ownership":
        transfer_ownership(private_key, args.to)

    elif args.cmd == "whitelist-mint":
        whitelist_mint(private_key, address, args.quantity, args.bundle)

    elif args.cmd == "airdrop-mint":
        airdrop_mint(private_key, address, args.quantity, args.bundle)

    elif args.cmd == "public-mint":
        public_mint(private_key, address, args.quantity)

    elif args.cmd == "transfer":
        transfer_token(private_key, address, args.token, args.to)

    elif args.cmd == "withdraw":
        withdraw(private_key, address)

    elif args.cmd == "info":
        query_info(address)


if __name__ == "__main__":
    main()
