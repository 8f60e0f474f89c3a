import random

import pytest

from allowlist import AllowlistTree
from drop_engine import (
    COUNTER_BOX_MBR,
    TOKEN_BOX_MBR,
    CapExceeded,
    InvalidProof,
    InvalidQuantity,
    MintController,
    NoBalance,
    PaymentMismatch,
    PerTxExceeded,
    PhaseClosed,
    SaleConfig,
    SupplyExceeded,
    TransfersPaused,
    Treasury,
    Unauthorized,
    UnknownToken,
    Variant,
)

from conftest import APP_SEED, make_address


def _counters(controller, address, variant=Variant.WHITELIST):
    return controller.address_minted(address, variant), controller.total_minted()


# ── whitelist ──

def test_whitelist_cap_scenario(controller, whitelist, collectors):
    a = collectors[0]
    proof = whitelist.proof_for(a)

    receipt = controller.whitelist_mint(a, 2, proof, payment=2)
    assert receipt.token_ids == [1, 2]
    assert _counters(controller, a) == (2, 2)

    with pytest.raises(CapExceeded):
        controller.whitelist_mint(a, 2, proof, payment=2)
    assert _counters(controller, a) == (2, 2)


def test_replayed_proof_after_cap_is_cap_exceeded(controller, whitelist, collectors):
    a = collectors[1]
    proof = whitelist.proof_for(a)
    for _ in range(3):
        controller.whitelist_mint(a, 1, proof, payment=1)
    with pytest.raises(CapExceeded):
        controller.whitelist_mint(a, 1, proof, payment=1)


@pytest.mark.parametrize("payment", [0, 1, 3, 100])
def test_payment_must_be_exact(controller, whitelist, collectors, payment):
    a = collectors[0]
    with pytest.raises(PaymentMismatch) as err:
        controller.whitelist_mint(a, 2, whitelist.proof_for(a), payment=payment)
    assert err.value.required == 2
    assert _counters(controller, a) == (0, 0)
    assert controller.treasury.balance == APP_SEED


def test_whitelist_closed(controller, owner, whitelist, collectors):
    controller.set_phase(owner, Variant.WHITELIST, False)
    a = collectors[0]
    with pytest.raises(PhaseClosed):
        controller.whitelist_mint(a, 1, whitelist.proof_for(a), payment=1)


def test_whitelist_rejects_non_member(controller, whitelist, collectors):
    outsider = collectors[9]
    with pytest.raises(InvalidProof):
        controller.whitelist_mint(outsider, 1, whitelist.proof_for(collectors[0]), payment=1)
    assert controller.total_minted() == 0


def test_root_update_invalidates_old_proofs(controller, owner, whitelist, collectors):
    dropped = collectors[0]
    old_proof = whitelist.proof_for(dropped)
    controller.set_whitelist_root(owner, AllowlistTree(collectors[1:6]).root)
    with pytest.raises(InvalidProof):
        controller.whitelist_mint(dropped, 1, old_proof, payment=1)


def test_whitelist_respects_ceiling(controller, owner, whitelist, collectors):
    controller.set_max_supply(owner, 4)
    a, b = collectors[0], collectors[1]
    controller.whitelist_mint(a, 3, whitelist.proof_for(a), payment=3)
    with pytest.raises(CapExceeded) as err:
        controller.whitelist_mint(b, 2, whitelist.proof_for(b), payment=2)
    assert err.value.scope == "supply"
    assert _counters(controller, b) == (0, 3)


# ── airdrop ──

def test_airdrop_is_free_and_capped(controller, owner, airdrop_list, collectors):
    controller.set_phase(owner, Variant.AIRDROP, True)
    a = collectors[5]
    proof = airdrop_list.proof_for(a)

    receipt = controller.airdrop_mint(a, 1, proof)
    assert receipt.paid == 0
    assert controller.treasury.balance == APP_SEED - TOKEN_BOX_MBR - COUNTER_BOX_MBR
    assert _counters(controller, a, Variant.AIRDROP) == (1, 1)
    assert controller.address_minted(a, Variant.WHITELIST) == 0

    with pytest.raises(CapExceeded):
        controller.airdrop_mint(a, 1, proof)


def test_full_collection_error_order_differs_by_path(controller, owner, whitelist, airdrop_list, collectors):
    controller.set_max_supply(owner, 0)
    controller.set_phase(owner, Variant.AIRDROP, True)
    junk = [b"\x00" * 32]

    with pytest.raises(SupplyExceeded):
        controller.airdrop_mint(collectors[9], 1, junk)
    with pytest.raises(InvalidProof):
        controller.whitelist_mint(collectors[9], 1, junk, payment=1)


def test_airdrop_closed(controller, airdrop_list, collectors):
    a = collectors[5]
    with pytest.raises(PhaseClosed):
        controller.airdrop_mint(a, 1, airdrop_list.proof_for(a))


# ── open phase ──

def test_open_phase_closed_regardless_of_payment(controller, collectors):
    with pytest.raises(PhaseClosed):
        controller.public_mint(collectors[9], 1, payment=1)


def test_public_mint_caps(controller, owner, collectors):
    controller.set_phase(owner, Variant.OPEN, True)
    buyer = collectors[9]

    with pytest.raises(PerTxExceeded):
        controller.public_mint(buyer, 6, payment=6)

    controller.public_mint(buyer, 5, payment=5)
    controller.public_mint(buyer, 4, payment=4)
    assert controller.total_minted() == 9
    assert controller.address_minted(buyer, Variant.OPEN) == 0

    with pytest.raises(SupplyExceeded):
        controller.public_mint(buyer, 2, payment=2)
    with pytest.raises(PaymentMismatch):
        controller.public_mint(buyer, 1, payment=2)
    assert controller.total_minted() == 9
    assert controller.treasury.balance == APP_SEED + 9 - 9 * TOKEN_BOX_MBR


def test_ids_are_sequential_across_phases(controller, owner, whitelist, airdrop_list, collectors):
    controller.set_phase(owner, Variant.AIRDROP, True)
    controller.set_phase(owner, Variant.OPEN, True)
    a = collectors[4]

    first = controller.whitelist_mint(a, 2, whitelist.proof_for(a), payment=2)
    second = controller.airdrop_mint(a, 1, airdrop_list.proof_for(a))
    third = controller.public_mint(a, 2, payment=2)
    assert first.token_ids + second.token_ids + third.token_ids == [1, 2, 3, 4, 5]
    assert controller.tokens.balance_of(a) == 5


@pytest.mark.parametrize("quantity", [0, -1])
def test_quantity_must_be_positive(controller, owner, whitelist, collectors, quantity):
    controller.set_phase(owner, Variant.OPEN, True)
    a = collectors[0]
    with pytest.raises(InvalidQuantity):
        controller.whitelist_mint(a, quantity, whitelist.proof_for(a), payment=0)
    with pytest.raises(InvalidQuantity):
        controller.public_mint(a, quantity, payment=0)


def test_price_change_applies_to_next_call(controller, owner, whitelist, collectors):
    a = collectors[0]
    controller.set_unit_price(owner, 7)
    with pytest.raises(PaymentMismatch):
        controller.whitelist_mint(a, 1, whitelist.proof_for(a), payment=1)
    controller.whitelist_mint(a, 1, whitelist.proof_for(a), payment=7)
    assert controller.treasury.balance == APP_SEED + 7 - TOKEN_BOX_MBR - COUNTER_BOX_MBR


# ── pause & transfers ──

def test_pause_blocks_mint_without_moving_counters(controller, owner, whitelist, collectors):
    a = collectors[0]
    controller.set_paused(owner, True)
    with pytest.raises(TransfersPaused):
        controller.whitelist_mint(a, 2, whitelist.proof_for(a), payment=2)
    assert _counters(controller, a) == (0, 0)
    assert controller.treasury.balance == APP_SEED

    controller.set_paused(owner, False)
    assert controller.whitelist_mint(a, 2, whitelist.proof_for(a), payment=2).token_ids == [1, 2]


def test_transfers(controller, owner, whitelist, collectors):
    a, b, market = collectors[0], collectors[1], make_address(77)
    controller.whitelist_mint(a, 2, whitelist.proof_for(a), payment=2)

    controller.transfer(a, 1, b)
    assert controller.tokens.owner_of(1) == b

    with pytest.raises(Unauthorized):
        controller.transfer(market, 2, b)
    controller.set_approval_registry(owner, market)
    controller.transfer(market, 2, b)
    assert controller.tokens.owner_of(2) == b

    controller.set_paused(owner, True)
    with pytest.raises(TransfersPaused):
        controller.transfer(b, 1, a)

    controller.set_paused(owner, False)
    with pytest.raises(UnknownToken):
        controller.transfer(a, 99, b)


# ── administration ──

def test_admin_calls_are_owner_only(controller, owner, collectors):
    stranger = collectors[0]
    setters = [
        lambda who: controller.set_unit_price(who, 2),
        lambda who: controller.set_max_supply(who, 20),
        lambda who: controller.set_whitelist_cap(who, 5),
        lambda who: controller.set_airdrop_cap(who, 2),
        lambda who: controller.set_per_tx_cap(who, 3),
        lambda who: controller.set_whitelist_root(who, b"\x01" * 32),
        lambda who: controller.set_airdrop_root(who, b"\x02" * 32),
        lambda who: controller.set_phase(who, Variant.OPEN, True),
        lambda who: controller.set_beneficiaries(who, stranger, stranger),
        lambda who: controller.set_fee_split(who, 10, 90, 100),
        lambda who: controller.set_base_uri(who, "ipfs://drop/"),
        lambda who: controller.set_approval_registry(who, stranger),
        lambda who: controller.set_paused(who, True),
    ]
    before = SaleConfig(**vars(controller.config))
    for setter in setters:
        with pytest.raises(Unauthorized):
            setter(stranger)
    assert controller.config == before

    for setter in setters:
        setter(owner)
    assert controller.config.per_tx_cap == 3
    assert controller.config.base_uri == "ipfs://drop/"
    assert controller.pause.paused


def test_transfer_ownership(controller, owner, collectors):
    new_owner = collectors[0]
    controller.transfer_ownership(owner, new_owner)
    with pytest.raises(Unauthorized):
        controller.set_unit_price(owner, 3)
    controller.set_unit_price(new_owner, 3)
    assert controller.config.unit_price == 3


def test_default_controller(owner):
    controller = MintController(owner)
    assert controller.total_minted() == 0
    assert not any(controller.phases.is_open(v) for v in Variant)
    assert controller.fees.beneficiary_1 == owner


# ── box storage deposits ──

def test_free_claim_needs_spare_balance_for_its_boxes(controller, owner, airdrop_list, collectors):
    controller.set_phase(owner, Variant.AIRDROP, True)
    a = collectors[5]
    deposit = TOKEN_BOX_MBR + COUNTER_BOX_MBR
    controller.treasury.balance = deposit - 1

    with pytest.raises(NoBalance) as err:
        controller.airdrop_mint(a, 1, airdrop_list.proof_for(a))
    assert err.value.needed == deposit
    assert _counters(controller, a, Variant.AIRDROP) == (0, 0)
    assert controller.tokens.balance_of(a) == 0

    controller.treasury.credit(1)
    assert controller.airdrop_mint(a, 1, airdrop_list.proof_for(a)).token_ids == [1]
    assert controller.treasury.balance == 0
    assert controller.treasury.locked == deposit


def test_payment_counts_towards_box_deposit(controller, owner, whitelist, collectors):
    a = collectors[0]
    proof = whitelist.proof_for(a)
    price = TOKEN_BOX_MBR + COUNTER_BOX_MBR
    controller.set_unit_price(owner, price)
    controller.treasury.balance = 0

    controller.whitelist_mint(a, 1, proof, payment=price)
    assert controller.treasury.balance == 0

    # counter box already exists, only the token box is new
    controller.whitelist_mint(a, 1, proof, payment=price)
    assert controller.treasury.balance == COUNTER_BOX_MBR


def test_withdraw_keeps_storage_reserve_for_unminted_supply(controller, owner, airdrop_list, collectors):
    controller.set_phase(owner, Variant.AIRDROP, True)
    reserve = controller.storage_reserve()
    assert reserve == 10 * (TOKEN_BOX_MBR + COUNTER_BOX_MBR)

    controller.treasury.balance = reserve + 1_000
    assert controller.withdraw(owner) == (400, 600)
    assert controller.treasury.balance == reserve

    claimers = [a for a in collectors if a in airdrop_list]
    for a in claimers:
        controller.airdrop_mint(a, 1, airdrop_list.proof_for(a))
    assert controller.total_minted() == len(claimers)
    assert controller.treasury.balance == controller.storage_reserve()
    with pytest.raises(NoBalance):
        controller.withdraw(owner)

    controller.set_max_supply(owner, controller.total_minted())
    assert controller.storage_reserve() == 0
    leftover = len(claimers) * (TOKEN_BOX_MBR + COUNTER_BOX_MBR)
    assert controller.withdraw(owner) == (leftover * 40 // 100, leftover * 60 // 100)


# ── invariants over a random call sequence ──

def test_counters_track_successful_mints(owner, beneficiaries, collectors):
    members = collectors[:6]
    tree = AllowlistTree(members)
    config = SaleConfig(
        unit_price=3, max_supply=25, whitelist_cap=4, airdrop_cap=2, per_tx_cap=3,
        whitelist_root=tree.root, airdrop_root=tree.root,
        whitelist_open=True, airdrop_open=True, public_open=True,
    )
    controller = MintController(owner, config, treasury=Treasury(APP_SEED))
    rng = random.Random(7)
    minted = 0

    for _ in range(200):
        caller = rng.choice(collectors)
        quantity = rng.randint(1, 4)
        variant = rng.choice(list(Variant))
        proof = tree.proof_for(caller) or []
        try:
            if variant is Variant.WHITELIST:
                controller.whitelist_mint(caller, quantity, proof, payment=quantity * 3)
            elif variant is Variant.AIRDROP:
                controller.airdrop_mint(caller, quantity, proof)
            else:
                controller.public_mint(caller, quantity, payment=quantity * 3)
        except (CapExceeded, InvalidProof, PerTxExceeded, SupplyExceeded):
            continue
        minted += quantity

        assert controller.total_minted() == minted <= config.max_supply
        for address in members:
            assert controller.address_minted(address, Variant.WHITELIST) <= config.whitelist_cap
            assert controller.address_minted(address, Variant.AIRDROP) <= config.airdrop_cap

    assert controller.total_minted() == minted
    assert sum(controller.tokens.balance_of(a) for a in collectors) == minted
