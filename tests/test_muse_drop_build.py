import pytest

import muse_drop


@pytest.fixture(scope="module")
def app_spec():
    return muse_drop.app.build()


def test_abi_surface(app_spec):
    names = {method.name for method in app_spec.contract.methods}
    assert {
        "whitelist_mint",
        "airdrop_mint",
        "public_mint",
        "transfer_token",
        "withdraw",
        "minted_by",
        "owner_of",
    } <= names
    assert {
        "set_unit_price",
        "set_max_supply",
        "set_whitelist_cap",
        "set_airdrop_cap",
        "set_per_tx_cap",
        "set_whitelist_root",
        "set_airdrop_root",
        "set_whitelist_open",
        "set_airdrop_open",
        "set_public_open",
        "set_beneficiaries",
        "set_fee_split",
        "set_base_uri",
        "set_approval_registry",
        "pause",
        "unpause",
        "transfer_ownership",
    } <= names


def test_paid_mints_take_a_payment(app_spec):
    methods = {method.name: method for method in app_spec.contract.methods}
    assert methods["whitelist_mint"].args[0].type == "pay"
    assert methods["public_mint"].args[0].type == "pay"
    assert all(arg.type != "pay" for arg in methods["airdrop_mint"].args)


def test_program_uses_boxes_and_sha512_256(app_spec):
    teal = app_spec.approval_program
    assert teal.startswith("#pragma version 8")
    assert "sha512_256" in teal
    assert "box_put" in teal
    assert "itxn_submit" in teal
