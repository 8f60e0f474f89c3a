import pytest
from algosdk import encoding

from allowlist import AllowlistTree
from drop_engine import FeeSplit, MintController, SaleConfig, Treasury

# Spare balance of a freshly funded app account, microALGO
APP_SEED = 1_000_000


def make_address(n: int) -> str:
    return encoding.encode_address(bytes([n]) * 32)


@pytest.fixture
def owner() -> str:
    return make_address(1)


@pytest.fixture
def beneficiaries() -> tuple[str, str]:
    return make_address(2), make_address(3)


@pytest.fixture
def collectors() -> list[str]:
    return [make_address(n) for n in range(10, 20)]


@pytest.fixture
def whitelist(collectors) -> AllowlistTree:
    return AllowlistTree(collectors[:6])


@pytest.fixture
def airdrop_list(collectors) -> AllowlistTree:
    return AllowlistTree(collectors[4:9])


@pytest.fixture
def controller(owner, beneficiaries, whitelist, airdrop_list) -> MintController:
    config = SaleConfig(
        unit_price=1,
        max_supply=10,
        whitelist_cap=3,
        airdrop_cap=1,
        per_tx_cap=5,
        whitelist_root=whitelist.root,
        airdrop_root=airdrop_list.root,
        whitelist_open=True,
    )
    fees = FeeSplit(beneficiaries[0], beneficiaries[1], weight_1=40, weight_2=60, denominator=100)
    return MintController(owner, config, fees, treasury=Treasury(APP_SEED))
