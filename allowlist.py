"""
Muse Drop - allowlist commitments and membership proofs.

Leaves are SHA-512/256 of the 32-byte public key behind an Algorand address.
Parents are SHA-512/256 of the two children in byte order (smaller first), so
a proof is just the ordered list of siblings, no left/right flags.  An odd node
at any level is promoted unchanged.

The same rule is evaluated on-chain by `verify_membership` in muse_drop.py.
"""

import json
from typing import Iterable, Optional

from algosdk import encoding

NODE_LEN = 32


# ─────────────────────────────────────────────
#  HASHING
# ─────────────────────────────────────────────
def leaf_for(address: str) -> bytes:
    """Leaf hash for an Algorand address (raises on a malformed address)."""
    return encoding.checksum(encoding.decode_address(address))


def hash_pair(a: bytes, b: bytes) -> bytes:
    if b < a:
        a, b = b, a
    return encoding.checksum(a + b)


def verify(address: str, commitment: bytes, proof: Iterable[bytes]) -> bool:
    """
    True when `address` is a member of the set committed to by `commitment`.

    Any malformed input (bad address, wrong-length root or sibling) is just a
    non-member.
    """
    if not isinstance(address, str) or not encoding.is_valid_address(address):
        return False
    if len(commitment) != NODE_LEN:
        return False
    node = leaf_for(address)
    for sibling in proof:
        if len(sibling) != NODE_LEN:
            return False
        node = hash_pair(node, bytes(sibling))
    return node == bytes(commitment)


def pack_proof(proof: Iterable[bytes]) -> bytes:
    """Concatenate siblings into the single byte string the contract expects."""
    return b"".join(bytes(p) for p in proof)


def unpack_proof(packed: bytes) -> list[bytes]:
    return [packed[i:i + NODE_LEN] for i in range(0, len(packed), NODE_LEN)]


# ─────────────────────────────────────────────
#  TREE
# ─────────────────────────────────────────────
class AllowlistTree:
    """Merkle tree over a set of addresses; duplicates collapse."""

    def __init__(self, addresses: Iterable[str]):
        unique = []
        seen = set()
        for addr in addresses:
            addr = addr.strip()
            if not addr or addr in seen:
                continue
            if not encoding.is_valid_address(addr):
                raise ValueError(f"Not an Algorand address: {addr!r}")
            seen.add(addr)
            unique.append(addr)
        if not unique:
            raise ValueError("Allowlist is empty")

        leaves = sorted((leaf_for(a), a) for a in unique)
        self.addresses = [a for _, a in leaves]
        self._index = {a: i for i, a in enumerate(self.addresses)}
        self._levels = [[leaf for leaf, _ in leaves]]
        while len(self._levels[-1]) > 1:
            level = self._levels[-1]
            parents = [hash_pair(level[i], level[i + 1]) for i in range(0, len(level) - 1, 2)]
            if len(level) % 2:
                parents.append(level[-1])
            self._levels.append(parents)

    @property
    def root(self) -> bytes:
        return self._levels[-1][0]

    def __contains__(self, address: str) -> bool:
        return address in self._index

    def __len__(self) -> int:
        return len(self.addresses)

    def proof_for(self, address: str) -> Optional[list[bytes]]:
        """Sibling path for `address`, or None if it is not in the list."""
        idx = self._index.get(address)
        if idx is None:
            return None
        proof = []
        for level in self._levels[:-1]:
            sibling = idx ^ 1
            if sibling < len(level):
                proof.append(level[sibling])
            idx //= 2
        return proof

    def to_dict(self) -> dict:
        return {
            "root": self.root.hex(),
            "count": len(self),
            "proofs": {a: [p.hex() for p in self.proof_for(a)] for a in self.addresses},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


def load_addresses(path: str) -> list[str]:
    """Read addresses from a JSON array or a one-address-per-line text file."""
    with open(path) as fh:
        raw = fh.read()
    if raw.lstrip().startswith("["):
        return [str(a) for a in json.loads(raw)]
    return [line.split("#", 1)[0].strip() for line in raw.splitlines() if line.split("#", 1)[0].strip()]
