"""
ABI encoding of the split-delegation contract call.

    setDelegation(string context, (bytes32 delegate, uint256 ratio)[] delegation,
                  uint256 expirationTimestamp)

The contract keys delegates by bytes32, an address left-padded with zeros.
Delegates are encoded sorted by lower-cased address so the same split always
produces the same calldata.
"""

from typing import Dict, List, Mapping, Tuple

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector, to_bytes

from .types import ABIEncodingError
from .utils import validate_address, normalize_address


SET_DELEGATION_SIGNATURE = "setDelegation(string,(bytes32,uint256)[],uint256)"
SET_DELEGATION_ARG_TYPES = ["string", "(bytes32,uint256)[]", "uint256"]
SET_DELEGATION_SELECTOR = function_signature_to_4byte_selector(SET_DELEGATION_SIGNATURE)

# 2560-01-01, used when the delegation has no expiration date
DEFAULT_EXPIRATION_TIMESTAMP = 18618595200

UINT256_MAX = 2 ** 256 - 1


def address_to_bytes32(address: str) -> bytes:
    return b"\x00" * 12 + to_bytes(hexstr=address)


def bytes32_to_address(value: bytes) -> str:
    return normalize_address(value[12:])


class TransactionBuilder:
    """Pure encoder for the setDelegation call"""

    def encode_set_delegation(self, dao: str, ratios: Mapping[str, int],
                              expiration_timestamp: int) -> bytes:
        """
        Encode the setDelegation call.

        Args:
            dao: DAO alias used as the delegation context
            ratios: delegate address to integer ratio
            expiration_timestamp: unix time after which the delegation lapses

        Raises:
            ABIEncodingError: On a malformed argument
        """
        if not isinstance(dao, str) or not dao:
            raise ABIEncodingError(f"Invalid DAO alias: {dao!r}", operation="encode_set_delegation")
        if not ratios:
            raise ABIEncodingError("No delegates to encode", operation="encode_set_delegation")
        if (not isinstance(expiration_timestamp, int) or isinstance(expiration_timestamp, bool)
                or not 0 <= expiration_timestamp <= UINT256_MAX):
            raise ABIEncodingError(f"Invalid expiration timestamp: {expiration_timestamp!r}",
                                   operation="encode_set_delegation")

        delegation = [
            (address_to_bytes32(address), ratio)
            for address, ratio in self.sort_delegation(ratios)
        ]

        try:
            return SET_DELEGATION_SELECTOR + encode(
                SET_DELEGATION_ARG_TYPES, [dao, delegation, expiration_timestamp]
            )
        except Exception as e:
            raise ABIEncodingError(f"set delegation abi pack: {e}",
                                   operation="encode_set_delegation") from e

    def build_calldata(self, dao: str, ratios: Mapping[str, int],
                       expiration_timestamp: int) -> str:
        """Encoded call as a 0x-prefixed hex string"""
        return "0x" + self.encode_set_delegation(dao, ratios, expiration_timestamp).hex()

    @staticmethod
    def sort_delegation(ratios: Mapping[str, int]) -> List[Tuple[str, int]]:
        """Validated (address, ratio) pairs in encoding order"""
        pairs = []
        seen = set()
        for address, ratio in ratios.items():
            if not validate_address(address):
                raise ABIEncodingError(f"Invalid delegate address: {address!r}",
                                       operation="encode_set_delegation")
            key = address.lower()
            if key in seen:
                raise ABIEncodingError(f"Duplicate delegate address: {address}",
                                       operation="encode_set_delegation")
            seen.add(key)
            if not isinstance(ratio, int) or isinstance(ratio, bool) or not 0 < ratio <= UINT256_MAX:
                raise ABIEncodingError(f"Invalid ratio {ratio!r} for {address}",
                                       operation="encode_set_delegation")
            pairs.append((key, ratio))
        pairs.sort(key=lambda pair: pair[0])
        return pairs

    @staticmethod
    def decode_set_delegation(calldata: str) -> Tuple[str, Dict[str, int], int]:
        """
        Decode setDelegation calldata back to (dao, ratios, expiration), so a
        client can check what it is about to sign.
        """
        raw = to_bytes(hexstr=calldata)
        if raw[:4] != SET_DELEGATION_SELECTOR:
            raise ABIEncodingError("Calldata is not a setDelegation call",
                                   operation="decode_set_delegation")
        dao, delegation, expiration = decode(SET_DELEGATION_ARG_TYPES, raw[4:])
        ratios = {bytes32_to_address(delegate): ratio for delegate, ratio in delegation}
        return dao, ratios, expiration
