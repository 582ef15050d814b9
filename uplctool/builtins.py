"""The builtin functions of Untyped Plutus Core."""

from __future__ import annotations

from enum import IntEnum

from .bitstream import FlatDecodeError


class DefaultFunction(IntEnum):
    """A builtin function, valued by its flat tag and printed by its textual name."""

    text: str

    def __new__(cls, tag: int, text: str) -> DefaultFunction:
        member = int.__new__(cls, tag)
        member._value_ = tag
        member.text = text
        return member

    # Integer functions
    ADD_INTEGER = (0, "addInteger")
    SUBTRACT_INTEGER = (1, "subtractInteger")
    MULTIPLY_INTEGER = (2, "multiplyInteger")
    DIVIDE_INTEGER = (3, "divideInteger")
    QUOTIENT_INTEGER = (4, "quotientInteger")
    REMAINDER_INTEGER = (5, "remainderInteger")
    MOD_INTEGER = (6, "modInteger")
    EQUALS_INTEGER = (7, "equalsInteger")
    LESS_THAN_INTEGER = (8, "lessThanInteger")
    LESS_THAN_EQUALS_INTEGER = (9, "lessThanEqualsInteger")
    # ByteString functions
    APPEND_BYTE_STRING = (10, "appendByteString")
    CONS_BYTE_STRING = (11, "consByteString")
    SLICE_BYTE_STRING = (12, "sliceByteString")
    LENGTH_OF_BYTE_STRING = (13, "lengthOfByteString")
    INDEX_BYTE_STRING = (14, "indexByteString")
    EQUALS_BYTE_STRING = (15, "equalsByteString")
    LESS_THAN_BYTE_STRING = (16, "lessThanByteString")
    LESS_THAN_EQUALS_BYTE_STRING = (17, "lessThanEqualsByteString")
    # Cryptography and hash functions
    SHA2_256 = (18, "sha2_256")
    SHA3_256 = (19, "sha3_256")
    BLAKE2B_256 = (20, "blake2b_256")
    VERIFY_SIGNATURE = (21, "verifySignature")
    VERIFY_ECDSA_SECP256K1_SIGNATURE = (52, "verifyEcdsaSecp256k1Signature")
    VERIFY_SCHNORR_SECP256K1_SIGNATURE = (53, "verifySchnorrSecp256k1Signature")
    # String functions
    APPEND_STRING = (22, "appendString")
    EQUALS_STRING = (23, "equalsString")
    ENCODE_UTF8 = (24, "encodeUtf8")
    DECODE_UTF8 = (25, "decodeUtf8")
    # Bool function
    IF_THEN_ELSE = (26, "ifThenElse")
    # Unit function
    CHOOSE_UNIT = (27, "chooseUnit")
    # Tracing function
    TRACE = (28, "trace")
    # Pair functions
    FST_PAIR = (29, "fstPair")
    SND_PAIR = (30, "sndPair")
    # List functions
    CHOOSE_LIST = (31, "chooseList")
    MK_CONS = (32, "mkCons")
    HEAD_LIST = (33, "headList")
    TAIL_LIST = (34, "tailList")
    NULL_LIST = (35, "nullList")
    # Data functions
    CHOOSE_DATA = (36, "chooseData")
    CONSTR_DATA = (37, "constrData")
    MAP_DATA = (38, "mapData")
    LIST_DATA = (39, "listData")
    I_DATA = (40, "iData")
    B_DATA = (41, "bData")
    UN_CONSTR_DATA = (42, "unConstrData")
    UN_MAP_DATA = (43, "unMapData")
    UN_LIST_DATA = (44, "unListData")
    UN_I_DATA = (45, "unIData")
    UN_B_DATA = (46, "unBData")
    EQUALS_DATA = (47, "equalsData")
    SERIALISE_DATA = (51, "serialiseData")
    # Misc constructors
    MK_PAIR_DATA = (48, "mkPairData")
    MK_NIL_DATA = (49, "mkNilData")
    MK_NIL_PAIR_DATA = (50, "mkNilPairData")

    def __str__(self) -> str:
        return self.text

    def __format__(self, spec: str) -> str:
        return format(self.text, spec)

    @classmethod
    def from_tag(cls, tag: int) -> DefaultFunction:
        """Look up a builtin by its flat tag."""
        try:
            return cls(tag)
        except ValueError:
            raise FlatDecodeError(f"Default Function not found - {tag}") from None

    @classmethod
    def from_name(cls, name: str) -> DefaultFunction:
        """Look up a builtin by its textual name."""
        try:
            return _BY_TEXT[name]
        except KeyError:
            raise ValueError(f"Default Function not found - {name}") from None


_BY_TEXT = {function.text: function for function in DefaultFunction}