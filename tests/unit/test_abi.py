"""Unit tests for constructor argument encoding."""

import pytest

from evm_deploykit.abi import (
    coerce_arg,
    constructor_types,
    decode_constructor_args,
    encode_constructor_args,
    strip_hex_prefix,
)
from evm_deploykit.exceptions import ConstructorArgumentError

ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


class TestConstructorTypes:
    """Test constructor_types()."""

    def test_reads_constructor_inputs(self, token_artifact):
        """Test that parameter types come from the constructor entry."""
        assert constructor_types(token_artifact.abi) == ["string", "uint256"]

    def test_constructor_without_inputs(self, simple_storage_artifact):
        """Test that a constructor with no inputs yields no types."""
        assert constructor_types(simple_storage_artifact.abi) == []

    def test_abi_without_constructor(self):
        """Test that an ABI with no constructor yields no types."""
        abi = [{"type": "function", "name": "get", "inputs": [], "outputs": []}]
        assert constructor_types(abi) == []


class TestEncoding:
    """Test encode_constructor_args()."""

    def test_empty_types_encode_to_empty_string(self):
        """Test that a constructor without parameters encodes to ''."""
        assert encode_constructor_args([], []) == ""

    def test_encoded_value_has_no_prefix(self):
        """Test that the 0x prefix is never stored."""
        encoded = encode_constructor_args(["uint256"], ["42"])

        assert not encoded.startswith("0x")
        assert encoded == "0" * 62 + "2a"

    def test_hex_integers_are_accepted(self):
        """Test that integer arguments may be given in hex."""
        assert encode_constructor_args(["uint256"], ["0x2a"]) == encode_constructor_args(
            ["uint256"], ["42"]
        )

    def test_wrong_argument_count(self):
        """Test that a count mismatch is rejected before encoding."""
        with pytest.raises(ConstructorArgumentError, match="expects 2"):
            encode_constructor_args(["string", "uint256"], ["only-one"])

    def test_invalid_integer(self):
        """Test that a non-numeric integer argument is rejected."""
        with pytest.raises(ConstructorArgumentError):
            encode_constructor_args(["uint256"], ["lots"])

    def test_invalid_address(self):
        """Test that a malformed address is rejected."""
        with pytest.raises(ConstructorArgumentError):
            encode_constructor_args(["address"], ["0x1234"])

    def test_tuple_types_are_rejected(self):
        """Test that tuple parameters are reported as unsupported."""
        with pytest.raises(ConstructorArgumentError, match="not supported"):
            coerce_arg("tuple", "[]")


class TestCoercion:
    """Test coerce_arg()."""

    @pytest.mark.parametrize(
        "value, expected",
        [("true", True), ("TRUE", True), ("1", True), ("false", False), ("0", False)],
    )
    def test_bool_values(self, value, expected):
        assert coerce_arg("bool", value) is expected

    def test_invalid_bool(self):
        with pytest.raises(ConstructorArgumentError):
            coerce_arg("bool", "maybe")

    def test_address_is_checksummed(self):
        assert coerce_arg("address", ADDRESS.lower()) == ADDRESS

    def test_bytes32(self):
        assert coerce_arg("bytes32", "0x" + "11" * 32) == b"\x11" * 32

    @pytest.mark.parametrize("value", ["0xab", "0x" + "11" * 33, "0x"])
    def test_fixed_bytes_length_is_checked(self, value):
        """Test that bytesN rejects values that are not exactly N bytes."""
        with pytest.raises(ConstructorArgumentError, match="Expected 32 bytes"):
            coerce_arg("bytes32", value)

    def test_short_fixed_bytes_are_not_encoded(self):
        with pytest.raises(ConstructorArgumentError):
            encode_constructor_args(["bytes32"], ["0xab"])

    def test_dynamic_bytes_take_any_length(self):
        assert coerce_arg("bytes", "0xab") == b"\xab"

    def test_array_from_json(self):
        assert coerce_arg("uint256[]", "[1, 2, 3]") == [1, 2, 3]

    def test_fixed_array_length_is_checked(self):
        with pytest.raises(ConstructorArgumentError, match="Expected 2 items"):
            coerce_arg("uint256[2]", "[1, 2, 3]")

    def test_array_requires_json_list(self):
        with pytest.raises(ConstructorArgumentError):
            coerce_arg("uint256[]", "1,2,3")


class TestRoundTrip:
    """Test that decoding inverts encoding for canonical string arguments."""

    @pytest.mark.parametrize(
        "types, values",
        [
            ([], []),
            (["uint256"], ["42"]),
            (["string", "uint256"], ["Hello, World!", "1000000000000000000000"]),
            (["address", "bool"], [ADDRESS, "true"]),
            (["int256", "bytes32"], ["-7", "0x" + "ab" * 32]),
            (["uint256[]"], ["[1, 2, 3]"]),
        ],
    )
    def test_decode_encode_round_trip(self, types, values):
        """Test decode(encode(types, values)) == values."""
        encoded = encode_constructor_args(types, values)
        assert decode_constructor_args(types, encoded) == values

    def test_decode_accepts_prefixed_hex(self):
        """Test that a 0x-prefixed encoding also decodes."""
        encoded = encode_constructor_args(["uint256"], ["5"])
        assert decode_constructor_args(["uint256"], "0x" + encoded) == ["5"]

    def test_decode_rejects_truncated_data(self):
        """Test that short data is reported, not silently decoded."""
        with pytest.raises(ConstructorArgumentError):
            decode_constructor_args(["uint256"], "00ff")


class TestStripHexPrefix:
    """Test strip_hex_prefix()."""

    def test_strips_lower_and_upper_prefix(self):
        assert strip_hex_prefix("0xabc") == "abc"
        assert strip_hex_prefix("0Xabc") == "abc"

    def test_leaves_unprefixed_value(self):
        assert strip_hex_prefix("abc") == "abc"
        assert strip_hex_prefix("") == ""
