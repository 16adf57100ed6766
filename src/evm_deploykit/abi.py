"""Constructor argument encoding for evm-deploykit."""

import json
import re
from typing import Any, Dict, List, Optional, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import is_address, to_checksum_address
from hexbytes import HexBytes

from .exceptions import ConstructorArgumentError

_ARRAY_SUFFIX = re.compile(r"^(.*)\[(\d*)\]$")


def strip_hex_prefix(value: str) -> str:
    """Remove a leading 0x from a hex string, if present."""
    if value[:2].lower() == "0x":
        return value[2:]
    return value


def constructor_types(abi: Sequence[Dict[str, Any]]) -> List[str]:
    """
    Get the declared constructor parameter types from an ABI.

    Args:
        abi: Contract ABI

    Returns:
        List of ABI type strings (empty if the ABI declares no constructor)
    """
    for item in abi:
        if item.get("type") == "constructor":
            return [param["type"] for param in item.get("inputs", [])]
    return []


def coerce_arg(abi_type: str, value: Any) -> Any:
    """
    Convert a command-line argument to the Python value eth_abi expects.

    Arrays are given as JSON lists, e.g. '[1, 2, 3]'.

    Raises:
        ConstructorArgumentError: If the value cannot represent abi_type
    """
    array_match = _ARRAY_SUFFIX.match(abi_type)
    if array_match:
        inner_type, length = array_match.groups()
        items = value
        if isinstance(value, str):
            try:
                items = json.loads(value)
            except json.JSONDecodeError as e:
                raise ConstructorArgumentError(
                    f"Expected a JSON list for {abi_type}, got {value!r}"
                ) from e
        if not isinstance(items, list):
            raise ConstructorArgumentError(f"Expected a list for {abi_type}, got {value!r}")
        if length and len(items) != int(length):
            raise ConstructorArgumentError(
                f"Expected {length} items for {abi_type}, got {len(items)}"
            )
        return [coerce_arg(inner_type, item) for item in items]

    if abi_type.startswith("tuple") or abi_type.startswith("("):
        raise ConstructorArgumentError(f"Tuple constructor arguments are not supported: {abi_type}")

    text = str(value)
    try:
        if abi_type.startswith(("uint", "int")):
            return int(text, 16) if text[:2].lower() == "0x" else int(text)
        if abi_type == "bool":
            lowered = text.strip().lower()
            if lowered in ("true", "1"):
                return True
            if lowered in ("false", "0"):
                return False
            raise ConstructorArgumentError(f"Invalid bool value: {value!r}")
        if abi_type == "address":
            if not is_address(text):
                raise ConstructorArgumentError(f"Invalid address: {value!r}")
            return to_checksum_address(text)
        if abi_type.startswith("bytes"):
            data = bytes(HexBytes(text))
            size = abi_type[len("bytes"):]
            if size and len(data) != int(size):
                raise ConstructorArgumentError(
                    f"Expected {size} bytes for {abi_type}, got {len(data)}"
                )
            return data
    except ValueError as e:
        if isinstance(e, ConstructorArgumentError):
            raise
        raise ConstructorArgumentError(f"Invalid {abi_type} value: {value!r}") from e

    # string and anything eth_abi can take verbatim
    return text


def coerce_args(types: Sequence[str], args: Sequence[Any]) -> List[Any]:
    """
    Convert constructor arguments to typed values.

    Raises:
        ConstructorArgumentError: If the argument count or any value is wrong
    """
    if len(types) != len(args):
        raise ConstructorArgumentError(
            f"Constructor expects {len(types)} argument(s) ({', '.join(types) or 'none'}), "
            f"got {len(args)}"
        )
    return [coerce_arg(abi_type, arg) for abi_type, arg in zip(types, args)]


def encode_constructor_args(types: Sequence[str], args: Sequence[Any]) -> str:
    """
    ABI-encode constructor arguments.

    Args:
        types: Constructor parameter types
        args: Argument values (strings are coerced per type)

    Returns:
        Hex string without the 0x prefix ("" when there are no parameters)

    Raises:
        ConstructorArgumentError: If encoding fails
    """
    values = coerce_args(types, args)
    try:
        return encode(list(types), values).hex()
    except (EncodingError, TypeError, ValueError) as e:
        raise ConstructorArgumentError(f"Could not encode constructor arguments: {e}") from e


def _plain(abi_type: str, value: Any) -> Any:
    array_match = _ARRAY_SUFFIX.match(abi_type)
    if array_match:
        return [_plain(array_match.group(1), item) for item in value]
    if isinstance(value, bytes):
        return HexBytes(value).to_0x_hex()
    if abi_type == "address":
        return to_checksum_address(value)
    return value


def _stringify(abi_type: str, value: Any) -> Any:
    if _ARRAY_SUFFIX.match(abi_type):
        return json.dumps(_plain(abi_type, value))
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    return _plain(abi_type, value)


def decode_constructor_args(types: Sequence[str], encoded: Optional[str]) -> List[str]:
    """
    Decode constructor arguments back to the string form stored in records.

    Inverse of encode_constructor_args for canonical inputs: decimal integers,
    "true"/"false", checksummed addresses and 0x-prefixed byte strings.

    Raises:
        ConstructorArgumentError: If the data does not decode under types
    """
    data = bytes.fromhex(strip_hex_prefix(encoded or ""))
    try:
        values = decode(list(types), data)
    except (DecodingError, ValueError) as e:
        raise ConstructorArgumentError(f"Could not decode constructor arguments: {e}") from e
    return [_stringify(abi_type, value) for abi_type, value in zip(types, values)]
