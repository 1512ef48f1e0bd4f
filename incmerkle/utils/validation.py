"""
Input Validation - sanitization for tree inputs.

Provides validation for externally supplied values to catch:
- Wrong types passed as leaf data
- Negative or absurd tree heights
- Malformed hex input from the command line
"""

from typing import Any, Optional, Tuple

# =============================================================================
# Constants
# =============================================================================

# Largest construction height accepted; 2 ** (MAX_HEIGHT + 1) leaves is about
# two million slots. Growth past it through insert is not capped.
MAX_HEIGHT = 20
MAX_ITEM_SIZE = 1 << 20  # 1MB per inserted item


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(
    data: Any,
    name: str,
    expected_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate bytes input.

    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length
        max_length: Maximum allowed length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        return False, f"{name} must be bytes, got {type(data).__name__}"

    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"

    if max_length is not None and len(data) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(data)}"

    return True, ""


def validate_integer(
    value: Any,
    name: str,
    min_val: int = 0,
    max_val: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value (None for unbounded)

    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass; True is not a height
    if not isinstance(value, int) or isinstance(value, bool):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if max_val is not None and value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_height(height: Any) -> Tuple[bool, str]:
    """Validate a tree height."""
    return validate_integer(height, "height", 0, MAX_HEIGHT)


def validate_hex_string(value: Any, name: str, expected_bytes: Optional[int] = None) -> Tuple[bool, str]:
    """
    Validate a hex string (with or without 0x prefix).

    Args:
        value: Value to validate
        name: Field name
        expected_bytes: Expected byte length when decoded

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    hex_str = value[2:] if value[:2] in ("0x", "0X") else value

    if len(hex_str) % 2 != 0:
        return False, f"{name} has odd length, invalid hex"

    try:
        bytes.fromhex(hex_str)
    except ValueError:
        return False, f"{name} contains invalid hex characters"

    if expected_bytes is not None:
        actual_bytes = len(hex_str) // 2
        if actual_bytes != expected_bytes:
            return False, f"{name} must be {expected_bytes} bytes, got {actual_bytes}"

    return True, ""


# =============================================================================
# Composite Validators
# =============================================================================


def validate_data_items(items: Any, max_item_size: int = MAX_ITEM_SIZE) -> Tuple[bool, str]:
    """Validate a batch of items destined for insertion."""
    if not isinstance(items, (list, tuple)):
        return False, f"items must be list/tuple, got {type(items).__name__}"

    for i, item in enumerate(items):
        valid, err = validate_bytes(item, f"items[{i}]", max_length=max_item_size)
        if not valid:
            return False, err

    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_bytes",
    "validate_integer",
    "validate_height",
    "validate_hex_string",
    "validate_data_items",
    "MAX_HEIGHT",
    "MAX_ITEM_SIZE",
]
