import re

from src.core.exceptions import InvalidAddress

# Base-58 alphabet: no 0, O, I or l.
ADDRESS_PATTERN = re.compile(r"[1-9A-HJ-NP-Za-km-z]{32,44}")


class Address(str):
    """A string that passed address validation. Build it with ``parse_address``."""


def is_valid_address(value: object) -> bool:
    if not isinstance(value, str):
        return False
    return ADDRESS_PATTERN.fullmatch(value) is not None


def parse_address(value: object) -> Address:
    """Normalize and validate an address.

    Raises:
        InvalidAddress: When the value is not a base-58 string of 32-44 characters
    """
    candidate = value.strip() if isinstance(value, str) else value
    if not is_valid_address(candidate):
        raise InvalidAddress(value)
    return Address(candidate)
