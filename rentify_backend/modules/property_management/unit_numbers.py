"""
Ten-digit unit numbers.

Layout ``PPPPFUUUCC``:

- ``PPPP``: 1000-9999 hash of the block id
- ``F``: floor number modulo 10
- ``UUU``: zero-padded unit sequence within that floor slot
- ``CC``: Luhn check digit followed by the digit sum modulo 10
"""

import secrets
import uuid
from dataclasses import dataclass

UNIT_NUMBER_LENGTH = 10
MAX_UNIT_SEQUENCE = 999


@dataclass(frozen=True)
class ParsedUnitNumber:
    block_hash: str
    floor_digit: int
    sequence: int
    is_valid: bool


def hash_block_id(block_id: uuid.UUID | str) -> str:
    """Fold a block id into four digits (1000-9999).

    Uses a 32-bit signed multiply-by-31 string hash over the id without
    hyphens, so the same id always yields the same prefix.
    """
    cleaned = str(block_id).replace("-", "")
    value = 0
    for char in cleaned:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return str(abs(value) % 9000 + 1000)


def calculate_check_digits(base_number: str) -> str:
    total = 0
    double = False
    for char in reversed(base_number):
        digit = int(char)
        if double:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
        double = not double

    luhn = (10 - total % 10) % 10
    digit_sum = sum(int(c) for c in base_number) % 10
    return f"{luhn}{digit_sum}"


def generate_unit_number(
    block_id: uuid.UUID | str, floor_number: int, sequence: int
) -> str:
    """Build the unit number for a block, floor and sequence.

    Raises:
        ValueError: If the sequence does not fit in three digits
    """
    if not 1 <= sequence <= MAX_UNIT_SEQUENCE:
        raise ValueError(
            f"Unit sequence {sequence} is outside 1..{MAX_UNIT_SEQUENCE}"
        )
    base = f"{hash_block_id(block_id)}{floor_number % 10}{sequence:03d}"
    return base + calculate_check_digits(base)


def random_unit_number() -> str:
    """A well-formed number drawn from a random block, floor and sequence."""
    return generate_unit_number(
        uuid.uuid4(), secrets.randbelow(10), secrets.randbelow(MAX_UNIT_SEQUENCE) + 1
    )


def validate_unit_number(unit_number: str) -> bool:
    if len(unit_number) != UNIT_NUMBER_LENGTH or not unit_number.isdigit():
        return False
    return calculate_check_digits(unit_number[:8]) == unit_number[8:]


def parse_unit_number(unit_number: str) -> ParsedUnitNumber:
    if len(unit_number) != UNIT_NUMBER_LENGTH or not unit_number.isdigit():
        return ParsedUnitNumber(block_hash="", floor_digit=0, sequence=0, is_valid=False)
    return ParsedUnitNumber(
        block_hash=unit_number[:4],
        floor_digit=int(unit_number[4]),
        sequence=int(unit_number[5:8]),
        is_valid=validate_unit_number(unit_number),
    )


def format_unit_number(unit_number: str) -> str:
    """Display form ``PPPP-F-UUU-CC``; anything malformed is returned as-is."""
    if len(unit_number) != UNIT_NUMBER_LENGTH:
        return unit_number
    return "-".join(
        (unit_number[:4], unit_number[4], unit_number[5:8], unit_number[8:])
    )


def generate_sequential_unit_numbers(
    block_id: uuid.UUID | str,
    floor_number: int,
    count: int,
    start: int = 1,
) -> list[str]:
    return [
        generate_unit_number(block_id, floor_number, start + i) for i in range(count)
    ]
