"""
Unit number generation, validation and formatting.
"""

import uuid

import pytest

from rentify_backend.modules.property_management.unit_numbers import (
    calculate_check_digits,
    format_unit_number,
    generate_sequential_unit_numbers,
    generate_unit_number,
    hash_block_id,
    parse_unit_number,
    random_unit_number,
    validate_unit_number,
)

BLOCK_ID = uuid.UUID("3f2b8c1e-9d4a-4e6b-8a7c-1b2d3e4f5a6b")


class TestBlockHash:
    def test_hash_is_four_digits_in_range(self):
        value = hash_block_id(BLOCK_ID)
        assert len(value) == 4
        assert 1000 <= int(value) <= 9999

    def test_hash_is_deterministic_and_ignores_hyphens(self):
        assert hash_block_id(BLOCK_ID) == hash_block_id(str(BLOCK_ID))
        assert hash_block_id(str(BLOCK_ID)) == hash_block_id(BLOCK_ID.hex)


class TestGenerateUnitNumber:
    def test_layout(self):
        number = generate_unit_number(BLOCK_ID, 3, 7)
        assert len(number) == 10
        assert number.isdigit()
        assert number[:4] == hash_block_id(BLOCK_ID)
        assert number[4] == "3"
        assert number[5:8] == "007"
        assert number[8:] == calculate_check_digits(number[:8])

    def test_floor_uses_last_digit(self):
        assert generate_unit_number(BLOCK_ID, 12, 1)[4] == "2"

    @pytest.mark.parametrize("sequence", [0, 1000, -1])
    def test_sequence_out_of_range(self, sequence):
        with pytest.raises(ValueError):
            generate_unit_number(BLOCK_ID, 1, sequence)

    def test_sequential_numbers_are_distinct(self):
        numbers = generate_sequential_unit_numbers(BLOCK_ID, 1, 25)
        assert len(set(numbers)) == 25
        assert [parse_unit_number(n).sequence for n in numbers] == list(range(1, 26))

    def test_random_numbers_are_well_formed(self):
        for _ in range(50):
            parsed = parse_unit_number(random_unit_number())
            assert parsed.is_valid
            assert 1 <= parsed.sequence <= 999


class TestValidation:
    def test_generated_numbers_validate(self):
        for sequence in range(1, 50):
            assert validate_unit_number(generate_unit_number(BLOCK_ID, 5, sequence))

    def test_tampered_number_fails(self):
        number = generate_unit_number(BLOCK_ID, 1, 1)
        tampered = number[:5] + str((int(number[5]) + 1) % 10) + number[6:]
        assert not validate_unit_number(tampered)

    @pytest.mark.parametrize("value", ["", "12345", "12345678901", "12345abcde"])
    def test_malformed_numbers(self, value):
        assert not validate_unit_number(value)
        assert not parse_unit_number(value).is_valid

    def test_check_digits(self):
        # Luhn digit over 12345678 is 6; digit sum 36 gives 6
        assert calculate_check_digits("12345678") == "66"


class TestFormatting:
    def test_parse_round_trip(self):
        number = generate_unit_number(BLOCK_ID, 4, 12)
        parsed = parse_unit_number(number)
        assert parsed.is_valid
        assert parsed.block_hash == hash_block_id(BLOCK_ID)
        assert parsed.floor_digit == 4
        assert parsed.sequence == 12

    def test_format_groups_digits(self):
        assert format_unit_number("1234501234") == "1234-5-012-34"

    def test_format_leaves_malformed_values(self):
        assert format_unit_number("12-34") == "12-34"
