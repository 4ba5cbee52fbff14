"""
Tests for the worklet content hash.
"""

import pytest

from workletizer.core.worklet.hashing import string_hash_64, utf16_code_units


@pytest.mark.parametrize(
  "text, expected",
  [
    ("", 22093287),
    ("a", 729205414),
  ],
)
def test_known_values(text, expected):
  assert string_hash_64(text) == expected


def test_order_sensitive():
  assert string_hash_64("ab") != string_hash_64("ba")


def test_long_input_stays_in_range():
  value = string_hash_64("function f(){return 1;}" * 200)
  assert 0 <= value < 2**45


def test_surrogate_pairs():
  assert utf16_code_units("\U0001F600") == [0xD83D, 0xDE00]
  assert utf16_code_units("é") == [0xE9]
  assert string_hash_64("\U0001F600") == string_hash_64("\ud83d\ude00")
  assert string_hash_64("\U0001F600") != string_hash_64("")
