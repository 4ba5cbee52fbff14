"""
Worklet Content Hash.

A port of the `string-hash-64` package used by the worklet runtime as its
cache key: two djb2-xor accumulators over UTF-16 code units, read from the end
of the string, combined into a non-negative number of at most 45 bits.
"""

from typing import List

_MASK32 = 0xFFFFFFFF


def _int32(value: int) -> int:
  """ECMAScript ToInt32."""
  value &= _MASK32
  return value - 0x100000000 if value & 0x80000000 else value


def utf16_code_units(text: str) -> List[int]:
  """Splits a string into UTF-16 code units (astral characters become surrogate pairs)."""
  units: List[int] = []
  for char in text:
    code = ord(char)
    if code > 0xFFFF:
      code -= 0x10000
      units.append(0xD800 + (code >> 10))
      units.append(0xDC00 + (code & 0x3FF))
    else:
      units.append(code)
  return units


def string_hash_64(text: str) -> int:
  """
  Hashes a serialized worklet.

  Args:
      text: The compact worklet source.

  Returns:
      int: A deterministic non-negative integer.
  """
  hash1 = 5381
  hash2 = 52711
  for unit in reversed(utf16_code_units(text)):
    hash1 = _int32(hash1 * 33) ^ unit
    hash2 = _int32(hash2 * 33) ^ unit
  return (hash1 & _MASK32) * 4096 + (hash2 & _MASK32)
