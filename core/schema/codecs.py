# ============================================================================
# VALUE CODECS
# ============================================================================
# STATUS: Core - Read/write translation for kinds that need it
# PURPOSE: BigInt <-> exact decimal text, Bytes <-> lowercase hex text
# CREATED: 15 OCT 2026
# EXPORTS: ValueCodec, BigIntCodec, BytesCodec, ENCODING_RULES, encode_row, decode_row
# DEPENDENCIES: none
# ============================================================================
"""
Value codecs.

A codec sits between the host representation of a value and what the
database driver reads or writes:

    BigInt:  host int        <-> NUMERIC (sent as decimal text)
    Bytes:   host hex str    <-> BYTEA   (sent as bytes)

Kinds without an entry in ENCODING_RULES pass through unchanged.
"""

import re
from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping, Optional

from core.contracts import FieldKind
from core.errors import EncodingError


_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})*")


class ValueCodec:
    """Base codec: identity in both directions."""

    name = "identity"

    def to_db(self, value: Any, field: str = None) -> Any:
        return value

    def from_db(self, value: Any, field: str = None) -> Any:
        return value


class BigIntCodec(ValueCodec):
    """Arbitrary-precision integers stored as exact decimals."""

    name = "bigint"

    def to_db(self, value: Any, field: str = None) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, str, Decimal)):
            raise EncodingError(
                f"BigInt: field {field!r} expects an integer, got {type(value).__name__}",
                field=field,
                value=value,
            )
        try:
            if isinstance(value, Decimal) and value != value.to_integral_value():
                raise ValueError(value)
            return str(int(value))
        except (ValueError, ArithmeticError):
            raise EncodingError(
                f"BigInt: field {field!r} got a non-integer value {value!r}",
                field=field,
                value=value,
            )

    def from_db(self, value: Any, field: str = None) -> Optional[int]:
        if value is None:
            return None
        # NUMERIC arrives as Decimal; int(Decimal) keeps every digit
        if isinstance(value, Decimal):
            return int(value)
        return int(str(value))


class BytesCodec(ValueCodec):
    """Binary values exposed as lowercase, unprefixed hexadecimal text."""

    name = "bytes"

    def to_db(self, value: Any, field: str = None) -> Optional[bytes]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise EncodingError(
                f"Bytes: field {field!r} only accepts hex text, got {type(value).__name__}",
                field=field,
                value=value,
            )
        digits = value[2:] if value.startswith(("0x", "0X")) else value
        if not _HEX_RE.fullmatch(digits):
            raise EncodingError(
                f"Bytes: field {field!r} only accepts even-length hex text, got {value!r}",
                field=field,
                value=value,
            )
        return bytes.fromhex(digits)

    def from_db(self, value: Any, field: str = None) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodingError(
                f"Bytes: field {field!r} read a {type(value).__name__}, expected binary",
                field=field,
                value=value,
            )
        return bytes(value).hex()


ENCODING_RULES: Dict[FieldKind, ValueCodec] = {
    FieldKind.BIG_INT: BigIntCodec(),
    FieldKind.BYTES: BytesCodec(),
}


def codec_for(kind: Optional[FieldKind]) -> Optional[ValueCodec]:
    """Return the codec registered for a kind, or None for pass-through."""
    if kind is None:
        return None
    return ENCODING_RULES.get(kind)


# ============================================================================
# ROW HELPERS
# ============================================================================

def encode_row(fields: Iterable, values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Encode a record for writing.

    Args:
        fields: CompiledField objects (anything with .name and .codec)
        values: Host values keyed by field name

    Returns:
        New dict of driver values; keys absent from values are skipped

    Raises:
        EncodingError: naming the first field that fails its contract
    """
    encoded = dict(values)
    for f in fields:
        if f.name in values and f.codec is not None:
            encoded[f.name] = f.codec.to_db(values[f.name], field=f.name)
    return encoded


def decode_row(fields: Iterable, row: Mapping[str, Any]) -> Dict[str, Any]:
    """Decode a record read from the database into host values."""
    decoded = dict(row)
    for f in fields:
        if f.name in row and f.codec is not None:
            decoded[f.name] = f.codec.from_db(row[f.name], field=f.name)
    return decoded


__all__ = [
    "ValueCodec",
    "BigIntCodec",
    "BytesCodec",
    "ENCODING_RULES",
    "codec_for",
    "encode_row",
    "decode_row",
]
