"""Parsing of the IC-Certificate response header and its base64 CBOR payloads."""

from __future__ import annotations

import base64
import binascii
import io
from dataclasses import dataclass
from typing import Any

import cbor2


class CertHeaderError(ValueError):
    """The certificate header or one of its payloads is malformed."""


@dataclass(frozen=True)
class StructuredCertHeader:
    """The fields of an IC-Certificate header."""

    certificate: str
    tree: str


def _extract_field(value: str, field_name: str, prefix: str) -> str:
    position = value.find(prefix)
    if position < 0:
        raise CertHeaderError(
            f"Certificate header doesn't have '{field_name}' field: {value}"
        )
    start = position + len(prefix)
    end = value.find(":", start)
    if end < 0:
        raise CertHeaderError(
            f"malformed '{prefix}' field: no ending colon found: {value}"
        )
    return value[start:end]


def parse_structured_cert_header(value: str) -> StructuredCertHeader:
    """Split an IC-Certificate header value into its certificate and tree fields."""
    return StructuredCertHeader(
        certificate=_extract_field(value, "certificate", "certificate=:"),
        tree=_extract_field(value, "tree", "tree=:"),
    )


def parse_base64_cbor(s: str) -> Any:
    """Decode a base64-encoded CBOR value; trailing bytes are an error."""
    try:
        data = base64.b64decode(s, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CertHeaderError(f"failed to parse CBOR value: invalid base64 {s}") from exc
    stream = io.BytesIO(data)
    try:
        decoded = cbor2.CBORDecoder(stream).decode()
    except (cbor2.CBORDecodeError, ValueError, EOFError) as exc:
        raise CertHeaderError("failed to parse CBOR value: malformed CBOR") from exc
    if stream.read(1):
        raise CertHeaderError("failed to parse CBOR value: malformed CBOR")
    return decoded