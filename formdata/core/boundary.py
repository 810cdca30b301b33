"""Multipart boundary generation.

A boundary is a nonce made of the current time and random bytes, encoded as
URL-safe base64 and left-padded with dashes. Every character it can contain is
an RFC 2046 ``bchar``.
"""

import base64
import os
import re
import sys
import time
from collections.abc import Callable

from beartype import beartype

from formdata.core.errors import BoundaryError

RandomSource = Callable[[int], bytes]
Clock = Callable[[], int]

BOUNDARY_WIDTH = 68
MAX_BOUNDARY_LENGTH = 70
RANDOM_BYTES = 12

# RFC 2046 section 5.1.1: bchars, last character must not be a space.
_BOUNDARY_RE = re.compile(r"[0-9A-Za-z'()+_,\-./:=? ]{0,69}[0-9A-Za-z'()+_,\-./:=?]")


def _nonce(random_source: RandomSource, clock: Clock) -> bytes:
    now_ns = clock()
    if now_ns < 0:
        raise BoundaryError("system time should be after the Unix epoch")
    secs, nanos = divmod(now_ns, 1_000_000_000)
    random_part = random_source(RANDOM_BYTES)
    if len(random_part) != RANDOM_BYTES:
        raise BoundaryError(f"random source returned {len(random_part)} bytes, expected {RANDOM_BYTES}")
    return (
        nanos.to_bytes(4, sys.byteorder)
        + (secs & 0xFFFF_FFFF_FFFF_FFFF).to_bytes(8, sys.byteorder)
        + random_part
    )


@beartype
def generate_boundary(random_source: RandomSource = os.urandom, clock: Clock = time.time_ns) -> str:
    """Generate a 68 character boundary from the clock and the random source."""
    token = base64.urlsafe_b64encode(_nonce(random_source, clock)).decode("ascii")
    return token.rjust(BOUNDARY_WIDTH, "-")


@beartype
def validate_boundary(boundary: str) -> str:
    """Return ``boundary`` unchanged if RFC 2046 allows it, raise otherwise."""
    if not _BOUNDARY_RE.fullmatch(boundary):
        raise BoundaryError(
            f"boundary must be 1-{MAX_BOUNDARY_LENGTH} RFC 2046 characters not ending in a space: {boundary!r}"
        )
    return boundary
