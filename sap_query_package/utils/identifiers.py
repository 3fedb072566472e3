"""Short identifiers used in generated file names."""

from __future__ import annotations

import secrets

SHORT_ID_BYTES = 4


def new_short_id() -> str:
    """Return an 8-character uppercase hexadecimal identifier.

    The value is drawn from :mod:`secrets`. No registry of issued identifiers is
    kept, so two calls may collide with probability 1/2**32.
    """

    raw = secrets.token_bytes(SHORT_ID_BYTES)
    return "".join(f"{byte:02x}" for byte in raw).upper()


__all__ = ["SHORT_ID_BYTES", "new_short_id"]
