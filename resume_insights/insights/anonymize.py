from __future__ import annotations

import hashlib


def anonymize_client_address(address: str) -> str:
    """One-way visitor token for a client address.

    Stable for the same address so distinct visitors can be counted; the
    address itself is never stored.
    """
    return hashlib.sha256((address or "").encode("utf-8")).hexdigest()
