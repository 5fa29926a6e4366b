"""Hosted-checkout signature: HMAC-SHA256 of ``order_id|payment_id``."""

import hashlib
import hmac


def compute_signature(secret: str, gateway_order_id: str, payment_id: str) -> str:
    message = f"{gateway_order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def signature_matches(secret: str, gateway_order_id: str, payment_id: str, signature: str | None) -> bool:
    if not signature:
        return False
    expected = compute_signature(secret, gateway_order_id, payment_id)
    return hmac.compare_digest(expected, signature)
