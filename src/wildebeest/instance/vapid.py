"""VAPID key management for Web Push."""

import base64
from dataclasses import dataclass

from cryptography.hazmat.primitives.serialization import (
    Encoding,
    PublicFormat,
)
from py_vapid import Vapid02


@dataclass(frozen=True)
class VapidKeypair:
    """A P-256 keypair in its persisted encodings."""

    public_key: str
    private_key_pem: str


def public_key_b64url(vapid: Vapid02) -> str:
    """Extract application server key as URL-safe base64."""
    raw = vapid.public_key.public_bytes(
        encoding=Encoding.X962,
        format=PublicFormat.UncompressedPoint,
    )
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def generate_vapid_keypair() -> VapidKeypair:
    """Generate a fresh P-256 keypair."""
    vapid = Vapid02()
    vapid.generate_keys()
    return VapidKeypair(
        public_key=public_key_b64url(vapid),
        private_key_pem=vapid.private_pem().decode(),
    )
