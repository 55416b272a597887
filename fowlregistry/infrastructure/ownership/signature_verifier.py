"""
Adapter: ECDSA signature verifier.

Implements SignatureVerifier port with ECDSA over SHA-256. The signer's
public key is the PEM stored on their account; the signature is
base64-encoded DER. Anything that does not verify, including a missing
key or an undecodable signature, counts as invalid.
"""

import base64
import binascii
import logging
from typing import Optional

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import load_pem_public_key

from fowlregistry.domain.ownership.entities import UserProfile
from fowlregistry.domain.ownership.ports import SignatureVerifier

logger = logging.getLogger(__name__)


class EcdsaSignatureVerifier(SignatureVerifier):
    def verify(
        self, signer: Optional[UserProfile], payload: bytes, signature: str
    ) -> bool:
        if signer is None or not signer.public_key_pem:
            logger.info("No public key registered for signer")
            return False

        try:
            public_key = load_pem_public_key(signer.public_key_pem.encode("utf-8"))
        except (ValueError, UnsupportedAlgorithm):
            logger.warning("Unreadable public key for uid=%s", signer.uid)
            return False
        if not isinstance(public_key, ec.EllipticCurvePublicKey):
            logger.warning("Public key for uid=%s is not an EC key", signer.uid)
            return False

        try:
            der = base64.b64decode(signature, validate=True)
        except (binascii.Error, ValueError):
            return False

        try:
            public_key.verify(der, payload, ec.ECDSA(hashes.SHA256()))
        except InvalidSignature:
            return False
        return True
