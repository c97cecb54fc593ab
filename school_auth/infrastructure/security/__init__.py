"""Security adapters: credential hashing and token issuing."""

from school_auth.infrastructure.security.bcrypt_credential_hasher import (
    BcryptCredentialHasher,
)
from school_auth.infrastructure.security.jwt_token_issuer import JWTTokenIssuer

__all__ = ["BcryptCredentialHasher", "JWTTokenIssuer"]
