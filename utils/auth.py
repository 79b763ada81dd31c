"""
Bearer-token handling for the sync service.

ID tokens are issued by Firebase Authentication. Verification checks the
RS256 signature against Google's published signing keys (fetched and cached
by PyJWT's JWKS client) and the standard claims: expiry, issued-at, issuer,
audience and subject.
"""

import logging

import jwt

GOOGLE_JWKS_URL = 'https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com'
CLOCK_SKEW_SECONDS = 5


class AuthError(Exception):
    pass


def extract_token(auth_header: str | None) -> str | None:
    """Return the token from ``Bearer <token>``, or None if the header is missing or malformed."""
    if not auth_header or not auth_header.startswith('Bearer '):
        return None
    token = auth_header[len('Bearer '):].strip()
    return token or None


class FirebaseTokenVerifier:
    def __init__(self, project_id: str, jwks_url: str = GOOGLE_JWKS_URL):
        self.project_id = project_id
        self.issuer = f'https://securetoken.google.com/{project_id}'
        self._jwks = jwt.PyJWKClient(jwks_url, cache_keys=True, lifespan=3600)

    def verify(self, token: str) -> dict[str, str | None]:
        """Return ``{'uid': ..., 'email': ...}`` or raise ``AuthError``."""
        try:
            signing_key = self._jwks.get_signing_key_from_jwt(token)
            payload = jwt.decode(
                token,
                signing_key.key,
                algorithms=['RS256'],
                audience=self.project_id,
                issuer=self.issuer,
                leeway=CLOCK_SKEW_SECONDS,
                options={'require': ['exp', 'iat', 'iss', 'aud', 'sub']},
            )
        except jwt.PyJWTError as e:
            logging.info(f"Rejected token: {e}")
            raise AuthError(str(e)) from e

        uid = payload.get('sub')
        if not uid or not isinstance(uid, str):
            raise AuthError('Token has no subject (uid)')

        return {'uid': uid, 'email': payload.get('email')}
