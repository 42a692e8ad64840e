"""
Signed token codec (HS256 via flask-jwt-extended).

Needs an application context: the signing key, algorithm and issuer come
from the app config set by create_app.
"""

import jwt as pyjwt
from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException

from courier.errors import InvalidToken, TokenGenerationFailed

USER_ID_CLAIM = "userId"


def issue_token_pair(user_id, access_lifetime, refresh_lifetime):
    """Returns (access_token, refresh_token) for the user."""
    claims = {USER_ID_CLAIM: user_id}
    try:
        access_token = create_access_token(
            identity=str(user_id), expires_delta=access_lifetime, additional_claims=claims
        )
        refresh_token = create_refresh_token(
            identity=str(user_id), expires_delta=refresh_lifetime, additional_claims=claims
        )
    except (pyjwt.PyJWTError, TypeError, ValueError) as e:
        raise TokenGenerationFailed(detail=str(e)) from e
    return access_token, refresh_token


def verify_token(token, token_type="access"):
    """
    Decodes and verifies a token: signature, algorithm, issuer and expiry.
    Returns the claims.
    """
    try:
        claims = decode_token(token)
    except pyjwt.ExpiredSignatureError as e:
        raise InvalidToken(detail="token has expired") from e
    except (pyjwt.InvalidTokenError, JWTExtendedException) as e:
        raise InvalidToken(detail=f"failed to parse or validate token: {e}") from e

    if claims.get("type") != token_type:
        raise InvalidToken(detail="invalid token type")

    user_id = claims.get(USER_ID_CLAIM)
    if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
        raise InvalidToken(detail="invalid token")
    return claims
