"""Emisión y verificación de tokens JWT (HS256) sin estado en servidor."""

import json
import time
import logging
from datetime import timedelta

from jose import JWSError, JWTError, jws, jwt
from pydantic import ValidationError as PydanticValidationError

from auth_service.errors import Expired, InvalidSignature, MalformedToken, UnexpectedSigningAlgorithm
from auth_service.schemas import TokenPayload

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

ACCESS_TOKEN_TTL = timedelta(minutes=15)


class TokenIssuer:
    """
    Firma y valida tokens de acceso.

    La clave simétrica se inyecta una sola vez al construir la app; solo se
    acepta el algoritmo configurado (HS256), cualquier otro 'alg' declarado
    en la cabecera se rechaza antes de tocar la firma.
    """

    def __init__(self, secret_key: str, issuer: str):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self.issuer = issuer

    def issue(self, user_id: int, email: str, ttl: timedelta = ACCESS_TOKEN_TTL) -> str:
        """
        Genera un token de acceso JWT firmado.

        Args:
            user_id: ID del usuario, viaja como 'sub' (string).
            email: Email del usuario.
            ttl: Tiempo de vida del token.

        Returns:
            String del JWT codificado.
        """
        now = int(time.time())
        to_encode = {
            "sub": str(user_id),
            "email": email,
            "iss": self.issuer,
            "iat": now,
            "exp": now + int(ttl.total_seconds()),
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenPayload:
        """
        Valida firma, algoritmo y expiración de un token.

        Returns:
            El payload decodificado.

        Raises:
            MalformedToken, UnexpectedSigningAlgorithm, InvalidSignature, Expired.
        """
        if not token:
            raise MalformedToken("empty token")

        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise MalformedToken(str(e)) from e

        alg = header.get("alg")
        if not isinstance(alg, str) or not alg:
            raise MalformedToken("missing alg header")
        if alg != ALGORITHM:
            raise UnexpectedSigningAlgorithm(f"unexpected signing method: {alg}")

        try:
            raw_payload = jws.verify(token, self._secret_key, algorithms=[ALGORITHM])
        except JWSError as e:
            raise InvalidSignature(str(e)) from e

        try:
            claims = json.loads(raw_payload)
        except ValueError as e:
            raise MalformedToken("invalid payload") from e
        if not isinstance(claims, dict):
            raise MalformedToken("payload must be a json object")

        try:
            payload = TokenPayload.model_validate(claims)
        except PydanticValidationError as e:
            raise MalformedToken("missing or invalid claims") from e

        if time.time() >= payload.exp:
            raise Expired("token has expired")

        return payload
