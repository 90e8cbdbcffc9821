# ==============================================================================
# SESIÓN Y CREDENCIALES
# ==============================================================================
# Implementaciones de ISessionStore e ICredentialVerifier.
#
# - MemorySessionStore: diccionario en proceso (tests, scripts)
# - FlaskSessionStore: cookie de sesión de Flask
# - PlaintextCredentialVerifier: comparación exacta de la contraseña guardada
# - HashedCredentialVerifier: hashes de Werkzeug
# ==============================================================================

import hmac
from typing import Any, Dict

from werkzeug.security import check_password_hash, generate_password_hash


class MemorySessionStore:
    """Sesión guardada en un diccionario del proceso."""

    def __init__(self):
        self._data: Dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FlaskSessionStore:
    """Sesión de la petición Flask actual (requiere contexto de request)."""

    def get(self, key: str, default: Any = None) -> Any:
        from flask import session
        return session.get(key, default)

    def set(self, key: str, value: Any) -> None:
        from flask import session
        session[key] = value
        session.modified = True

    def remove(self, key: str) -> None:
        from flask import session
        session.pop(key, None)


class PlaintextCredentialVerifier:
    """Contraseñas guardadas tal cual; coincidencia exacta."""

    def verify(self, stored: str, given: str) -> bool:
        if stored is None or given is None:
            return False
        return hmac.compare_digest(str(stored).encode('utf-8'), str(given).encode('utf-8'))

    def prepare(self, password: str) -> str:
        return password


class HashedCredentialVerifier:
    """Contraseñas guardadas como hash de Werkzeug."""

    def verify(self, stored: str, given: str) -> bool:
        if not stored or given is None:
            return False
        try:
            return check_password_hash(stored, given)
        except ValueError:
            # El valor guardado no es un hash reconocido
            return False

    def prepare(self, password: str) -> str:
        return generate_password_hash(password)


def get_credential_verifier(scheme: str):
    """'hashed' -> HashedCredentialVerifier; cualquier otro -> texto plano."""
    if scheme == 'hashed':
        return HashedCredentialVerifier()
    return PlaintextCredentialVerifier()
