# ==============================================================================
# REPOSITORIO DE USUARIOS
# ==============================================================================
# Directorio de usuarios. Los nuevos usuarios se agregan al final.
# ==============================================================================

import os
from typing import Any, Dict, List, Optional

from .base import BaseRepository


class UserRepository(BaseRepository):
    """
    Repositorio de usuarios.

    Formato de datos en users.json:
    [
        {"id": "user-admin", "name": "Diana", "email": "diana@admin.com",
         "role": "Admin", "password": "..."}
    ]
    """

    FILENAME = 'users.json'

    def __init__(self, data_dir: Optional[str] = None, initial: Optional[List[Dict[str, Any]]] = None):
        file_path = os.path.join(data_dir, self.FILENAME) if data_dir else None
        super().__init__(file_path, initial)

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """
        Busca un usuario por email sin distinguir mayúsculas.

        Args:
            email: Correo a buscar

        Returns:
            Datos del usuario o None
        """
        wanted = (email or '').strip().lower()
        if not wanted:
            return None
        for user in self.get_all():
            if user.get('email', '').lower() == wanted:
                return user
        return None

    def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Usuario cuyo nombre coincide sin distinguir mayúsculas."""
        wanted = (name or '').strip().lower()
        for user in self.get_all():
            if user.get('name', '').lower() == wanted:
                return user
        return None

    def email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        """True si otro usuario (distinto de exclude_id) ya usa ese email."""
        user = self.find_by_email(email)
        return user is not None and user.get('id') != exclude_id
