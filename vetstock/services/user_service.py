# ==============================================================================
# SERVICIO DE USUARIOS
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con usuarios y sesión.
#
# REGLA CRÍTICA - ADMIN POR DEFECTO (user-admin):
# Está BLINDADO y NO puede:
# - Ser eliminado
# - Cambiar su email
# - Cambiar su rol
# Estas validaciones se hacen AQUÍ, no en rutas.
# ==============================================================================

import logging
from typing import Any, Dict, List, Optional

from ..exceptions import ProtectedUserError
from ..models import User, UserRole
from ..repositories.interfaces import ICredentialVerifier, ISessionStore, IUserRepository
from .auth import PlaintextCredentialVerifier
from .validation import validate_user

logger = logging.getLogger(__name__)


class UserService:
    """
    Servicio para gestión de usuarios.

    Responsabilidades:
    - Autenticación (login/logout/sesión actual)
    - CRUD de usuarios
    - Protección del administrador por defecto
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        session_store: ISessionStore,
        verifier: ICredentialVerifier = None,
        session_key: str = 'el_amigo_user_id',
        default_admin_id: str = 'user-admin',
    ):
        """
        Args:
            user_repo: Repositorio de usuarios
            session_store: Dónde se guarda el ID del usuario logueado
            verifier: Comparación de contraseñas (texto plano por defecto)
            session_key: Clave de sesión con el ID del usuario
            default_admin_id: ID del administrador protegido
        """
        self.user_repo = user_repo
        self.session_store = session_store
        self.verifier = verifier or PlaintextCredentialVerifier()
        self.session_key = session_key
        self.default_admin_id = default_admin_id

    # =========================================================================
    # AUTENTICACIÓN
    # =========================================================================

    def login(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """
        Autentica un usuario.

        El email se compara sin distinguir mayúsculas y la contraseña de
        forma exacta. Solo un login exitoso escribe la sesión.

        Args:
            email: Correo
            password: Contraseña en texto plano

        Returns:
            Datos públicos del usuario, o None si las credenciales no coinciden
        """
        data = self.user_repo.find_by_email(email or '')
        if data is None or not self.verifier.verify(data.get('password'), password):
            logger.warning("Intento de login fallido para %s", email)
            return None

        self.session_store.set(self.session_key, data['id'])
        logger.info("Login: %s", data['id'])
        return User.from_dict(data).to_public_dict()

    def logout(self) -> None:
        """Elimina el usuario de la sesión."""
        self.session_store.remove(self.session_key)

    def get_current_user(self) -> Optional[Dict[str, Any]]:
        """
        Usuario de la sesión actual.

        Returns:
            Datos públicos, o None si no hay sesión o el ID ya no existe
        """
        user_id = self.session_store.get(self.session_key)
        if not user_id:
            return None
        data = self.user_repo.get_by_id(user_id)
        if data is None:
            return None
        return User.from_dict(data).to_public_dict()

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def list_users(self) -> List[Dict[str, Any]]:
        return [User.from_dict(u).to_public_dict() for u in self.user_repo.get_all()]

    def list_employees(self) -> List[Dict[str, Any]]:
        """Usuarios seleccionables como vendedor (Admin o Empleado)."""
        roles = {r.value for r in UserRole}
        return [u for u in self.list_users() if u['role'] in roles]

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        data = self.user_repo.get_by_id(user_id)
        return User.from_dict(data).to_public_dict() if data else None

    def resolve_employee_name(self, name: str) -> str:
        """Nombre registrado del usuario (sin distinguir mayúsculas) o 'Desconocido'."""
        data = self.user_repo.find_by_name(name or '')
        return data['name'] if data else 'Desconocido'

    def is_default_admin(self, user_id: str) -> bool:
        return user_id == self.default_admin_id

    # =========================================================================
    # CRUD
    # =========================================================================

    def create_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Crea un usuario y lo agrega al final del directorio.

        Args:
            data: name, email, role, password, confirm_password (opcional)

        Returns:
            Dict con ok y user, o errors
        """
        errors = validate_user(data, require_password=True)
        if errors:
            return {'ok': False, 'errors': errors}

        email = data['email'].strip()
        with self.user_repo.atomic():
            if self.user_repo.email_taken(email):
                return {'ok': False, 'errors': {'email': 'Este correo electrónico ya está en uso.'}}

            user = User(
                id=self.user_repo.next_sequential_id('user'),
                name=data['name'].strip(),
                email=email,
                role=data['role'],
                password=self.verifier.prepare(data['password']),
            )
            self.user_repo.append(user.to_dict())

        logger.info("Usuario creado: %s (%s)", user.id, user.role)
        return {'ok': True, 'user': user.to_public_dict()}

    def _guard_default_admin(self, user_id: str, current: Dict[str, Any],
                             changes: Dict[str, Any]) -> Dict[str, Any]:
        """El admin por defecto conserva email y rol sin importar la entrada."""
        if not self.is_default_admin(user_id):
            return changes
        guarded = dict(changes)
        guarded['email'] = current['email']
        guarded['role'] = current['role']
        return guarded

    def update_user(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Edita nombre, email y rol.

        Args:
            user_id: ID del usuario
            data: name, email, role

        Returns:
            Dict con ok y user, o errors / error
        """
        with self.user_repo.atomic():
            current = self.user_repo.get_by_id(user_id)
            if current is None:
                return {'ok': False, 'error': 'Usuario no encontrado', 'not_found': True}

            changes = {
                'name': data.get('name', current['name']),
                'email': data.get('email', current['email']),
                'role': data.get('role', current['role']),
            }
            changes = self._guard_default_admin(user_id, current, changes)

            errors = validate_user(changes, require_password=False)
            if errors:
                return {'ok': False, 'errors': errors}

            email = changes['email'].strip()
            if self.user_repo.email_taken(email, exclude_id=user_id):
                return {'ok': False, 'errors': {'email': 'Este correo electrónico ya está en uso.'}}

            current.update({
                'name': changes['name'].strip(),
                'email': email,
                'role': changes['role'],
            })
            self.user_repo.update(user_id, current)

        logger.info("Usuario actualizado: %s", user_id)
        return {'ok': True, 'user': User.from_dict(current).to_public_dict()}

    def _check_deletable(self, user_id: str) -> None:
        if self.is_default_admin(user_id):
            raise ProtectedUserError('No se puede eliminar al administrador por defecto.')

    def delete_user(self, user_id: str) -> Dict[str, Any]:
        """
        Elimina un usuario. El admin por defecto no se puede eliminar.

        Returns:
            {'ok': True} o {'ok': False, 'error': ..., 'protected': True}
        """
        try:
            self._check_deletable(user_id)
        except ProtectedUserError as exc:
            logger.warning("Intento de eliminar al admin por defecto")
            return {'ok': False, 'error': str(exc), 'protected': True}

        removed = self.user_repo.delete(user_id)
        if removed is None:
            return {'ok': False, 'error': 'Usuario no encontrado', 'not_found': True}

        logger.info("Usuario eliminado: %s", user_id)
        return {'ok': True}
