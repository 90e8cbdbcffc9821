# ==============================================================================
# SERVICIO DE CUENTAS BANCARIAS
# ==============================================================================
# Cuentas de la empresa que se muestran al cobrar por transferencia.
# ==============================================================================

import logging
import time
from typing import Any, Dict, List

from ..models import BankAccount
from ..repositories.interfaces import IRepository
from ..utils import to_text
from .validation import validate_bank_account

logger = logging.getLogger(__name__)


class BankAccountService:
    """CRUD de cuentas bancarias (acc-{milisegundos})."""

    def __init__(self, bank_account_repo: IRepository):
        self.bank_account_repo = bank_account_repo

    def list_accounts(self) -> List[Dict[str, Any]]:
        return self.bank_account_repo.get_all()

    def _new_id(self) -> str:
        stamp = int(time.time() * 1000)
        while self.bank_account_repo.get_by_id(f"acc-{stamp}") is not None:
            stamp += 1
        return f"acc-{stamp}"

    @staticmethod
    def _clean(data: Dict[str, Any]) -> Dict[str, str]:
        return {
            'bank_name': to_text(data.get('bank_name')),
            'account_holder': to_text(data.get('account_holder')),
            'account_number': to_text(data.get('account_number')),
            'cci': to_text(data.get('cci')),
        }

    def create_account(self, data: Dict[str, Any]) -> Dict[str, Any]:
        errors = validate_bank_account(data)
        if errors:
            return {'ok': False, 'errors': errors}

        with self.bank_account_repo.atomic():
            account = BankAccount(id=self._new_id(), **self._clean(data))
            self.bank_account_repo.append(account.to_dict())

        logger.info("Cuenta bancaria creada: %s (%s)", account.id, account.bank_name)
        return {'ok': True, 'account': account.to_dict()}

    def update_account(self, account_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        errors = validate_bank_account(data)
        if errors:
            return {'ok': False, 'errors': errors}

        with self.bank_account_repo.atomic():
            if self.bank_account_repo.get_by_id(account_id) is None:
                return {'ok': False, 'error': 'Cuenta no encontrada', 'not_found': True}
            account = BankAccount(id=account_id, **self._clean(data))
            self.bank_account_repo.update(account_id, account.to_dict())

        logger.info("Cuenta bancaria actualizada: %s", account_id)
        return {'ok': True, 'account': account.to_dict()}

    def delete_account(self, account_id: str) -> Dict[str, Any]:
        if self.bank_account_repo.delete(account_id) is None:
            return {'ok': False, 'error': 'Cuenta no encontrada', 'not_found': True}
        logger.info("Cuenta bancaria eliminada: %s", account_id)
        return {'ok': True}
