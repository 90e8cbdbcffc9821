# ==============================================================================
# DATOS DE DEMOSTRACIÓN
# ==============================================================================
# Catálogo, usuarios y cuentas con los que arranca la tienda cuando
# SEED_DEMO_DATA está activo. Ventas, pedidos y calendario empiezan vacíos.
# ==============================================================================

from typing import Any, Dict, List

from ..models import DEFAULT_IMAGE_URL, Product, User, BankAccount
from ..utils import parse_date

# (nombre, categoría, stock, compra, venta, vencimiento)
_CATALOG = [
    ('SURFAC 820 500ML', 'Desinfectantes', 2, 10.00, 14.00, '5/08/2023'),
    ('SURFAC 820 250ML', 'Desinfectantes', 3, 6.50, 10.00, '19/08/2023'),
    ('PROTEXIN 1 LITRO', 'Probióticos', 1, 40.00, 53.00, '23/10/2023'),
    ('DORSAN 250ML', 'Antiparasitarios', 3, 16.00, 20.00, '25/08/2022'),
    ('TIFON 1 LITRO LIQUIDO', 'Fertilizantes', 0, 38.00, 45.00, None),
    ('TIFON 1/4 LIQUIDO', 'Fertilizantes', 3, 14.00, 20.00, None),
    ('PLATOS DE PERRO GRANDE', 'Accesorios para mascotas', 3, 5.00, 6.50, None),
    ('PLATO GATO', 'Accesorios para mascotas', 1, 2.50, 4.00, None),
    ('HORMIFIN GRANULADO', 'Fertilizantes', 4, 6.00, 9.00, None),
    ('SULFATO DE COBRE DE 1K', 'Fertilizantes', 2, 13.00, 18.00, 'Mar-22'),
    ('CURTINE UV DE 500GR', 'Medicamentos', 2, 30.00, 42.00, '20/04/2022'),
    ('EVITANE DE 1KG', 'Medicamentos', 1, 24.00, 33.00, '20/02/2023'),
    ('TIFON DE 1KG POLVO', 'Fertilizantes', 8, 8.50, 13.00, 'Set-23'),
    ('BOMBA 10 DE', 'Equipos', 6, 13.50, 17.00, 'Feb-24'),
    ('RUMIFAR DE 100GR', 'Medicamentos', 2, 13.00, 17.00, 'Feb-24'),
    ('SULFATO DE MAGNESIO X 1KG', 'Fertilizantes', 4, 7.50, 10.00, None),
    ('METSUL', 'Fertilizantes', 2, 15.00, 20.00, '23/11/2022'),
    ('POLIFON X 25GR', 'Vitaminas', 10, 7.00, 9.00, 'May-23'),
    ('ANTIPAPILOMA DE 20ML', 'Medicamentos', 2, 11.00, 15.00, 'Nov-22'),
    ('VERRUFIN X 20ML', 'Medicamentos', 1, 10.50, 14.00, 'Jun-22'),
]


def demo_products() -> List[Dict[str, Any]]:
    """Catálogo inicial prod-001 ... prod-020."""
    products = []
    for index, (name, category, stock, purchase, sale, expiry) in enumerate(_CATALOG, start=1):
        products.append(Product(
            id=f"prod-{index:03d}",
            name=name,
            category=category,
            stock=stock,
            purchase_price=purchase,
            sale_price=sale,
            image_url=DEFAULT_IMAGE_URL,
            expiry_date=parse_date(expiry),
        ).to_dict())
    return products


def demo_users() -> List[Dict[str, Any]]:
    """Directorio inicial; user-admin es el administrador protegido."""
    return [
        User('user-admin', 'Diana', 'diana@admin.com', 'Admin', 'Zaru2025').to_dict(),
        User('user-001', 'Donato', 'donato@gmail.com', 'Empleado', '123').to_dict(),
        User('user-002', 'Alex', 'alex@vetstock.com', 'Empleado', '123').to_dict(),
        User('user-003', 'Maria', 'maria@vetstock.com', 'Empleado', '123').to_dict(),
        User('user-004', 'Jane', 'jane@vetstock.com', 'Empleado', '123').to_dict(),
    ]


def demo_bank_accounts() -> List[Dict[str, Any]]:
    return [
        BankAccount(
            id='acc-001',
            bank_name='Banco de Crédito del Perú (BCP)',
            account_holder='El Amigo E.I.R.L.',
            account_number='123-4567890-1-23',
            cci='00212300456789012398',
        ).to_dict(),
        BankAccount(
            id='acc-002',
            bank_name='Interbank',
            account_holder='El Amigo E.I.R.L.',
            account_number='098-7654321000',
            cci='00309801076543210051',
        ).to_dict(),
    ]
