# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio de la tienda veterinaria.
# Diseñadas para ser independientes del mecanismo de persistencia:
# los repositorios guardan diccionarios (to_dict) y los servicios los
# reconstruyen con from_dict cuando necesitan lógica de entidad.
# ==============================================================================

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum


DEFAULT_IMAGE_URL = 'https://placehold.co/100x100.png'

# Umbral de "Bajo Stock" usado en inventario, exportación y panel
LOW_STOCK_THRESHOLD = 5


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class ProductCategory(str, Enum):
    """Categorías fijas del catálogo."""
    DESINFECTANTES = "Desinfectantes"
    PROBIOTICOS = "Probióticos"
    ANTIPARASITARIOS = "Antiparasitarios"
    ACCESORIOS = "Accesorios para mascotas"
    FERTILIZANTES = "Fertilizantes"
    VITAMINAS = "Vitaminas"
    MEDICAMENTOS = "Medicamentos"
    EQUIPOS = "Equipos"


class OrderStatus(str, Enum):
    """Estados de un pedido de compra."""
    PENDIENTE = "Pendiente"
    COMPLETADO = "Completado"
    CANCELADO = "Cancelado"  # Declarado, ninguna operación lo produce


# Transiciones permitidas. Completado y Cancelado son terminales.
ORDER_TRANSITIONS = {
    OrderStatus.PENDIENTE: frozenset([OrderStatus.COMPLETADO]),
    OrderStatus.COMPLETADO: frozenset(),
    OrderStatus.CANCELADO: frozenset(),
}


class UserRole(str, Enum):
    """Roles de usuario disponibles en el sistema."""
    ADMIN = "Admin"
    EMPLEADO = "Empleado"


class EventType(str, Enum):
    """Tipos de evento del calendario."""
    PEDIDO = "pedido"
    CITA = "cita"
    EVENTO = "evento"


class PaymentMethod(str, Enum):
    """Métodos de pago aceptados en caja."""
    EFECTIVO = "efectivo"
    TRANSFERENCIA = "transferencia"
    YAPE = "yape"
    PLIN = "plin"


PAYMENT_METHOD_NAMES = {
    PaymentMethod.EFECTIVO.value: "Efectivo",
    PaymentMethod.TRANSFERENCIA.value: "Transferencia Bancaria",
    PaymentMethod.YAPE.value: "Yape",
    PaymentMethod.PLIN.value: "Plin",
}


def payment_method_name(method: str) -> str:
    """Nombre legible de un método de pago (o el mismo valor si es desconocido)."""
    return PAYMENT_METHOD_NAMES.get(method, method)


# ==============================================================================
# ENTIDADES DE CATÁLOGO
# ==============================================================================

@dataclass
class Product:
    """
    Producto del catálogo.

    Attributes:
        id: Identificador único (prod-NNN)
        name: Nombre del producto
        category: Una de las categorías de ProductCategory
        stock: Unidades disponibles (entero >= 0)
        purchase_price: Precio de compra unitario
        sale_price: Precio de venta unitario
        image_url: URL de la imagen
        sales_history: Mapa fecha -> unidades vendidas
        barcode: Código de barras (opcional)
        expiry_date: Fecha de vencimiento YYYY-MM-DD (opcional)
    """
    id: str
    name: str
    category: str
    stock: int = 0
    purchase_price: float = 0.0
    sale_price: float = 0.0
    image_url: str = DEFAULT_IMAGE_URL
    sales_history: Dict[str, int] = field(default_factory=dict)
    barcode: Optional[str] = None
    expiry_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'id': self.id,
            'barcode': self.barcode,
            'name': self.name,
            'category': self.category.value if isinstance(self.category, Enum) else self.category,
            'stock': self.stock,
            'purchase_price': self.purchase_price,
            'sale_price': self.sale_price,
            'image_url': self.image_url,
            'sales_history': dict(self.sales_history),
            'expiry_date': self.expiry_date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        """Crea instancia desde diccionario."""
        return cls(
            id=data.get('id', ''),
            name=data.get('name', ''),
            category=data.get('category', ''),
            stock=data.get('stock', 0),
            purchase_price=data.get('purchase_price', 0.0),
            sale_price=data.get('sale_price', 0.0),
            image_url=data.get('image_url') or DEFAULT_IMAGE_URL,
            sales_history=data.get('sales_history') or {},
            barcode=data.get('barcode'),
            expiry_date=data.get('expiry_date'),
        )


# ==============================================================================
# ENTIDADES DE VENTA
# ==============================================================================

@dataclass
class Sale:
    """
    Venta registrada (una por línea de carrito, no por unidad).

    product_name y product_image son una foto del producto al momento
    de la venta; no se actualizan si el catálogo cambia después.
    """
    id: str
    product_id: str
    product_name: str
    product_image: str
    quantity: int
    total_price: float
    date: str
    employee: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'product_id': self.product_id,
            'product_name': self.product_name,
            'product_image': self.product_image,
            'quantity': self.quantity,
            'total_price': self.total_price,
            'date': self.date,
            'employee': self.employee,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Sale':
        return cls(
            id=data.get('id', ''),
            product_id=data.get('product_id', ''),
            product_name=data.get('product_name', ''),
            product_image=data.get('product_image', DEFAULT_IMAGE_URL),
            quantity=data.get('quantity', 0),
            total_price=data.get('total_price', 0.0),
            date=data.get('date', ''),
            employee=data.get('employee', ''),
        )


@dataclass
class CartLine:
    """
    Línea del carrito de caja (vive en la sesión).

    Attributes:
        id: Identificador de la línea
        product_id: Producto seleccionado ('' si aún no se eligió)
        name: Nombre del producto
        quantity: Cantidad (entre 1 y stock)
        price: Precio de venta unitario
        stock: Stock del producto al momento de seleccionarlo
    """
    id: str
    product_id: str = ''
    name: str = ''
    quantity: int = 1
    price: float = 0.0
    stock: int = 0

    @property
    def subtotal(self) -> float:
        return round(self.price * self.quantity, 2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'product_id': self.product_id,
            'name': self.name,
            'quantity': self.quantity,
            'price': self.price,
            'stock': self.stock,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CartLine':
        return cls(
            id=data.get('id', ''),
            product_id=data.get('product_id', ''),
            name=data.get('name', ''),
            quantity=data.get('quantity', 1),
            price=data.get('price', 0.0),
            stock=data.get('stock', 0),
        )


# ==============================================================================
# ENTIDADES DE PEDIDOS
# ==============================================================================

@dataclass
class OrderItem:
    """
    Ítem de un pedido. name y purchase_price se copian del catálogo
    al crear el pedido; purchase_price se reemplaza al completarlo.
    """
    product_id: str
    name: str
    quantity: int
    purchase_price: float = 0.0

    @property
    def subtotal(self) -> float:
        return round(self.purchase_price * self.quantity, 2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product_id': self.product_id,
            'name': self.name,
            'quantity': self.quantity,
            'purchase_price': self.purchase_price,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderItem':
        return cls(
            product_id=data.get('product_id', ''),
            name=data.get('name', ''),
            quantity=data.get('quantity', 0),
            purchase_price=data.get('purchase_price', 0.0),
        )


@dataclass
class Order:
    """
    Pedido de compra a un proveedor.

    Attributes:
        id: Identificador (ord-NNN)
        date: Timestamp ISO de creación
        status: Pendiente, Completado o Cancelado
        items: Ítems pedidos
        supplier: Proveedor (opcional)
    """
    id: str
    date: str
    status: str = OrderStatus.PENDIENTE.value
    items: List[OrderItem] = field(default_factory=list)
    supplier: Optional[str] = None

    @property
    def total(self) -> float:
        return round(sum(item.purchase_price * item.quantity for item in self.items), 2)

    def can_transition_to(self, new_status: str) -> bool:
        """Verifica si el cambio de estado está permitido."""
        try:
            current = OrderStatus(self.status)
            target = OrderStatus(new_status)
        except ValueError:
            return False
        return target in ORDER_TRANSITIONS[current]

    def get_item(self, product_id: str) -> Optional[OrderItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'date': self.date,
            'status': self.status.value if isinstance(self.status, Enum) else self.status,
            'supplier': self.supplier,
            'items': [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        return cls(
            id=data.get('id', ''),
            date=data.get('date', ''),
            status=data.get('status', OrderStatus.PENDIENTE.value),
            items=[OrderItem.from_dict(i) for i in data.get('items', [])],
            supplier=data.get('supplier'),
        )


# ==============================================================================
# ENTIDADES DE USUARIO
# ==============================================================================

@dataclass
class User:
    """
    Usuario del sistema.

    Attributes:
        id: Identificador (user-NNN, o user-admin para el admin por defecto)
        name: Nombre visible (también usado como "empleado" en ventas)
        email: Correo, único sin distinguir mayúsculas
        role: Admin o Empleado
        password: Credencial tal como la guarda el verificador configurado
    """
    id: str
    name: str
    email: str
    role: str = UserRole.EMPLEADO.value
    password: str = ''

    def to_public_dict(self) -> Dict[str, Any]:
        """Datos seguros para mostrar (sin contraseña)."""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role.value if isinstance(self.role, Enum) else self.role,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        data = self.to_public_dict()
        data['password'] = self.password
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(
            id=data.get('id', ''),
            name=data.get('name', ''),
            email=data.get('email', ''),
            role=data.get('role', UserRole.EMPLEADO.value),
            password=data.get('password', ''),
        )


# ==============================================================================
# CUENTAS BANCARIAS Y CALENDARIO
# ==============================================================================

@dataclass
class BankAccount:
    """Cuenta bancaria mostrada en el pago por transferencia."""
    id: str
    bank_name: str
    account_holder: str
    account_number: str
    cci: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'bank_name': self.bank_name,
            'account_holder': self.account_holder,
            'account_number': self.account_number,
            'cci': self.cci,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BankAccount':
        return cls(
            id=data.get('id', ''),
            bank_name=data.get('bank_name', ''),
            account_holder=data.get('account_holder', ''),
            account_number=data.get('account_number', ''),
            cci=data.get('cci') or '',
        )


@dataclass
class CalendarEvent:
    """Evento del calendario (pedido, cita o evento)."""
    id: str
    date: str
    title: str
    description: str
    type: str = EventType.EVENTO.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'date': self.date,
            'title': self.title,
            'description': self.description,
            'type': self.type.value if isinstance(self.type, Enum) else self.type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CalendarEvent':
        return cls(
            id=data.get('id', ''),
            date=data.get('date', ''),
            title=data.get('title', ''),
            description=data.get('description', ''),
            type=data.get('type', EventType.EVENTO.value),
        )
