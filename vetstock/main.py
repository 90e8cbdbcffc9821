# ==============================================================================
# APLICACIÓN FLASK - API JSON
# ==============================================================================
# Las rutas solo orquestan request → service → response.
# Toda la lógica de negocio vive en services/.
#
# Permisos:
#   - login_required: todo excepto /api/login
#   - verify_csrf: toda escritura (POST/PUT/PATCH/DELETE) salvo login y logout
#   - role_required('Admin'): pedidos, estadísticas, usuarios y
#     alta/edición/importación de productos
# ==============================================================================

import hmac
import logging
import uuid
from datetime import datetime, timezone
from functools import wraps
from io import BytesIO

from flask import Blueprint, Flask, current_app, g, request, send_file, session
from werkzeug.exceptions import HTTPException

from .app_container import AppContainer, get_container
from .config import get_config
from .exceptions import VetStockError
from .logging_setup import setup_logging
from .models import UserRole
from .performance_logger import configure as configure_profiling, init_profiling
from .services import FlaskSessionStore
from .services.spreadsheet_service import XLSX_MIMETYPE

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__, url_prefix='/api')


# ═══════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════

def get_services() -> AppContainer:
    """Contenedor de la app actual."""
    return current_app.extensions['vetstock']


def _payload() -> dict:
    return request.get_json(silent=True) or {}


def _result(result: dict, success_status: int = 200):
    """
    Traduce un diccionario de resultado de servicio a respuesta HTTP.

    ok → success_status; errors → 400; protected → 403; not_found → 404;
    unavailable → 503; resto → 400.
    """
    if result.get('ok'):
        return result, success_status
    if 'errors' in result:
        return result, 400
    if result.get('protected'):
        return result, 403
    if result.get('not_found'):
        return result, 404
    if result.get('unavailable'):
        return result, 503
    return result, 400


def _not_found(message: str):
    return {'ok': False, 'error': message}, 404


def _uploaded_file() -> bytes:
    """Contenido del archivo subido (campo 'file' o cuerpo crudo)."""
    upload = request.files.get('file')
    if upload is not None:
        return upload.read()
    return request.get_data()


def _xlsx(content: bytes, filename: str):
    return send_file(
        BytesIO(content),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=filename,
    )


def _flag(name: str) -> bool:
    return (request.args.get(name) or '').lower() in ('1', 'true', 'yes', 'si')


def _today() -> str:
    return datetime.now(timezone.utc).strftime('%Y-%m-%d')


# ═══════════════════════════════════════════════════════════════════════════
# DECORADORES DE ACCESO
# ═══════════════════════════════════════════════════════════════════════════

def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        user = get_services().user_service.get_current_user()
        if user is None:
            return {'ok': False, 'error': 'Debes iniciar sesión.'}, 401
        g.user = user
        return f(*args, **kwargs)
    return wrapper


def role_required(role_name):
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            user = getattr(g, 'user', None)
            if user is None or user['role'] != role_name:
                logger.warning("Permiso denegado: %s en %s",
                               user['id'] if user else 'anónimo', request.path)
                return {'ok': False, 'error': 'Permiso denegado.'}, 403
            return f(*args, **kwargs)
        return wrapper
    return deco


admin_required = role_required(UserRole.ADMIN.value)


CSRF_SESSION_KEY = 'csrf_token'
CSRF_METHODS = ('POST', 'PUT', 'PATCH', 'DELETE')


def generate_csrf_token(rotate: bool = False) -> str:
    if rotate or CSRF_SESSION_KEY not in session:
        session[CSRF_SESSION_KEY] = uuid.uuid4().hex
    return session[CSRF_SESSION_KEY]


def _sent_csrf_token() -> str:
    token = (
        request.form.get('csrf_token') or
        request.headers.get('X-CSRF-Token') or
        request.headers.get('X-CSRFToken')
    )
    if not token and request.is_json:
        token = (request.get_json(silent=True) or {}).get('csrf_token')
    return token if isinstance(token, str) else ''


def verify_csrf(f):
    """
    Exige el token de /api/login en las escrituras.
    Se acepta en el campo de formulario o JSON `csrf_token` o en las
    cabeceras X-CSRF-Token / X-CSRFToken.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        if request.method in CSRF_METHODS and current_app.config.get('CSRF_ENABLED', True):
            expected = session.get(CSRF_SESSION_KEY)
            sent = _sent_csrf_token()
            if not expected or not sent or not hmac.compare_digest(expected, sent):
                logger.warning("CSRF token inválido en %s %s", request.method, request.path)
                return {'ok': False, 'error': 'CSRF token inválido'}, 403
        return f(*args, **kwargs)
    return wrapper


# ═══════════════════════════════════════════════════════════════════════════
# AUTENTICACIÓN
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/login', methods=['POST'])
def login():
    data = _payload()
    user = get_services().user_service.login(data.get('email', ''), data.get('password', ''))
    if user is None:
        return {'ok': False, 'error': 'Credenciales inválidas'}, 401
    return {'ok': True, 'user': user, 'csrf_token': generate_csrf_token(rotate=True)}


@api.route('/logout', methods=['POST'])
def logout():
    get_services().user_service.logout()
    get_services().cart_service.clear_cart()
    session.pop(CSRF_SESSION_KEY, None)
    return {'ok': True}


@api.route('/session', methods=['GET'])
@login_required
def current_session():
    return {'ok': True, 'user': g.user, 'csrf_token': generate_csrf_token()}


# ═══════════════════════════════════════════════════════════════════════════
# CATÁLOGO
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/products', methods=['GET'])
@login_required
def list_products():
    result = get_services().inventory_service.list_products(
        search=request.args.get('search', ''),
        category=request.args.get('category', 'todos'),
        low_stock=_flag('low_stock'),
        page=request.args.get('page', 1, type=int),
    )
    return dict(result, ok=True)


@api.route('/products', methods=['POST'])
@login_required
@verify_csrf
@admin_required
def create_product():
    return _result(get_services().inventory_service.create_product(_payload()), 201)


@api.route('/products/<product_id>', methods=['GET'])
@login_required
def get_product(product_id):
    product = get_services().inventory_service.get_product(product_id)
    if product is None:
        return _not_found('Producto no encontrado')
    return {'ok': True, 'product': product}


@api.route('/products/<product_id>', methods=['PUT'])
@login_required
@verify_csrf
@admin_required
def update_product(product_id):
    return _result(get_services().inventory_service.update_product(product_id, _payload()))


@api.route('/products/import', methods=['POST'])
@login_required
@verify_csrf
@admin_required
def import_products():
    return _result(get_services().inventory_service.bulk_import(_uploaded_file()))


@api.route('/products/export', methods=['GET'])
@login_required
def export_products():
    content = get_services().inventory_service.export_catalog(
        search=request.args.get('search', ''),
        category=request.args.get('category', 'todos'),
        low_stock=_flag('low_stock'),
    )
    return _xlsx(content, 'ElAmigo_Inventario.xlsx')


@api.route('/products/<product_id>/suggestion', methods=['GET'])
@login_required
def suggest_order_quantity(product_id):
    return _result(get_services().suggestion_service.suggest_for_product(product_id))


# ═══════════════════════════════════════════════════════════════════════════
# CARRITO / PUNTO DE VENTA
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/cart', methods=['GET'])
@login_required
def get_cart():
    return dict(get_services().cart_service.get_cart(), ok=True)


@api.route('/cart', methods=['DELETE'])
@login_required
@verify_csrf
def clear_cart():
    get_services().cart_service.clear_cart()
    return {'ok': True}


@api.route('/cart/lines', methods=['POST'])
@login_required
@verify_csrf
def add_cart_line():
    cart = get_services().cart_service
    result = cart.add_line()
    product_id = _payload().get('product_id')
    if product_id:
        result = cart.select_product(result['line']['id'], product_id)
    return _result(result, 201)


@api.route('/cart/lines/<line_id>', methods=['PATCH'])
@login_required
@verify_csrf
def update_cart_line(line_id):
    cart = get_services().cart_service
    data = _payload()
    result = {'ok': True, 'cart': cart.get_cart()}
    if data.get('product_id'):
        result = cart.select_product(line_id, data['product_id'])
        if not result['ok']:
            return _result(result)
    if 'quantity' in data:
        result = cart.update_quantity(line_id, data['quantity'])
    return _result(result)


@api.route('/cart/lines/<line_id>', methods=['DELETE'])
@login_required
@verify_csrf
def remove_cart_line(line_id):
    return _result(get_services().cart_service.remove_line(line_id))


@api.route('/cart/scan', methods=['POST'])
@login_required
@verify_csrf
def scan_barcode():
    return _result(get_services().cart_service.scan_barcode(_payload().get('barcode', '')))


@api.route('/cart/checkout', methods=['POST'])
@login_required
@verify_csrf
def checkout():
    data = _payload()
    result = get_services().cart_service.checkout(
        data.get('employee') or g.user['name'],
        data.get('payment_method', 'efectivo'),
    )
    return _result(result, 201)


# ═══════════════════════════════════════════════════════════════════════════
# VENTAS
# ═══════════════════════════════════════════════════════════════════════════

def _sales_range():
    date_from = request.args.get('from')
    if not date_from:
        return None, None
    return get_services().stats_service.resolve_range(date_from, request.args.get('to'))


@api.route('/sales', methods=['GET'])
@login_required
def list_sales():
    start, end = _sales_range()
    return {'ok': True, 'sales': get_services().sales_service.list_sales(start, end)}


@api.route('/sales/export', methods=['GET'])
@login_required
def export_sales():
    start, end = _sales_range()
    content = get_services().sales_service.export_sales(start, end)
    return _xlsx(content, f'ElAmigo_Ventas_{_today()}.xlsx')


# ═══════════════════════════════════════════════════════════════════════════
# PEDIDOS (solo Admin)
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/orders', methods=['GET'])
@login_required
@admin_required
def list_orders():
    return {'ok': True, 'orders': get_services().order_service.list_orders(request.args.get('status'))}


@api.route('/orders', methods=['POST'])
@login_required
@verify_csrf
@admin_required
def create_order():
    data = _payload()
    result = get_services().order_service.create_order(data.get('items'), data.get('supplier'))
    return _result(result, 201)


@api.route('/orders/export', methods=['GET'])
@login_required
@admin_required
def export_orders():
    return _xlsx(get_services().order_service.export_all_orders(), 'ElAmigo_Todos_Pedidos.xlsx')


@api.route('/orders/<order_id>', methods=['GET'])
@login_required
@admin_required
def get_order(order_id):
    order = get_services().order_service.get_order(order_id)
    if order is None:
        return _not_found('Pedido no encontrado.')
    return {'ok': True, 'order': order}


@api.route('/orders/<order_id>/template', methods=['GET'])
@login_required
@admin_required
def export_order_template(order_id):
    content = get_services().order_service.export_order_template(order_id)
    if content is None:
        return _not_found('Pedido no encontrado.')
    return _xlsx(content, f'ElAmigo_Pedido_{order_id}.xlsx')


@api.route('/orders/<order_id>/import', methods=['POST'])
@login_required
@verify_csrf
@admin_required
def import_order(order_id):
    return _result(get_services().order_service.import_order_prices(order_id, _uploaded_file()))


# ═══════════════════════════════════════════════════════════════════════════
# USUARIOS
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/users', methods=['GET'])
@login_required
@admin_required
def list_users():
    return {'ok': True, 'users': get_services().user_service.list_users()}


@api.route('/users', methods=['POST'])
@login_required
@verify_csrf
@admin_required
def create_user():
    return _result(get_services().user_service.create_user(_payload()), 201)


@api.route('/users/<user_id>', methods=['GET'])
@login_required
@admin_required
def get_user(user_id):
    profile = get_services().user_service.get_profile(user_id)
    if profile is None:
        return _not_found('Usuario no encontrado')
    return {'ok': True, 'user': profile}


@api.route('/users/<user_id>', methods=['PUT'])
@login_required
@verify_csrf
@admin_required
def update_user(user_id):
    return _result(get_services().user_service.update_user(user_id, _payload()))


@api.route('/users/<user_id>', methods=['DELETE'])
@login_required
@verify_csrf
@admin_required
def delete_user(user_id):
    return _result(get_services().user_service.delete_user(user_id))


@api.route('/employees', methods=['GET'])
@login_required
def list_employees():
    return {'ok': True, 'employees': get_services().user_service.list_employees()}


# ═══════════════════════════════════════════════════════════════════════════
# CUENTAS BANCARIAS
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/bank-accounts', methods=['GET'])
@login_required
def list_bank_accounts():
    return {'ok': True, 'accounts': get_services().bank_account_service.list_accounts()}


@api.route('/bank-accounts', methods=['POST'])
@login_required
@verify_csrf
def create_bank_account():
    return _result(get_services().bank_account_service.create_account(_payload()), 201)


@api.route('/bank-accounts/<account_id>', methods=['PUT'])
@login_required
@verify_csrf
def update_bank_account(account_id):
    return _result(get_services().bank_account_service.update_account(account_id, _payload()))


@api.route('/bank-accounts/<account_id>', methods=['DELETE'])
@login_required
@verify_csrf
def delete_bank_account(account_id):
    return _result(get_services().bank_account_service.delete_account(account_id))


# ═══════════════════════════════════════════════════════════════════════════
# CALENDARIO
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/events', methods=['GET'])
@login_required
def list_events():
    calendar = get_services().calendar_service
    day = request.args.get('date')
    events = calendar.events_on(day) if day else calendar.list_events()
    return {'ok': True, 'events': events}


@api.route('/events', methods=['POST'])
@login_required
@verify_csrf
def create_event():
    return _result(get_services().calendar_service.create_event(_payload()), 201)


@api.route('/events/<event_id>', methods=['PUT'])
@login_required
@verify_csrf
def update_event(event_id):
    return _result(get_services().calendar_service.update_event(event_id, _payload()))


@api.route('/events/<event_id>', methods=['DELETE'])
@login_required
@verify_csrf
def delete_event(event_id):
    return _result(get_services().calendar_service.delete_event(event_id))


@api.route('/events/export', methods=['GET'])
@login_required
def export_events():
    return _xlsx(get_services().calendar_service.export_events(), 'ElAmigo_Eventos.xlsx')


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS Y PANEL
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/stats', methods=['GET'])
@login_required
@admin_required
def stats():
    result = get_services().stats_service.get_stats(request.args.get('from'), request.args.get('to'))
    return dict(result, ok=True)


@api.route('/dashboard', methods=['GET'])
@login_required
def dashboard():
    return dict(get_services().stats_service.dashboard(), ok=True)


# ═══════════════════════════════════════════════════════════════════════════
# FÁBRICA DE LA APLICACIÓN
# ═══════════════════════════════════════════════════════════════════════════

def create_app(config_object=None, container: AppContainer = None) -> Flask:
    """
    Crea la aplicación Flask.

    Args:
        config_object: Clase de configuración (por defecto según VETSTOCK_ENV)
        container: Contenedor ya armado (tests); por defecto el global

    Returns:
        Aplicación lista para servir
    """
    config = config_object or get_config()
    setup_logging(config.LOG_LEVEL, config.LOG_TO_FILE, config.LOGS_DIR)

    app = Flask(__name__)
    app.config.from_object(config)

    if config.PRODUCTION_MODE and config.SECRET_KEY.startswith('vetstock_dev_'):
        logger.warning("PRODUCTION_MODE activo sin VETSTOCK_SECRET_KEY definida")

    if container is None:
        container = get_container(config, session_store=FlaskSessionStore())
    app.extensions['vetstock'] = container

    configure_profiling(config.ENABLE_PROFILING, config.PROFILING_WARNING_MS,
                        config.PROFILING_CRITICAL_MS)
    init_profiling(app, config.SESSION_USER_KEY)

    app.register_blueprint(api)

    @app.errorhandler(VetStockError)
    def handle_domain_error(exc):
        logger.warning("Error de dominio no controlado: %s", exc)
        return {'ok': False, 'error': str(exc)}, 400

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return {'ok': False, 'error': exc.description}, exc.code

    logger.info("VetStock iniciado (backend=%s)", config.DATA_BACKEND)
    return app
