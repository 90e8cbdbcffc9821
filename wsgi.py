# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/           <- Directorio de trabajo (en sys.path automáticamente)
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── vetstock/        <- Paquete Python
#       ├── main.py
#       ├── services/
#       └── repositories/
#
# Variables de entorno útiles:
#   VETSTOCK_ENV=production|development
#   VETSTOCK_DATA_BACKEND=json  (persistir en VETSTOCK_DATA_DIR)
#   OPENAI_API_KEY=...          (sugerencias de pedido)
# ==============================================================================

from vetstock.main import create_app

app = create_app()

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
