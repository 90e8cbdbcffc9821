"""
VetStock - Punto de venta e inventario para la tienda veterinaria El Amigo.

Capas:
    models/        Entidades (dataclasses)
    repositories/  Persistencia (memoria o JSON)
    services/      Lógica de negocio
    main.py        API JSON (Flask)
"""

__version__ = '0.1.0'
