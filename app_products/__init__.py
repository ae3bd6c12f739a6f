# -*- coding: utf-8 -*-
"""Paquete principal del microservicio Products.

Incluye:
- Persistencia (SQLAlchemy async sobre SQLite)
- Catálogo de productos con borrado lógico (available=False)
- Integración con RabbitMQ (patrones de mensaje estilo RPC)
- Front HTTP mínimo (FastAPI) sobre el mismo catálogo
"""
