"""
Reports Module

Reportes de solo lectura sobre ventas y productos del tenant activo.
No crea tablas propias.

- routers/ -> endpoints FastAPI
- services/ -> agregaciones sobre el almacén de registros
- schemas/ -> modelos Pydantic de respuesta
- utils/ -> exportación CSV
"""
