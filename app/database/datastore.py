"""
Almacén de registros orientado a tablas.

Expone la misma superficie que un backend-as-a-service: select / insert /
update / delete sobre una tabla, con filtros y orden. Cada llamada es una
unidad independiente que confirma por sí sola; no hay transacciones que
abarquen varias llamadas.

Filtros: diccionario columna -> valor (igualdad) o "columna__op" -> valor
con op en eq, neq, gt, gte, lt, lte, in.
Orden: lista de columnas; prefijo "-" para descendente.
"""
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence
from uuid import UUID
import logging

from sqlalchemy import MetaData, Table, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.common.exceptions import DataStoreError, NoActiveTenant

logger = logging.getLogger(__name__)

Filters = Mapping[str, Any]
Row = Dict[str, Any]

_OPERATORS: Dict[str, Callable] = {
    "eq": lambda column, value: column == value,
    "neq": lambda column, value: column != value,
    "gt": lambda column, value: column > value,
    "gte": lambda column, value: column >= value,
    "lt": lambda column, value: column < value,
    "lte": lambda column, value: column <= value,
    "in": lambda column, value: column.in_(list(value)),
}


class DataStore(Protocol):
    def select(self, table: str, filters: Optional[Filters] = None, order: Optional[Sequence[str]] = None) -> List[Row]: ...

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]: ...

    def update(self, table: str, patch: Mapping[str, Any], filters: Filters) -> int: ...

    def delete(self, table: str, filters: Filters) -> int: ...


class SQLAlchemyDataStore:
    """Data store sobre SQLAlchemy Core; una sesión y un commit por llamada."""

    def __init__(self, session_factory: Callable[[], Session], metadata: Optional[MetaData] = None):
        if metadata is None:
            from app.database.database import Base
            metadata = Base.metadata
        self.session_factory = session_factory
        self.metadata = metadata

    @contextmanager
    def _session(self, operation: str, table: str):
        db = self.session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error en {operation} sobre '{table}': {e}")
            raise DataStoreError(f"Error de base de datos en {operation} '{table}': {e}") from e
        finally:
            db.close()

    def _table(self, name: str) -> Table:
        try:
            return self.metadata.tables[name]
        except KeyError:
            raise DataStoreError(f"Tabla desconocida: {name}")

    def _where(self, table: Table, filters: Optional[Filters]) -> list:
        clauses = []
        for key, value in (filters or {}).items():
            column_name, _, op = key.partition("__")
            op = op or "eq"
            if column_name not in table.c:
                raise DataStoreError(f"Columna desconocida: {table.name}.{column_name}")
            if op not in _OPERATORS:
                raise DataStoreError(f"Operador de filtro no soportado: {op}")
            clauses.append(_OPERATORS[op](table.c[column_name], value))
        return clauses

    def _order_by(self, table: Table, order: Optional[Sequence[str]]) -> list:
        clauses = []
        for key in order or ():
            column_name = key.lstrip("-")
            if column_name not in table.c:
                raise DataStoreError(f"Columna desconocida: {table.name}.{column_name}")
            column = table.c[column_name]
            clauses.append(column.desc() if key.startswith("-") else column.asc())
        return clauses

    def select(self, table: str, filters: Optional[Filters] = None, order: Optional[Sequence[str]] = None) -> List[Row]:
        tbl = self._table(table)
        stmt = select(tbl).where(*self._where(tbl, filters)).order_by(*self._order_by(tbl, order))
        with self._session("select", table) as db:
            return [dict(row) for row in db.execute(stmt).mappings().all()]

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        tbl = self._table(table)
        inserted: List[Row] = []
        with self._session("insert", table) as db:
            for row in rows:
                result = db.execute(insert(tbl).values(**row).returning(*tbl.c))
                inserted.append(dict(result.mappings().one()))
        return inserted

    def update(self, table: str, patch: Mapping[str, Any], filters: Filters) -> int:
        tbl = self._table(table)
        stmt = update(tbl).where(*self._where(tbl, filters)).values(**patch)
        with self._session("update", table) as db:
            return db.execute(stmt).rowcount

    def delete(self, table: str, filters: Filters) -> int:
        tbl = self._table(table)
        stmt = delete(tbl).where(*self._where(tbl, filters))
        with self._session("delete", table) as db:
            return db.execute(stmt).rowcount


class TenantContext:
    """Sesión activa de la papelería; None cuando no hay tenant."""

    def __init__(self, tenant_id: Optional[UUID] = None):
        self._tenant_id = tenant_id

    def current_tenant_id(self) -> Optional[UUID]:
        return self._tenant_id


class TenantScopedStore:
    """
    Envuelve un DataStore y limita cada llamada al tenant activo.

    Añade tenant_id = <activo> a todos los filtros y lo estampa en cada
    fila insertada. Sin tenant activo, cualquier llamada falla con
    NoActiveTenant antes de tocar el almacén.
    """

    def __init__(self, store: DataStore, tenant: TenantContext):
        self.store = store
        self.tenant = tenant

    @property
    def tenant_id(self) -> UUID:
        tenant_id = self.tenant.current_tenant_id()
        if tenant_id is None:
            raise NoActiveTenant()
        return tenant_id

    def _scoped(self, filters: Optional[Filters]) -> Dict[str, Any]:
        return {**(filters or {}), "tenant_id": self.tenant_id}

    def select(self, table: str, filters: Optional[Filters] = None, order: Optional[Sequence[str]] = None) -> List[Row]:
        return self.store.select(table, self._scoped(filters), order)

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        tenant_id = self.tenant_id
        return self.store.insert(table, [{**row, "tenant_id": tenant_id} for row in rows])

    def update(self, table: str, patch: Mapping[str, Any], filters: Filters) -> int:
        patch = {key: value for key, value in patch.items() if key != "tenant_id"}
        return self.store.update(table, patch, self._scoped(filters))

    def delete(self, table: str, filters: Filters) -> int:
        return self.store.delete(table, self._scoped(filters))
