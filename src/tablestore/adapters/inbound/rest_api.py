"""REST API adapter for the table store.

This module provides a FastAPI-based REST API over a RecordStorePort.

Endpoints:
    GET /                          - Health check
    GET /health                    - Health check
    GET /statistics                - Table count and uptime
    GET /tables                    - List table names
    POST /tables                   - Create a table
    GET /tables/{name}             - Describe a table
    DELETE /tables/{name}          - Delete a table
    POST /tables/{name}/rows       - Insert a row
    GET /tables/{name}/rows        - List rows

Errors:
    Store failures become ``{"error": "<message>"}`` with status
    409 (table exists), 404 (table not found), 400 (row validation)
    or 500 (persistence, poisoned lock).

Usage:
    from tablestore.adapters.inbound.rest_api import create_app
    from tablestore.infrastructure.container import Container

    app = create_app(Container.create().store)
    # Run with uvicorn: uvicorn app:app --host 127.0.0.1 --port 8080
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from tablestore import __version__
from tablestore.domain.entities import Column, TableDescriptor
from tablestore.domain.errors import (
    LockUnusableError,
    PersistenceError,
    RowValidationError,
    TableExistsError,
    TableNotFoundError,
    TableStoreError,
)
from tablestore.domain.value_objects import ColumnKind
from tablestore.infrastructure.logging import get_logger
from tablestore.ports.inbound import RecordStorePort

logger = get_logger(__name__)


class ColumnModel(BaseModel):
    """A column on the wire."""

    name: str = Field(..., description="Column name")
    column_type: ColumnKind = Field(..., description="String, Integer, Float, Boolean or Object")


class CreateTableRequest(BaseModel):
    """Request model for table creation."""

    name: str = Field(..., description="Table name (case-sensitive, may be empty)")
    columns: list[ColumnModel] = Field(..., description="Schema in declaration order")


class InsertRowRequest(BaseModel):
    """Request model for row insertion."""

    row: dict[str, Any] = Field(..., description="Column name -> value")


class TableResponse(BaseModel):
    """Response model for a table description."""

    id: str = Field(..., description="Table identifier")
    name: str = Field(..., description="Table name")
    columns: list[ColumnModel] = Field(..., description="Schema")
    rows: int = Field(..., description="Number of rows")


class TableListResponse(BaseModel):
    """Response model for the table list."""

    tables: list[str] = Field(..., description="Table names")


class RowInsertResponse(BaseModel):
    """Response model for row insertion."""

    table: str
    row_inserted: bool
    rows_count: int


class RowsResponse(BaseModel):
    """Response model for listing rows."""

    table: str
    rows: list[dict[str, Any]]
    count: int


class DeleteResponse(BaseModel):
    """Response model for table deletion."""

    deleted: bool
    table: str


class StatsResponse(BaseModel):
    """Response model for store statistics."""

    tables: int = Field(..., description="Number of tables")
    uptime_ms: int = Field(..., description="Milliseconds since the store started")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")


class ErrorResponse(BaseModel):
    """Error body for every store failure."""

    error: str


# Checked in order; subclasses before their bases
_ERROR_STATUS: tuple[tuple[type[TableStoreError], int], ...] = (
    (TableExistsError, status.HTTP_409_CONFLICT),
    (TableNotFoundError, status.HTTP_404_NOT_FOUND),
    (RowValidationError, status.HTTP_400_BAD_REQUEST),
    (PersistenceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (LockUnusableError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(error: TableStoreError) -> int:
    """HTTP status for a store failure."""
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _table_response(descriptor: TableDescriptor) -> TableResponse:
    return TableResponse(
        id=descriptor.id,
        name=descriptor.name,
        columns=[ColumnModel(name=c.name, column_type=c.kind) for c in descriptor.columns],
        rows=descriptor.row_count,
    )


def create_app(store: RecordStorePort) -> FastAPI:
    """Create a FastAPI application for the table store.

    Handlers are plain ``def`` functions: the store blocks on its lock
    and on snapshot writes, so FastAPI runs them in its threadpool.

    Args:
        store: The record store to expose.

    Returns:
        A configured FastAPI application.
    """
    app = FastAPI(
        title="Table Store API",
        description="Schema-validated tabular record store",
        version=__version__,
    )

    @app.exception_handler(TableStoreError)
    async def table_store_error_handler(request: Request, exc: TableStoreError) -> JSONResponse:
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                code=exc.code,
                error=str(exc),
            )
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=str(exc)).model_dump(),
        )

    @app.get("/", response_model=HealthResponse, tags=["Health"])
    def root() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok")

    @app.get("/statistics", response_model=StatsResponse, tags=["Stats"])
    def statistics() -> StatsResponse:
        """Table count and uptime."""
        stats = store.stats()
        return StatsResponse(tables=stats.table_count, uptime_ms=stats.uptime_ms)

    @app.get("/tables", response_model=TableListResponse, tags=["Tables"])
    def list_tables() -> TableListResponse:
        """List table names."""
        return TableListResponse(tables=store.list_tables())

    @app.post(
        "/tables",
        response_model=TableResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["Tables"],
    )
    def create_table(request: CreateTableRequest) -> TableResponse:
        """Create a table with a fixed schema."""
        columns = [Column(c.name, c.column_type) for c in request.columns]
        return _table_response(store.create_table(request.name, columns))

    @app.get("/tables/{table_name}", response_model=TableResponse, tags=["Tables"])
    def get_table(table_name: str) -> TableResponse:
        """Describe a table."""
        return _table_response(store.get_table(table_name))

    @app.delete("/tables/{table_name}", response_model=DeleteResponse, tags=["Tables"])
    def delete_table(table_name: str) -> DeleteResponse:
        """Delete a table and its rows."""
        deleted = store.delete_table(table_name)
        return DeleteResponse(deleted=deleted, table=table_name)

    @app.post("/tables/{table_name}/rows", response_model=RowInsertResponse, tags=["Rows"])
    def insert_row(table_name: str, request: InsertRowRequest) -> RowInsertResponse:
        """Insert a row; every declared column is required."""
        count = store.insert_row(table_name, request.row)
        return RowInsertResponse(table=table_name, row_inserted=True, rows_count=count)

    @app.get("/tables/{table_name}/rows", response_model=RowsResponse, tags=["Rows"])
    def list_rows(table_name: str) -> RowsResponse:
        """List every row of a table."""
        result = store.list_rows(table_name)
        return RowsResponse(table=result.table, rows=result.rows, count=result.count)

    return app


def run_server(
    store: RecordStorePort,
    host: str = "127.0.0.1",
    port: int = 8080,
) -> None:
    """Run the REST API server.

    Args:
        store: The record store.
        host: Host to bind to.
        port: Port to bind to.
    """
    import uvicorn

    app = create_app(store)
    uvicorn.run(app, host=host, port=port, log_config=None)
