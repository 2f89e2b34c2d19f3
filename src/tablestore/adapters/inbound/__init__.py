"""Inbound adapters for the table store.

Inbound adapters handle incoming requests and convert them to
record store operations.

Exports:
    REST API:
        - create_app: Create a FastAPI application
        - run_server: Run the REST API server
        - status_for: HTTP status for a store failure
"""

from tablestore.adapters.inbound.rest_api import create_app, run_server, status_for

__all__ = [
    "create_app",
    "run_server",
    "status_for",
]
