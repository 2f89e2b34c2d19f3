"""Run the table store server: ``python -m tablestore``.

Configuration comes from ``TABLESTORE_*`` environment variables, e.g.
``TABLESTORE_STORAGE__SNAPSHOT_PATH=/var/lib/tablestore/db.json``.
"""

from __future__ import annotations

from tablestore.adapters.inbound.rest_api import run_server
from tablestore.infrastructure.container import Container


def main() -> None:
    """Build the container and serve the REST API until interrupted."""
    container = Container.create()
    server = container.config.server

    container.logger.info("server_starting", host=server.host, port=server.port)
    run_server(container.store, host=server.host, port=server.port)


if __name__ == "__main__":
    main()
