"""Identifiers for the table store domain."""

from __future__ import annotations

import uuid
from typing import NewType

TableId = NewType("TableId", str)
"""Globally unique table identifier (UUID4 string). Never changes after creation."""


def new_table_id() -> TableId:
    """Generate a fresh table identifier."""
    return TableId(str(uuid.uuid4()))
