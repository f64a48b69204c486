"""Shared utility functions."""
import os
from pathlib import Path
from typing import Optional


def get_project_root() -> Path:
    """
    Get the package root directory.

    Returns:
        Path to the lineage_core package
    """
    return Path(__file__).parent


def get_metamodel_path(filename: str = None) -> Path:
    """
    Get path to metamodel config directory or file.

    Args:
        filename: Optional metamodel filename

    Returns:
        Path to metamodel directory or specific metamodel file
    """
    metamodel_dir = get_project_root() / "metamodel"
    if filename:
        return metamodel_dir / filename
    return metamodel_dir


def _optional_int(value: Optional[str]) -> Optional[int]:
    """Parse a budget from the environment; empty, '0' or 'none' means unbounded."""
    if value is None or value.strip().lower() in ("", "0", "none"):
        return None
    return int(value)


class Config:
    """Configuration constants."""

    # Neo4j
    NEO4J_URI = os.getenv("NEO4J_URI", "bolt://localhost:7687")
    NEO4J_USER = os.getenv("NEO4J_USER", "neo4j")
    NEO4J_PASSWORD = os.getenv("NEO4J_PASSWORD", "password")

    # Views
    VIEWS_PATH = os.getenv("LINEAGE_VIEWS_PATH", str(get_metamodel_path("views.yaml")))
    DEFAULT_VIEW = os.getenv("LINEAGE_DEFAULT_VIEW", "column-view")

    # Per-query traversal budget
    MAX_NODES = _optional_int(os.getenv("LINEAGE_MAX_NODES", "10000"))
    MAX_EDGES = _optional_int(os.getenv("LINEAGE_MAX_EDGES", "50000"))

    # Logging
    LOG_LEVEL = os.getenv("LINEAGE_LOG_LEVEL", "INFO")
