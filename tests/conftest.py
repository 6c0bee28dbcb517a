"""Put src/ on the import path so the measurement package resolves without installation."""

import sys
from pathlib import Path


def pytest_configure() -> None:
    """Add the src directory to sys.path."""
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))
