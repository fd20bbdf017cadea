"""
Entry point for the search-path planner service.

Running this script with ``python run.py`` will start the FastAPI
server that exposes the planning API.  The application defined in
``backend/searchpath/main.py`` is imported after adjusting the Python
path to include the ``backend`` directory.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import logging
import uvicorn

logging.basicConfig(
    level=logging.DEBUG if os.getenv("SEARCHPATH_DEBUG") else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main() -> None:
    """Run the Uvicorn server hosting the planner API."""
    # Make ``searchpath`` importable when running from a source checkout.
    backend_dir = Path(__file__).resolve().parent / "backend"
    if str(backend_dir) not in sys.path:
        sys.path.append(str(backend_dir))

    # Import inside main() to avoid modifying sys.path at module import time.
    from searchpath.main import app  # type: ignore

    host = os.getenv("SEARCHPATH_HOST", "0.0.0.0")
    port = int(os.getenv("SEARCHPATH_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
