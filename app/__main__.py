"""
Run the API with uvicorn: ``python -m app``.
"""

from __future__ import annotations

import uvicorn

from app.config import get_app_settings


def main() -> None:
    settings = get_app_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
