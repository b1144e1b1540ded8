from __future__ import annotations

import uvicorn

from agrilink.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "agrilink.asgi:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
