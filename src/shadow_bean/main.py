from __future__ import annotations

import uvicorn

from shadow_bean.settings import load_settings


def main() -> None:
    settings = load_settings()
    uvicorn.run(
        "shadow_bean.bootstrap:create_asgi_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
