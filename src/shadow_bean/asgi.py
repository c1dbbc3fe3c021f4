from __future__ import annotations

from shadow_bean.bootstrap import create_asgi_app

app = create_asgi_app()
