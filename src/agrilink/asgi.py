from __future__ import annotations

from agrilink.adapters.inbound.web.fastapi_app import create_app
from agrilink.bootstrap import build_usecases, configure_logging
from agrilink.config import get_settings

configure_logging(get_settings())
app = create_app(build_usecases())
