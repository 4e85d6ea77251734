"""
Process entry point.

  uvicorn components.apigateway.asgi:app
  social-core-api                      # console script, binds SOCIAL_HOST:SOCIAL_PORT
"""
from __future__ import annotations

import uvicorn

from .app import create_app
from .settings import GatewaySettings

settings = GatewaySettings()
app = create_app(settings)


def main() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
