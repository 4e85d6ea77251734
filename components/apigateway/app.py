from __future__ import annotations
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from components.authservice.routes import router as auth_router
from components.authservice.service import AuthService
from components.credentialstore.adapters.sql import SqlCredentialStore, create_store_engine, init_schema
from components.credentialstore.ports import CredentialStorePort
from components.feedservice.routes import router as feed_router
from components.feedservice.service import FeedService
from components.socialgraph.routes import router as graph_router
from components.socialgraph.service import SocialGraphService

from .errors import install_error_handlers
from .observability import RequestContextMiddleware, configure_logging
from .routers import public
from .settings import APP_NAME, GatewaySettings

API_PREFIX = "/api/v1"


def build_store(settings: GatewaySettings) -> CredentialStorePort:
    engine = create_store_engine(settings.database_url)
    init_schema(engine)
    return SqlCredentialStore(engine)


def create_app(
    settings: Optional[GatewaySettings] = None,
    store: Optional[CredentialStorePort] = None,
    auth_service: Optional[AuthService] = None,
) -> FastAPI:
    settings = settings or GatewaySettings()
    configure_logging(settings.log_level)
    store = store or build_store(settings)

    app = FastAPI(title=APP_NAME, version=settings.app_version)
    app.state.settings = settings
    app.state.auth_service = auth_service or AuthService(users=store, cfg=settings.auth_config())
    app.state.graph_service = SocialGraphService(store)
    app.state.feed_service = FeedService(store)

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["x-request-id", "x-trace-id"],
    )
    install_error_handlers(app)

    # Routers
    app.include_router(public.router)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(graph_router, prefix=API_PREFIX)
    app.include_router(feed_router, prefix=API_PREFIX)

    return app
