from .service import SocialGraphService
from .contracts import GraphStorePort, FollowResult
from .routes import router as graph_router, get_graph_service

__all__ = ["SocialGraphService", "GraphStorePort", "FollowResult", "graph_router", "get_graph_service"]
