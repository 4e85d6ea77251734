from .service import FeedService
from .contracts import FeedStorePort, CreatePostRequest
from .routes import router as feed_router, get_feed_service

__all__ = ["FeedService", "FeedStorePort", "CreatePostRequest", "feed_router", "get_feed_service"]
