from feedcrawler.api.routes.crawler import router as crawler_router
from feedcrawler.api.routes.health import router as health_router
from feedcrawler.api.routes.messages import router as messages_router
from feedcrawler.api.routes.scheduler import router as scheduler_router

__all__ = ["crawler_router", "health_router", "messages_router", "scheduler_router"]
