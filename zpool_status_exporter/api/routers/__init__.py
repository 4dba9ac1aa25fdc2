from . import metrics_router

__all__ = ["metrics_router"]
