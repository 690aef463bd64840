from .tag_service import TagService

__all__ = ["TagService"]
