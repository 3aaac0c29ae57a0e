from . import mentorship_router

__all__ = [
    "mentorship_router",
]
