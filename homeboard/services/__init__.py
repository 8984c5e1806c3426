from homeboard.services import user_service


__all__ = [
    "user_service",
]
