from .db_init import db_init_loader


__all__ = [
    "db_init_loader",
]
