from . import accounts, admin, serve


__all__ = ["accounts", "admin", "serve"]
