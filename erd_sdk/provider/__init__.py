from .proxy import Provider, ProxyProvider, parse_raw_transaction

__all__ = ["Provider", "ProxyProvider", "parse_raw_transaction"]
