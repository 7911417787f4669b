"""
Nettoria storefront core.

- cart: duration-tiered pricing, cart state and its persistence
- routers: FastAPI endpoints for the storefront pages
- services: money helpers
"""
