"""
Async task management record service.

Layers (leaf first): database + models, repositories (record store), mappers,
services (business rules), api (FastAPI routers and error translation).
"""
