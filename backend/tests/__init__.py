"""
pytest suite for the Storefront backend.

Test categories (markers):
- unit: pure logic, no database
- integration: service layer and ORM against in-memory SQLite
- api: full FastAPI app through httpx's ASGI transport
"""
