# backend_api/__init__.py
