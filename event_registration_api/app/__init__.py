"""
Application package initializer.

The code is organised into layers: ``api`` (versioned FastAPI
routers), ``services`` (business rules), ``core`` (configuration,
security, errors and storage), ``models`` (stored records) and
``schemas`` (API payloads).
"""

from .main import app, create_app  # noqa: F401
