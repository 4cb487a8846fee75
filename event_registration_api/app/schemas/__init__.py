"""
Pydantic schema definitions for API payloads.

Schemas are separated from the ``models`` dataclasses to decouple the
API representation from the stored records.
"""
