"""Upload preprocessing package for API adapters.

Architectural role:
- Converts image files and uploaded bytes into validated `ImagePayload`s.
- Applies upload type and size constraints before any operation runs.

Scope:
- Preprocessing only; no endpoint definitions.
"""
