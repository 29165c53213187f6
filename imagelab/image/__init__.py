"""Hosted-model image adapter package.

Scope:
    Provider configuration, the HTTP transport to the multimodal model, and the
    gateway that turns one image plus one instruction into one result image.

Non-goals:
    - No local image processing of any kind.
    - No retries, caching or rate limiting.
"""
