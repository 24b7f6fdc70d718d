"""Infrastructure Layer — database pool, credentials, file storage and cross-cutting concerns.

Invariants:
    - Infrastructure never imports core/ decision logic (errors and types only)
    - External failures are mapped to ArticleHubError subclasses before leaving this layer
"""
