"""Services Layer — imperative shell around the pure core.

Invariants:
    - Services own transactions: every mutation commits or rolls back before returning
    - Domain failures are raised as ArticleHubError subclasses, never HTTPException
    - Reaction writes go through ReactionService -> ReactionStore, never straight to the ORM

Design Decisions:
    - One service per resource for locality; routes construct them per request
"""
