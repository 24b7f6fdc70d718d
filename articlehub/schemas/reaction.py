"""Reaction Schemas — the body of a place-reaction request."""

from pydantic import BaseModel, Field

from articlehub.core.domain_types import MAX_ID


class ReactionRequest(BaseModel):
    reaction_id: int = Field(gt=0, le=MAX_ID)
