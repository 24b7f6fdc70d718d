"""Comment Schemas — create/update share the same rule: 1-1000 chars, not blank."""

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    content: str = Field(min_length=1, max_length=1000)


class CommentUpdate(CommentCreate):
    pass
