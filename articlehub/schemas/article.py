"""Article Schemas — create/update payloads.

Invariants:
    - title: 3-255 chars after stripping; content: >= 10 chars after stripping
    - ArticleUpdate fields optional; at least one must be set (checked by service)
"""

from pydantic import BaseModel, ConfigDict, Field


class ArticleCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=3, max_length=255)
    content: str = Field(min_length=10)


class ArticleUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=3, max_length=255)
    content: str | None = Field(None, min_length=10)
