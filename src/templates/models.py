from typing import List

from pydantic import BaseModel, Field

from src.templates.engine import extract_variables


class Template(BaseModel):
    """
    A stored title + body pair. The body may contain {{name}} placeholders.
    Timestamps are Unix epoch milliseconds.
    """

    template_id: str = Field(..., min_length=1, description="Opaque identifier, fixed at creation")
    title: str = Field(..., min_length=1, description="Display title")
    body: str = Field("", description="Text with zero or more placeholders")
    created_at: int = Field(..., ge=0)
    updated_at: int = Field(..., ge=0)

    @property
    def variables(self) -> List[str]:
        return extract_variables(self.body)
