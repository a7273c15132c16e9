from typing import List, Literal

from pydantic import BaseModel, Field

NotificationLevel = Literal["success", "error", "info"]


class Notification(BaseModel):
    """Transient message shown to the user; never aborts application state."""

    message: str
    level: NotificationLevel = "info"
    duration_ms: int = Field(3000, ge=0)


class GenerationResult(BaseModel):
    text: str = Field(..., description="Template body with every placeholder substituted")
    variables: List[str] = Field(
        default_factory=list,
        description="Placeholder names found in the body, first-occurrence order",
    )
    copied: bool = False
    notification: Notification
