from __future__ import annotations

from typing import List, Optional, Protocol

from src.templates.models import Template


class TemplateStore(Protocol):
    """Storage abstraction for templates."""

    def list_templates(self, *, order_by: str = "created_at", descending: bool = False) -> List[Template]:
        """
        Returns every stored template ordered by one of:
          created_at | updated_at | title
        """
        ...

    def get_template(self, template_id: str) -> Optional[Template]:
        ...

    def upsert_template(self, template: Template) -> None:
        """Insert, or replace the row with the same template_id."""
        ...

    def delete_template(self, template_id: str) -> bool:
        """True when a row was removed."""
        ...

    def count_templates(self) -> int:
        ...
