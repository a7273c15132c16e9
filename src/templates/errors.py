class TemplateError(Exception):
    """Base class for template library failures surfaced to the user."""


class TemplateValidationError(TemplateError, ValueError):
    pass


class TemplateNotFoundError(TemplateError, KeyError):
    def __init__(self, template_id: str):
        super().__init__(template_id)
        self.template_id = template_id

    def __str__(self) -> str:
        return f"Template not found: {self.template_id}"
