import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional

from src.templates.engine import extract_variables, substitute_variables
from src.templates.errors import TemplateNotFoundError, TemplateValidationError
from src.templates.fixtures.templates import DEFAULT_TEMPLATES
from src.templates.models import Template
from src.templates.store import TemplateStore
from src.utils.clipboard import ClipboardError, ClipboardSink
from src.utils.ids import new_template_id, now_ms
from src.utils.logging import bind_ecid
from src.workflow.response import GenerationResult, Notification


class TemplateWorkflow:
    """
    UI-facing entry points for the template library.
    Store calls are blocking sqlite3, so they run on a worker thread.
    """

    def __init__(
        self,
        store: TemplateStore,
        logger: logging.Logger,
        clipboard: Optional[ClipboardSink] = None,
        default_templates: Optional[List[Dict[str, Any]]] = None,
        toast_ms: int = 3000,
    ):
        self.store = store
        self.logger = logger
        self.clipboard = clipboard
        self.default_templates = DEFAULT_TEMPLATES if default_templates is None else default_templates
        self.toast_ms = toast_ms

    def _trace(self) -> None:
        bind_ecid()

    def _notify(self, message: str, level: str = "info") -> Notification:
        return Notification(message=message, level=level, duration_ms=self.toast_ms)

    @staticmethod
    def _validate(title: str, body: str) -> Dict[str, str]:
        title = (title or "").strip()
        body = (body or "").strip()
        if not title:
            raise TemplateValidationError("Template title must not be empty.")
        if not body:
            raise TemplateValidationError("Template body must not be empty.")
        return {"title": title, "body": body}

    async def _require(self, template_id: str) -> Template:
        tpl = await asyncio.to_thread(self.store.get_template, template_id)
        if tpl is None:
            raise TemplateNotFoundError(template_id)
        return tpl

    # ------------------------------------------------------------------
    # Library
    # ------------------------------------------------------------------
    async def ensure_seeded(self, force: bool = False) -> int:
        """
        Inserts the default templates into an empty library.
        With `force`, upserts them regardless; an existing row keeps its created_at.
        """
        self._trace()
        count = await asyncio.to_thread(self.store.count_templates)
        if count > 0 and not force:
            self.logger.debug("ensure_seeded: library has %d templates; skipping", count)
            return 0

        now = now_ms()
        for raw in self.default_templates:
            template_id = raw.get("template_id") or new_template_id()
            existing = await asyncio.to_thread(self.store.get_template, template_id)
            tpl = Template(
                template_id=template_id,
                title=raw["title"],
                body=raw["body"],
                created_at=existing.created_at if existing else now,
                updated_at=max(now, existing.updated_at) if existing else now,
            )
            await asyncio.to_thread(self.store.upsert_template, tpl)

        self.logger.info("Seeded %d default templates (force=%s)", len(self.default_templates), force)
        return len(self.default_templates)

    async def list_templates(self) -> List[Template]:
        self._trace()
        templates = await asyncio.to_thread(self.store.list_templates, order_by="created_at", descending=True)
        self.logger.debug("list_templates: %d templates", len(templates))
        return templates

    async def get_template(self, template_id: str) -> Template:
        self._trace()
        return await self._require(template_id)

    async def create_template(self, title: str, body: str) -> Template:
        self._trace()
        fields = self._validate(title, body)
        now = now_ms()
        tpl = Template(template_id=new_template_id(), created_at=now, updated_at=now, **fields)
        await asyncio.to_thread(self.store.upsert_template, tpl)
        self.logger.info("Created template id=%s variables=%s", tpl.template_id, tpl.variables)
        return tpl

    async def update_template(self, template_id: str, title: str, body: str) -> Template:
        self._trace()
        fields = self._validate(title, body)
        current = await self._require(template_id)

        updated = current.model_copy(
            update={
                **fields,
                # clock skew must never move updated_at backwards
                "updated_at": max(now_ms(), current.updated_at),
            }
        )
        await asyncio.to_thread(self.store.upsert_template, updated)
        self.logger.info("Updated template id=%s variables=%s", updated.template_id, updated.variables)
        return updated

    async def duplicate_draft(self, template_id: str) -> Dict[str, str]:
        """Prefill for a new-template form; nothing is persisted until it is saved."""
        self._trace()
        tpl = await self._require(template_id)
        return {"title": tpl.title, "body": tpl.body}

    async def delete_template(self, template_id: str) -> Notification:
        self._trace()
        removed = await asyncio.to_thread(self.store.delete_template, template_id)
        if not removed:
            raise TemplateNotFoundError(template_id)
        self.logger.info("Deleted template id=%s", template_id)
        return self._notify("Template deleted.", "info")

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    async def variables_for(self, template_id: str) -> List[str]:
        self._trace()
        tpl = await self._require(template_id)
        return extract_variables(tpl.body)

    async def generate(self, template_id: str, values: Mapping[str, str]) -> GenerationResult:
        self._trace()
        tpl = await self._require(template_id)

        variables = extract_variables(tpl.body)
        text = substitute_variables(tpl.body, values)

        self.logger.debug(
            "generate: id=%s variables=%s provided=%s output_len=%d",
            template_id,
            variables,
            sorted(values.keys()),
            len(text),
        )

        if self.clipboard is None:
            return GenerationResult(
                text=text,
                variables=variables,
                copied=False,
                notification=self._notify("Text generated.", "info"),
            )

        try:
            confirmed = self.clipboard.copy(text)
        except ClipboardError as e:
            self.logger.warning("Clipboard write failed for template id=%s: %s", template_id, e)
            return GenerationResult(
                text=text,
                variables=variables,
                copied=False,
                notification=self._notify("Copy failed, please try again.", "error"),
            )

        if not confirmed:
            return GenerationResult(
                text=text,
                variables=variables,
                copied=False,
                notification=self._notify("Text generated. Click Copy to put it on the clipboard.", "info"),
            )

        return GenerationResult(
            text=text,
            variables=variables,
            copied=True,
            notification=self._notify("Generated text copied to clipboard.", "success"),
        )
