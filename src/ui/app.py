import asyncio
import sqlite3

import streamlit as st

from src.templates.engine import append_variable, extract_variables, suggest_variables
from src.templates.errors import TemplateError
from src.templates.sqlite_template_store import SQLiteTemplateStore
from src.utils.clipboard import StreamlitClipboard, copy_button_html
from src.utils.config import load_settings
from src.utils.logging import setup_logging
from src.workflow.response import Notification
from src.workflow.workflow import TemplateWorkflow

settings = load_settings()
logger = setup_logging(settings.log_level)

# Avoid repeating this on every Streamlit rerun
if "logger_announced" not in st.session_state:
    logger.info("UI logger is configured (db=%s).", settings.db)
    st.session_state["logger_announced"] = True


# ----------------------------
# Async runner (Streamlit-safe for Python 3.11)
# ----------------------------
def run_async(coro):
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    return loop.run_until_complete(coro)


TOAST_ICONS = {"success": "✅", "error": "⚠️", "info": "ℹ️"}


def notify(n: Notification) -> None:
    st.toast(n.message, icon=TOAST_ICONS.get(n.level), duration=max(1, round(n.duration_ms / 1000)))


def queue_notification(n: Notification) -> None:
    # toasts raised right before st.rerun() would be lost; show them on the next run
    st.session_state["pending_toasts"].append(n)


def guarded(action, *args):
    """Runs a workflow coroutine; failures become an error toast instead of a crash."""
    try:
        return run_async(action(*args))
    except (TemplateError, sqlite3.Error) as e:
        logger.warning("UI action %s failed: %s", getattr(action, "__name__", action), e)
        notify(Notification(message=str(e), level="error", duration_ms=settings.toast_ms))
        return None


def open_form(mode: str, template_id=None, title: str = "", body: str = "") -> None:
    st.session_state["mode"] = mode
    st.session_state["active_id"] = template_id
    st.session_state["form_title"] = title
    st.session_state["form_body"] = body
    st.session_state["last_result"] = None


def close_form() -> None:
    st.session_state["mode"] = "list"
    st.session_state["active_id"] = None
    st.session_state["last_result"] = None


def insert_into_body(name: str) -> None:
    # Streamlit does not expose the text area caret; the end of the body stands in for it.
    # Runs as an on_click callback, before the widgets are rebuilt.
    st.session_state["form_body"] = append_variable(st.session_state["form_body"], name)
    st.session_state["variable_query"] = ""


# ----------------------------
# UI Setup
# ----------------------------
st.set_page_config(page_title="Template Talk", page_icon="📝", layout="wide")
st.title("📝 Template Talk")
st.caption("Manage reusable text templates, fill in variables, and copy the result.")

# Keep workflow instance stable
if "workflow" not in st.session_state:
    st.session_state.workflow = TemplateWorkflow(
        SQLiteTemplateStore(settings.db),
        logger,
        clipboard=StreamlitClipboard(),
        toast_ms=settings.toast_ms,
    )
    if settings.seed_defaults:
        guarded(st.session_state.workflow.ensure_seeded)

workflow: TemplateWorkflow = st.session_state.workflow

for key, default in {
    "mode": "list",  # list | new | edit | generate
    "active_id": None,
    "form_title": "",
    "form_body": "",
    "last_result": None,
    "pending_toasts": [],
}.items():
    if key not in st.session_state:
        st.session_state[key] = default

while st.session_state["pending_toasts"]:
    notify(st.session_state["pending_toasts"].pop(0))


# ----------------------------
# Editor (new / edit / duplicate)
# ----------------------------
def render_editor() -> None:
    editing = st.session_state["mode"] == "edit"
    st.subheader("Edit template" if editing else "New template")

    st.text_input("Title", key="form_title")
    st.text_area(
        "Content",
        key="form_body",
        height=220,
        help="Use {{variable}} for values you fill in when generating.",
    )

    with st.expander("Variables", expanded=True):
        st.caption("Click a variable to append it to the content; a trailing `@search` is replaced.")
        query = st.text_input("Filter", key="variable_query", placeholder="Search variables...")
        suggestions = suggest_variables(st.session_state["form_body"], query)

        for label, group in (
            ("In use", [v for v in suggestions if not v.suggested]),
            ("Common", [v for v in suggestions if v.suggested]),
        ):
            if not group:
                continue
            st.markdown(f"**{label}:**")
            cols = st.columns(min(len(group), 6))
            for i, v in enumerate(group):
                cols[i % len(cols)].button(
                    f"{{{{{v.name}}}}}",
                    key=f"insert_{label}_{v.name}",
                    on_click=insert_into_body,
                    args=(v.name,),
                )

        new_name = query.strip()
        if new_name and new_name not in {v.name for v in suggestions}:
            st.button(
                f"Add {{{{{new_name}}}}}",
                key="insert_new_variable",
                on_click=insert_into_body,
                args=(new_name,),
            )

    col_save, col_cancel = st.columns([1, 6])
    with col_save:
        if st.button("Save", type="primary"):
            title, body = st.session_state["form_title"], st.session_state["form_body"]
            if editing:
                saved = guarded(workflow.update_template, st.session_state["active_id"], title, body)
            else:
                saved = guarded(workflow.create_template, title, body)
            if saved is not None:
                queue_notification(Notification(message="Template saved.", level="success", duration_ms=settings.toast_ms))
                close_form()
                st.rerun()
    with col_cancel:
        if st.button("Cancel"):
            close_form()
            st.rerun()


# ----------------------------
# Generate panel
# ----------------------------
def render_generator() -> None:
    tpl = guarded(workflow.get_template, st.session_state["active_id"])
    if tpl is None:
        close_form()
        return

    st.subheader(f"Generate: {tpl.title}")
    st.caption("Variables left blank are replaced with an empty string.")

    variables = extract_variables(tpl.body)
    with st.form("variable_form"):
        if not variables:
            st.info("This template defines no variables. Confirm to generate it as-is.")
        values = {name: st.text_input(name, key=f"var_{tpl.template_id}_{name}") for name in variables}
        submitted = st.form_submit_button("Generate", type="primary")

    if submitted:
        result = guarded(workflow.generate, tpl.template_id, values)
        if result is not None:
            st.session_state["last_result"] = result.text
            notify(result.notification)
    elif st.session_state["last_result"] is not None:
        st.components.v1.html(copy_button_html(st.session_state["last_result"]), height=50)

    if st.session_state["last_result"] is not None:
        st.text_area("Result", value=st.session_state["last_result"], height=200, disabled=True)
        st.download_button(
            "Export (.txt)",
            data=st.session_state["last_result"],
            file_name="template_output.txt",
            mime="text/plain",
        )

    if st.button("Back"):
        close_form()
        st.rerun()


# ----------------------------
# Card grid
# ----------------------------
def render_cards() -> None:
    if st.button("➕ New template", type="primary"):
        open_form("new")
        st.rerun()

    templates = guarded(workflow.list_templates) or []
    if not templates:
        st.caption("No templates yet. Create one to get started.")
        return

    columns = st.columns(4)
    for i, tpl in enumerate(templates):
        with columns[i % 4]:
            with st.container(border=True):
                st.markdown(f"**{tpl.title}**")
                preview = tpl.body if len(tpl.body) <= 160 else tpl.body[:157] + "..."
                st.text(preview)
                if tpl.variables:
                    st.caption(" ".join(f"`{v}`" for v in tpl.variables))

                a, b, c, d = st.columns(4)
                if a.button("Generate", key=f"gen_{tpl.template_id}"):
                    open_form("generate", tpl.template_id)
                    st.rerun()
                if b.button("Edit", key=f"edit_{tpl.template_id}"):
                    open_form("edit", tpl.template_id, tpl.title, tpl.body)
                    st.rerun()
                if c.button("Copy", key=f"dup_{tpl.template_id}", help="Duplicate into a new template"):
                    draft = guarded(workflow.duplicate_draft, tpl.template_id)
                    if draft is not None:
                        open_form("new", None, draft["title"], draft["body"])
                        st.rerun()
                if d.button("Delete", key=f"del_{tpl.template_id}"):
                    st.session_state["confirm_delete"] = tpl.template_id

                if st.session_state.get("confirm_delete") == tpl.template_id:
                    st.warning("Delete this template?")
                    yes, no = st.columns(2)
                    if yes.button("Yes, delete", key=f"confirm_{tpl.template_id}"):
                        n = guarded(workflow.delete_template, tpl.template_id)
                        st.session_state["confirm_delete"] = None
                        if n is not None:
                            queue_notification(n)
                        st.rerun()
                    if no.button("Keep", key=f"keep_{tpl.template_id}"):
                        st.session_state["confirm_delete"] = None
                        st.rerun()


mode = st.session_state["mode"]
if mode in {"new", "edit"}:
    render_editor()
elif mode == "generate":
    render_generator()
else:
    render_cards()
