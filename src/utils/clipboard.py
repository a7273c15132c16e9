from __future__ import annotations

import json
from typing import Protocol


class ClipboardError(Exception):
    """Raised when generated text cannot be handed to the clipboard."""


class ClipboardSink(Protocol):
    def copy(self, text: str) -> bool:
        """
        Hands `text` to the clipboard.
        Returns True when the write is confirmed, False when the user still has to
        finish it (e.g. click a browser button). Raises ClipboardError on failure.
        """
        ...


def copy_button_html(text: str, label: str = "Copy to clipboard", auto_copy: bool = False) -> str:
    # json.dumps gives a safe JS string literal; "</" is split so it cannot close the script tag
    payload = json.dumps(text).replace("</", "<\\/")
    auto = "copyPayload();" if auto_copy else ""
    return f"""
        <button id="copy-btn" style="padding:0.5rem 0.75rem; border-radius:6px; border:1px solid #ccc; cursor:pointer;">
            {label}
        </button>
        <span id="copy-status" style="margin-left:0.5rem; font-family:sans-serif; font-size:0.85rem;"></span>
        <script>
        const payload = {payload};
        const status = document.getElementById("copy-status");
        async function copyPayload() {{
            try {{
                await navigator.clipboard.writeText(payload);
                status.textContent = "Copied.";
                status.style.color = "green";
            }} catch (e) {{
                status.textContent = "Copy failed, please try again.";
                status.style.color = "red";
            }}
        }}
        document.getElementById("copy-btn").addEventListener("click", copyPayload);
        {auto}
        </script>
        """


class StreamlitClipboard:
    """
    Renders a browser-side copy button.
    The browser owns the actual clipboard write, so a copy is never confirmed server-side.
    """

    def __init__(self, components_html=None, height: int = 50):
        if components_html is None:
            import streamlit.components.v1 as components

            components_html = components.html
        self._html = components_html
        self.height = height

    def copy(self, text: str) -> bool:
        try:
            self._html(copy_button_html(text), height=self.height)
        except Exception as e:
            raise ClipboardError(f"Could not render copy component: {e}") from e
        return False
