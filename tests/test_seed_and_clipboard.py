import json

import pytest

from src.templates.seed_templates import main, seed
from src.templates.sqlite_template_store import SQLiteTemplateStore
from src.utils.clipboard import ClipboardError, StreamlitClipboard, copy_button_html


def test_seed_cli_fills_empty_library(tmp_path, capsys):
    db = tmp_path / "seed.db"

    main(["--db", str(db)])

    assert "Seeded 1 templates" in capsys.readouterr().out
    assert SQLiteTemplateStore(str(db)).count_templates() == 1


def test_seed_skips_non_empty_library_unless_forced(tmp_path):
    db = str(tmp_path / "seed.db")
    store = SQLiteTemplateStore(db)

    assert seed(db) == 1
    original = store.get_template("default-1")

    assert seed(db) == 0
    assert seed(db, force=True) == 1

    reseeded = store.get_template("default-1")
    assert store.count_templates() == 1
    assert reseeded.created_at == original.created_at
    assert reseeded.updated_at >= original.updated_at


def test_copy_button_html_escapes_payload():
    text = 'He said "hi" `now` </script><b>'
    html = copy_button_html(text)

    assert "</script><b>" not in html
    assert json.dumps(text).replace("</", "<\\/") in html


def test_streamlit_clipboard_renders_component():
    calls = []
    clipboard = StreamlitClipboard(components_html=lambda body, height: calls.append((body, height)))

    clipboard.copy("Hi Sam")

    assert len(calls) == 1
    assert '"Hi Sam"' in calls[0][0]


def test_streamlit_clipboard_wraps_render_failures():
    def broken(body, height):
        raise RuntimeError("no script run context")

    with pytest.raises(ClipboardError):
        StreamlitClipboard(components_html=broken).copy("Hi")


def test_copy_button_html_only_copies_on_click_by_default():
    assert "copyPayload();" not in copy_button_html("Hi")
    assert "copyPayload();" in copy_button_html("Hi", auto_copy=True)


def test_streamlit_clipboard_never_confirms_the_copy():
    clipboard = StreamlitClipboard(components_html=lambda body, height: None)
    assert clipboard.copy("Hi") is False
