DEFAULT_TEMPLATES = [
    {
        "template_id": "default-1",
        "title": "Meeting Invitation",
        "body": "Hello {{name}}, please join the {{event}} meeting at {{time}}.",
    },
]

# Offered in the editor alongside the names a body already uses.
SUGGESTED_VARIABLES = ("name", "time", "date", "event", "location", "title")
