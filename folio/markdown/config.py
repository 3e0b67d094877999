def get_markdown_config():
    """
    Configuration for the markdown-it parser.

    The ``default`` preset is used rather than ``commonmark`` so that
    tables and strikethrough are available. Raw HTML is enabled because
    the figure rewrite emits HTML blocks, and ``breaks`` turns single
    newlines into ``<br>`` the way documents for this format are written.
    """
    return {
        "preset": "default",
        "options": {
            "html": True,
            "breaks": True,
            "linkify": True,
            "typographer": True,
        },
        # mdit_py_plugins.tasklists: checkboxes stay clickable for the host page
        "tasklists": {
            "enabled": True,
            "label": False,
        },
        # blockquote line that starts the quote's attribution
        "attribution": {
            "marker": "cite:",
        },
    }


def get_pagination_config():
    """
    Defaults for the pagination measurer.

    Capacity is expressed in estimated lines of body text. Each block
    element costs ``block_cost`` extra lines for its vertical spacing and
    each image ``image_lines``.
    """
    return {
        "capacity": 40.0,
        "chars_per_line": 72,
        "block_cost": 1.0,
        "image_lines": 8.0,
    }
