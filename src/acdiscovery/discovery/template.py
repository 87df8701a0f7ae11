"""URI template rendering for discovery declarations.

Templates use ``{name}``, ``{<label>}`` and ``{ext}`` placeholders. A
template that still contains a placeholder after rendering is not
applicable to the app (a label it needs is missing); that is a normal
outcome, not an error.

Example:
    >>> render_template("https://example.com/{name}-{version}.{ext}", ("name", "app"))
    ('https://example.com/app-{version}.{ext}', False)
    >>> render_template("https://example.com/{name}.aci", ("name", "app"))
    ('https://example.com/app.aci', True)
"""

from __future__ import annotations

import re

_TEMPLATE_EXPRESSION = re.compile(r"{.*?}")
_PLACEHOLDER = re.compile(r"{([^{}]*)}")


def render_template(template: str, *pairs: tuple[str, str]) -> tuple[str, bool]:
    """Replace ``{key}`` placeholders with their values.

    The template is scanned once, so text inserted by one substitution is
    never substituted again. When a key appears in several pairs the first
    one wins. Placeholders without a pair are left untouched.

    Args:
        template: URI template.
        *pairs: (key, value) pairs, keys without braces.

    Returns:
        Tuple of (rendered string, True if no placeholder is left).
    """
    values: dict[str, str] = {}
    for key, value in pairs:
        values.setdefault(key, value)

    rendered = _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)
    return rendered, _TEMPLATE_EXPRESSION.search(rendered) is None
