"""Sanitizing sink for untrusted HTML before it reaches the content pane.

Only allowlisted elements and attributes survive. Unknown elements are
unwrapped so their text stays visible; elements that carry code are removed
together with everything inside them.
"""

import re
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
from bs4.element import PreformattedString

ALLOWED_TAGS = frozenset(
    {
        "a", "abbr", "b", "blockquote", "br", "caption", "code", "col", "colgroup",
        "dd", "del", "details", "div", "dl", "dt", "em", "figcaption", "figure",
        "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "ins", "kbd", "li",
        "mark", "ol", "p", "pre", "q", "s", "samp", "small", "span", "strong",
        "sub", "summary", "sup", "table", "tbody", "td", "tfoot", "th", "thead",
        "tr", "u", "ul",
    }
)  # fmt: skip
GLOBAL_ATTRS = frozenset({"class", "id", "title", "style", "lang", "dir"})
TAG_ATTRS = {
    "a": frozenset({"href", "name", "target", "rel"}),
    "img": frozenset({"src", "alt", "width", "height"}),
    "ol": frozenset({"start", "type"}),
    "td": frozenset({"colspan", "rowspan", "align"}),
    "th": frozenset({"colspan", "rowspan", "align", "scope"}),
    "col": frozenset({"span"}),
    "colgroup": frozenset({"span"}),
    "q": frozenset({"cite"}),
    "blockquote": frozenset({"cite"}),
}
URL_ATTRS = frozenset({"href", "src", "cite"})
ALLOWED_SCHEMES = frozenset({"", "http", "https", "mailto"})

# Removed together with their content.
DROP_WITH_CONTENT = [
    "script", "style", "iframe", "frame", "frameset", "object", "embed", "applet",
    "template", "noscript", "svg", "math", "textarea", "select",
]  # fmt: skip

# Browsers ignore ASCII control characters and whitespace when reading a scheme.
_IGNORED_IN_URL = re.compile(r"[\x00-\x20\x7f]+")
_UNSAFE_STYLE = ("url(", "expression(", "javascript:", "@import")


def is_safe_url(value: str) -> bool:
    compact = _IGNORED_IN_URL.sub("", value)
    try:
        scheme = urlsplit(compact).scheme
    except ValueError:
        return False
    return scheme.lower() in ALLOWED_SCHEMES


def _is_safe_style(value: str) -> bool:
    compact = _IGNORED_IN_URL.sub("", value).lower().replace("\\", "")
    return not any(marker in compact for marker in _UNSAFE_STYLE)


def _keep_attr(tag: str, name: str, value: str | list[str]) -> bool:
    if name not in GLOBAL_ATTRS and name not in TAG_ATTRS.get(tag, ()):
        return False
    text = " ".join(value) if isinstance(value, list) else value
    if name in URL_ATTRS:
        return is_safe_url(text)
    if name == "style":
        return _is_safe_style(text)
    return True


def sanitize_html(fragment: str) -> str:
    """Reduce an HTML fragment to allowlisted markup.

    Comments, doctypes and processing instructions are dropped; attributes
    outside the allowlist, event handlers and script URLs go with them.
    """
    soup = BeautifulSoup(fragment, "html.parser")
    for special in soup.find_all(string=lambda s: isinstance(s, PreformattedString)):
        special.extract()
    dropped = soup.find(DROP_WITH_CONTENT)
    while dropped is not None:
        dropped.decompose()
        dropped = soup.find(DROP_WITH_CONTENT)
    for element in soup.find_all(True):
        if element.name not in ALLOWED_TAGS:
            element.unwrap()
            continue
        element.attrs = {
            name: value
            for name, value in element.attrs.items()
            if _keep_attr(element.name, name, value)
        }
    return str(soup)


def to_display(fragment: str, *, allow_unsafe_html: bool = False) -> str:
    """Prepare HTML for the content pane.

    Callers must opt in explicitly to display unsanitized markup.
    """
    if allow_unsafe_html:
        return fragment
    return sanitize_html(fragment)
