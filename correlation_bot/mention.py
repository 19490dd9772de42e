"""Clickable user mentions for the three Telegram parse modes."""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union


UNKNOWN_LABEL = "unknown"


class Dialect(Enum):
    HTML = "HTML"
    MARKDOWN = "Markdown"
    MARKDOWN_V2 = "MarkdownV2"

    @classmethod
    def parse(cls, value: Any) -> "Dialect":
        """Map a parse-mode value to a dialect, falling back to HTML."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return cls.HTML


@dataclass(frozen=True)
class Identity:
    id: Optional[Union[int, str]] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @classmethod
    def from_user(cls, user: Any) -> "Identity":
        return cls(
            id=getattr(user, "id", None),
            username=getattr(user, "username", None),
            first_name=getattr(user, "first_name", None),
            last_name=getattr(user, "last_name", None),
        )

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> Optional["Identity"]:
        if not data:
            return None
        return cls(
            id=data.get("id"),
            username=data.get("username"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }


_HTML_ENTITIES = {
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    '"': "&quot;",
    "'": "&apos;",
}

_MARKDOWN_V2_RESERVED_RE = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")


def escape_html(text: str) -> str:
    """Escape markup characters and encode astral code points as hex references."""
    parts = []
    for char in text:
        entity = _HTML_ENTITIES.get(char)
        if entity is not None:
            parts.append(entity)
        elif ord(char) > 0xFFFF:
            parts.append(f"&#x{ord(char):02x};")
        else:
            parts.append(char)
    return "".join(parts)


def escape_markdown_v2(text: str) -> str:
    return _MARKDOWN_V2_RESERVED_RE.sub(r"\\\1", text)


def _has_username(identity: Identity) -> bool:
    return isinstance(identity.username, str) and bool(identity.username)


def display_label(identity: Identity) -> str:
    if _has_username(identity):
        return f"@{identity.username}"

    names = []
    for raw in (identity.first_name, identity.last_name):
        value = raw.strip() if isinstance(raw, str) else raw
        if value:
            names.append(str(value))
    return " ".join(names) or UNKNOWN_LABEL


def mention_link(identity: Identity) -> str:
    if _has_username(identity):
        return f"https://t.me/{identity.username}"
    return f"tg://user?id={identity.id}"


def _render_html(label: str, link: str, is_username: bool) -> str:
    # @ and _ stay literal; usernames never carry HTML-unsafe characters.
    text = label if is_username else escape_html(label)
    return f'<a href="{link}">{text}</a>'


def _render_markdown(label: str, link: str, is_username: bool) -> str:
    # Legacy Markdown has no escape for "]" inside a link label, so the first
    # one is dropped and anything else is passed through untouched.
    return f"[{label.replace(']', '', 1)}]({link})"


def _render_markdown_v2(label: str, link: str, is_username: bool) -> str:
    return f"[{escape_markdown_v2(label)}]({link})"


def _coerce(identity: Any) -> Identity:
    if isinstance(identity, Identity):
        return identity
    if identity is None:
        return Identity()
    if isinstance(identity, Mapping):
        return Identity.from_mapping(identity) or Identity()
    return Identity.from_user(identity)


_RENDERERS: Dict[Dialect, Callable[[str, str, bool], str]] = {
    Dialect.HTML: _render_html,
    Dialect.MARKDOWN: _render_markdown,
    Dialect.MARKDOWN_V2: _render_markdown_v2,
}


def build_mention(identity: Any, dialect: Any = Dialect.HTML) -> str:
    """Render ``identity`` as a clickable mention in the given dialect.

    A username wins over the display name and links to ``https://t.me/``;
    otherwise the first and last names are trimmed and joined and the link
    points at ``tg://user?id=``. When nothing usable is left the label is
    ``unknown``. Unrecognised dialects render as HTML. Besides ``Identity``,
    a plain mapping or any object with Telegram user attributes is accepted.
    """
    identity = _coerce(identity)
    render = _RENDERERS[Dialect.parse(dialect)]
    return render(display_label(identity), mention_link(identity), _has_username(identity))
