"""Frame rendering for the status picker.

Everything here is a pure function of the session model: the whole screen
is rebuilt as one rich ``Text`` after every event. Widths are measured in
terminal cells so wide glyphs keep the columns aligned.
"""

import unicodedata
from typing import List, Optional, Sequence, Tuple

from rich.cells import cell_len
from rich.text import Text

from git_triage.changeset import Category, Entry, HeadInfo, PendingAction
from git_triage.selection import Side, render_side
from git_triage.session import BODY_PADDING, SessionModel
from git_triage.tui.styles import (
    BRANCH_STYLE,
    CURSOR_STYLE,
    DETACHED_REF_STYLE,
    DISCARD_STYLE,
    HELP_STYLE,
    REF_STYLE,
    SCROLLBAR_THUMB,
    SEPARATOR_STYLE,
    status_style,
)
from git_triage.viewport import scrollbar_thumb_offset

ELLIPSIS = "…"
CURSOR = " ◈ "
# room kept beside an entry label for the cursor and the opposite column
LABEL_RESERVED_WIDTH = 8

TOO_SMALL_MESSAGE = (
    "Your terminal is too small.\n"
    "Resize the terminal to proceed\n"
    "or press q/esc/ctrl+c to exit."
)

HelpItems = Sequence[Tuple[str, str]]


_CONTROL_ESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r"}


def printable(text: str) -> str:
    """Escape control characters so a path stays on one row."""
    if not any(unicodedata.category(char) == "Cc" for char in text):
        return text
    return "".join(
        _CONTROL_ESCAPES.get(char, f"\\x{ord(char):02x}")
        if unicodedata.category(char) == "Cc"
        else char
        for char in text
    )


def truncate_left(text: str, max_width: int) -> str:
    """Shorten text to ``max_width`` cells by dropping its beginning.

    The result starts with an ellipsis followed by the last
    ``max_width - 1`` cells of the text. A wide character that would only
    half fit is dropped rather than split.
    """
    if cell_len(text) <= max_width:
        return text
    if max_width <= 0:
        return ""

    budget = max_width - cell_len(ELLIPSIS)
    tail: List[str] = []
    used = 0
    for char in reversed(text):
        width = cell_len(char)
        if used + width > budget:
            break
        tail.append(char)
        used += width
    return ELLIPSIS + "".join(reversed(tail))


def _padded(text: Text, width: int, align: str = "left") -> Text:
    """Copy of text padded with spaces to ``width`` cells."""
    padded = text.copy()
    gap = width - padded.cell_len
    if gap <= 0:
        return padded
    if align == "right":
        padded.pad_left(gap)
    elif align == "center":
        padded.pad_left(gap // 2)
        padded.pad_right(gap - gap // 2)
    else:
        padded.pad_right(gap)
    return padded


def _join(*parts) -> Text:
    line = Text()
    for part in parts:
        line.append(part)
    return line


def entry_label(entry: Entry, content_width: int) -> Text:
    """Status letter and path, coloured, truncated from the left if needed."""
    path = printable(entry.path)
    label = f"{entry.status.value} {path}"
    if entry.previous_path:
        label = f"{entry.status.value} {printable(entry.previous_path)} → {path}"

    available = content_width - LABEL_RESERVED_WIDTH
    if cell_len(label) > available:
        label = truncate_left(label, available)

    if entry.has(PendingAction.DISCARD):
        return Text(label, style=DISCARD_STYLE)
    return Text(label, style=status_style(entry.status, entry.staged) or "")


def render_entry_row(entry: Entry, selected: bool, content_width: int) -> Text:
    """One body row with the entry aligned to its column."""
    label = entry_label(entry, content_width)
    cursor = Text(CURSOR, style=CURSOR_STYLE)

    if render_side(entry) is Side.RIGHT:
        row = _join(cursor, label) if selected else label
        return _padded(row, content_width, align="right")

    row = _join(label, cursor) if selected else label
    return _padded(row, content_width)


def render_separator(category: Category, content_width: int) -> Text:
    """Full-width rule with the category name in the middle."""
    label = f" {category.value} "
    fill = max(0, content_width - 2 - cell_len(label))
    left = fill // 2
    right = fill - left
    return Text(
        "╾" + "─" * left + label + "─" * right + "╼",
        style=SEPARATOR_STYLE,
    )


def render_body_lines(
    entries: Sequence[Entry], selected: int, content_width: int
) -> List[Text]:
    """All body lines, with a separator before the first entry of each category."""
    lines: List[Text] = []
    seen = set()
    for index, entry in enumerate(entries):
        if entry.category not in seen:
            seen.add(entry.category)
            lines.append(render_separator(entry.category, content_width))
        lines.append(render_entry_row(entry, index == selected, content_width))
    return lines


def _box(content: Text) -> Tuple[Text, Text, Text]:
    """Rounded box whose side edges join the horizontal rule it sits on."""
    inner = "─" * (content.cell_len + 2)
    return (
        Text("╭" + inner + "╮"),
        _join("┤ ", content, " ├"),
        Text("╰" + inner + "╯"),
    )


def header_title(head: HeadInfo) -> Text:
    """Branch and short ref, or the detached commit."""
    if not head.is_branch:
        return _join("Detached at ", Text(head.short_ref, style=DETACHED_REF_STYLE))

    title = _join("On branch ", Text(head.name, style=BRANCH_STYLE))
    if head.ref:
        title.append(" (")
        title.append(head.short_ref, style=REF_STYLE)
        title.append(")")
    return title


def ahead_behind_text(ahead: int, behind: int) -> Optional[Text]:
    """Upstream markers, or None when in sync."""
    parts = []
    if ahead > 0:
        parts.append(f"{ahead} ▲")
    if behind > 0:
        parts.append(f"▼ {behind}")
    if not parts:
        return None
    return Text(" ".join(parts))


def render_header(head: HeadInfo, ahead: int, behind: int, width: int) -> List[Text]:
    """Three header lines: title box on the left, upstream box on the right.

    When space runs out the title is shortened and ends in an ellipsis; the
    upstream markers are kept whole.
    """
    title = header_title(head)
    subtitle = ahead_behind_text(ahead, behind)
    subtitle_width = subtitle.cell_len + 4 if subtitle is not None else 0

    max_title = width - 2 - subtitle_width - 4
    if title.cell_len > max_title:
        title = title.copy()
        title.truncate(max(1, max_title), overflow="ellipsis")

    title_top, title_mid, title_bottom = _box(title)
    if subtitle is not None:
        sub_top, sub_mid, sub_bottom = _box(subtitle)
    else:
        sub_top = sub_mid = sub_bottom = Text()

    fill = max(0, width - 2 - title_mid.cell_len - sub_mid.cell_len)
    return [
        _join(" ", title_top, " " * fill, sub_top, " "),
        _join("─", title_mid, "─" * fill, sub_mid, "─"),
        _join(" ", title_bottom, " " * fill, sub_bottom, " "),
    ]


def help_text(help_items: HelpItems) -> str:
    """Key bindings as ``key label`` pairs."""
    return "   ".join(f"{keys} {label}" for keys, label in help_items)


def render_footer(help_items: HelpItems, width: int) -> List[Text]:
    """Three footer lines with the help box centred on a rule."""
    text = Text(help_text(help_items), style=HELP_STYLE)
    max_text = width - 2 - 4
    if text.cell_len > max_text:
        text.truncate(max(1, max_text), overflow="ellipsis")

    top, mid, bottom = _box(text)
    free = width - mid.cell_len
    left = max(1, free // 2)
    right = max(1, free - free // 2)
    return [
        _join(" " * left, top, " " * right),
        _join("─" * left, mid, "─" * right),
        _join(" " * left, bottom, " " * right),
    ]


def render_side_border(
    top: str,
    mid: str,
    bottom: str,
    height: int,
    thumb_offset: Optional[int] = None,
    thumb_height: int = 2,
    align: str = "right",
) -> List[Text]:
    """A vertical border column, one Text per screen row.

    The corners sit on the header and footer rules, one row in from the
    screen edges. ``align`` places the glyph against the frame body.
    """
    track_height = max(0, height - 4)
    glyphs = [" ", top]
    for row in range(track_height):
        if thumb_offset is not None and thumb_offset <= row < thumb_offset + thumb_height:
            glyphs.append(SCROLLBAR_THUMB)
        else:
            glyphs.append(mid)
    glyphs.extend([bottom, " "])

    if align == "right":
        return [Text(" " + glyph) for glyph in glyphs[:height]]
    return [Text(glyph + " ") for glyph in glyphs[:height]]


def render_too_small(width: int, height: int) -> Text:
    """The resize prompt, centred in the terminal."""
    lines = TOO_SMALL_MESSAGE.split("\n")
    top = max(0, (height - len(lines)) // 2)
    rows = [Text("")] * top + [_padded(Text(line), width, align="center") for line in lines]
    return Text("\n").join(rows)


def render_frame(model: SessionModel, help_items: HelpItems = ()) -> Text:
    """Draw the whole screen for the current model."""
    if model.too_small:
        return render_too_small(model.width, model.height)

    main_width = model.main_width
    body_height = model.body_height
    pad = " " * BODY_PADDING

    body = render_body_lines(model.entries, model.selected, model.content_width)
    offset = model.viewport.y_offset
    visible = [_join(pad, line, pad) for line in body[offset : offset + body_height]]
    visible.extend(Text(" " * main_width) for _ in range(body_height - len(visible)))

    main = (
        render_header(model.head, model.ahead, model.behind, main_width)
        + visible
        + render_footer(help_items, main_width)
    )

    thumb = scrollbar_thumb_offset(model.viewport, track_height=model.height - 4)
    left = render_side_border("╭", "│", "╰", model.height, align="right")
    right = render_side_border("╮", "│", "╯", model.height, thumb, align="left")

    rows = [_join(l, m, r) for l, m, r in zip(left, main, right)]
    return Text("\n").join(rows)
