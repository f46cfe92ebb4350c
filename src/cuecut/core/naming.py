"""
Output path rendering from a naming template.

Template syntax:
    {scope.field}           field value, scopes are ``disc`` and ``track``
    {track.number|pad}      zero-padded to the digit count of the disc's track count
    {disc.title|default:X}  X when the field is empty
    [ ... ]                 optional group, dropped unless every field in it has a value
    {{ }} [[ ]]             literal braces and brackets
    /                       directory separator

Every text value passes through ``path_safe`` before it is interpolated, so
metadata can never introduce a directory separator of its own.
"""
import re

from ..errors import TemplateError

TEXT = "text"
NUMBER = "number"

_FIELDS = {
    ("disc", "performer"): (lambda disc, track: disc.performer, TEXT),
    ("disc", "artist"): (lambda disc, track: disc.performer, TEXT),
    ("disc", "title"): (lambda disc, track: disc.title, TEXT),
    ("disc", "date"): (lambda disc, track: disc.date, TEXT),
    ("disc", "genre"): (lambda disc, track: disc.genre, TEXT),
    ("disc", "tracks"): (lambda disc, track: disc.track_count, NUMBER),
    ("track", "number"): (lambda disc, track: track.number, NUMBER),
    ("track", "title"): (lambda disc, track: track.title, TEXT),
    ("track", "performer"): (lambda disc, track: track.performer, TEXT),
}

# Path separators, characters reserved on Windows/SMB shares, control characters
_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')

# Device names Windows refuses as a file name, with or without an extension
_RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)


def path_safe(text):
    """
    Make a metadata value usable as (part of) a single path segment.

    Unsafe characters become ``_``, surrounding whitespace and trailing dots
    are removed, and reserved device names such as ``CON`` or ``com1.txt``
    get a ``_`` appended to the name.

    Returns:
        The safe value; ``""`` for None
    """
    if text is None:
        return ""
    text = _UNSAFE_CHARS.sub("_", str(text)).strip()
    if not text:
        return ""
    text = text.rstrip(". ")
    if not text:
        return "_"
    name, dot, extension = text.partition(".")
    if name.rstrip().upper() in _RESERVED_NAMES:
        text = f"{name}_{dot}{extension}"
    return text


def field_names():
    """Every ``scope.field`` name a template may reference"""
    return sorted(f"{scope}.{name}" for scope, name in _FIELDS)


class _Literal:
    def __init__(self, text):
        self.text = text

    def render(self, disc, track):
        return self.text


class _Field:
    def __init__(self, name, getter, kind, pad=False, default=None):
        self.name = name
        self.getter = getter
        self.kind = kind
        self.pad = pad
        self.default = default

    def render(self, disc, track):
        raw = self.getter(disc, track)
        if self.kind == NUMBER:
            value = "" if raw is None else str(raw)
            if value and self.pad:
                value = value.zfill(len(str(disc.track_count)))
        else:
            value = path_safe(raw)
        if not value and self.default is not None:
            value = path_safe(self.default)
        return value


class _Group:
    def __init__(self, nodes):
        self.nodes = nodes

    def render(self, disc, track):
        parts = [node.render(disc, track) for node in self.nodes]
        for node, part in zip(self.nodes, parts):
            if isinstance(node, _Field) and not part:
                return ""
        return "".join(parts)


def _compile_field(spec):
    ref, *filters = spec.split("|")
    ref = ref.strip()
    scope, dot, name = ref.partition(".")
    if not dot or (scope, name) not in _FIELDS:
        raise TemplateError(
            f"unknown field {{{ref}}}, available: {', '.join(field_names())}"
        )
    getter, kind = _FIELDS[(scope, name)]

    pad = False
    default = None
    for template_filter in filters:
        filter_name, colon, arg = template_filter.partition(":")
        filter_name = filter_name.strip()
        if filter_name == "pad" and not colon:
            if kind != NUMBER:
                raise TemplateError(f"pad only applies to numeric fields, not {{{ref}}}")
            pad = True
        elif filter_name == "default" and colon:
            default = arg
        else:
            raise TemplateError(f"unknown filter {template_filter!r} in {{{spec}}}")
    return _Field(ref, getter, kind, pad, default)


def _compile(source):
    nodes = []
    group = None
    buf = []

    def flush():
        if buf:
            (nodes if group is None else group).append(_Literal("".join(buf)))
            buf.clear()

    i = 0
    while i < len(source):
        ch = source[i]
        if ch in "{}[]" and source[i + 1:i + 2] == ch:
            buf.append(ch)
            i += 2
            continue
        if ch == "{":
            end = source.find("}", i)
            if end == -1:
                raise TemplateError(f"unclosed '{{' at position {i}")
            flush()
            (nodes if group is None else group).append(_compile_field(source[i + 1:end]))
            i = end + 1
        elif ch == "[":
            if group is not None:
                raise TemplateError(f"nested '[' at position {i}")
            flush()
            group = []
            i += 1
        elif ch == "]":
            if group is None:
                raise TemplateError(f"unmatched ']' at position {i}")
            flush()
            nodes.append(_Group(tuple(group)))
            group = None
            i += 1
        elif ch == "}":
            raise TemplateError(f"unmatched '}}' at position {i}")
        else:
            buf.append(ch)
            i += 1

    if group is not None:
        raise TemplateError("unclosed '['")
    flush()
    return tuple(nodes)


class NameTemplate:
    """
    A compiled naming template.

    Compiling up front means a bad template fails before any extraction
    starts.

    Args:
        source: Template text

    Raises:
        TemplateError: If the template is syntactically invalid or references
            an unknown field or filter
    """

    def __init__(self, source):
        self.source = source
        self._nodes = _compile(source)

    def render(self, disc, track):
        """
        Render the relative output path (without extension) for one track.

        Returns:
            Path with ``/`` separators

        Raises:
            TemplateError: If the result is empty or escapes the output directory
        """
        rendered = "".join(node.render(disc, track) for node in self._nodes)
        segments = [segment.strip() for segment in rendered.split("/")]
        segments = [segment for segment in segments if segment]
        if not segments:
            raise TemplateError("template renders an empty path", disc.sheet_path, track.number)
        if any(segment in (".", "..") for segment in segments):
            raise TemplateError(
                f"rendered path {rendered!r} escapes the output directory",
                disc.sheet_path, track.number,
            )
        return "/".join(segments)

    def __repr__(self):
        return f"NameTemplate({self.source!r})"


def render(template, disc, track):
    """Render a template (text or NameTemplate) for one track of a disc"""
    if not isinstance(template, NameTemplate):
        template = NameTemplate(template)
    return template.render(disc, track)
