# layout_drawables/parser/resource_resolver.py
import logging
import os
from enum import Enum
from typing import Dict, List, Optional, Tuple

from lxml import etree

logger = logging.getLogger(__name__)


class AttributeFormat(str, Enum):
    REFERENCE = "reference"
    STRING = "string"
    COLOR = "color"
    DIMENSION = "dimension"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    FRACTION = "fraction"
    ENUM = "enum"
    FLAGS = "flags"


def _parse_formats(raw: Optional[str]) -> Tuple[AttributeFormat, ...]:
    if not raw:
        return ()
    formats = []
    for part in raw.split("|"):
        part = part.strip()
        try:
            formats.append(AttributeFormat(part))
        except ValueError:
            logger.warning("unknown attr format %r ignored", part)
    return tuple(formats)


class AttributeDefinition:
    def __init__(self, name: str, formats=(), values=()):
        self.name = name
        self.formats: Tuple[AttributeFormat, ...] = tuple(formats)
        self.values: Tuple[str, ...] = tuple(values)

    def __repr__(self):
        fmts = "|".join(f.value for f in self.formats)
        return f"AttributeDefinition({self.name!r}, {fmts!r})"


class StyleableDefinition:
    def __init__(self, name: str, attributes: List[AttributeDefinition]):
        self.name = name
        self.attributes = attributes


class AttributeDefinitions:
    def __init__(self, attrs: Dict[str, AttributeDefinition], styleables: Dict[str, StyleableDefinition]):
        self._attrs = attrs
        self._styleables = styleables

    def get_styleable_by_name(self, name: str) -> Optional[StyleableDefinition]:
        return self._styleables.get(name)


def _attr_from_element(el, formats_hint=()) -> AttributeDefinition:
    name = el.get("name")
    formats = list(_parse_formats(el.get("format")))
    values = []
    for child in el:
        if not isinstance(child.tag, str):
            continue
        if child.tag in ("enum", "flag"):
            fmt = AttributeFormat.ENUM if child.tag == "enum" else AttributeFormat.FLAGS
            if fmt not in formats:
                formats.append(fmt)
            if child.get("name"):
                values.append(child.get("name"))
    if not formats:
        formats = list(formats_hint)
    return AttributeDefinition(name, formats, values)


class ResourceResolver:
    def __init__(self, values_dir):
        self.colors = {}
        self.strings = {}
        self.dimens = {}
        self.attrs: Dict[str, AttributeDefinition] = {}
        self.styleables: Dict[str, StyleableDefinition] = {}
        self._pending_styleables = []
        if values_dir and os.path.isdir(values_dir):
            self._load_values(values_dir)

    def _load_values(self, values_dir):
        for fn in sorted(os.listdir(values_dir)):
            if not fn.endswith(".xml"): continue
            path = os.path.join(values_dir, fn)
            try:
                root = etree.parse(path).getroot()
            except (OSError, etree.XMLSyntaxError) as e:
                logger.warning("skipping %s: %s", path, e)
                continue
            for child in root:
                tag = child.tag
                if not isinstance(tag, str): continue
                name = child.get("name")
                if not name: continue
                text = (child.text or "").strip()
                if tag == "color":
                    self.colors[name] = text
                elif tag == "string":
                    self.strings[name] = text
                elif tag == "dimen":
                    self.dimens[name] = text
                elif tag == "attr":
                    self.attrs[name] = _attr_from_element(child)
                elif tag == "declare-styleable":
                    self._pending_styleables.append(child)
        # トップレベル attr を全部読んでから styleable を組み立てる（format の借用のため）
        for el in self._pending_styleables:
            self._add_styleable(el)
        self._pending_styleables = []

    def _add_styleable(self, el):
        members = []
        for child in el:
            if not isinstance(child.tag, str) or child.tag != "attr":
                continue
            attr_name = child.get("name")
            if not attr_name:
                continue
            top = self.attrs.get(attr_name)
            attr_def = _attr_from_element(child, top.formats if top else ())
            if not attr_def.values and top is not None:
                attr_def.values = top.values
            if attr_name not in self.attrs and attr_def.formats:
                self.attrs[attr_name] = attr_def
            members.append(attr_def)
        self.styleables[el.get("name")] = StyleableDefinition(el.get("name"), members)

    def attribute_definitions(self) -> Optional[AttributeDefinitions]:
        if not self.attrs and not self.styleables:
            return None
        return AttributeDefinitions(self.attrs, self.styleables)

    def resolve(self, val):
        """ @color/primary → #RRGGBB / @dimen/margin → '16dp' ... """
        if not isinstance(val, str): return val
        if val.startswith("@color/"):
            key = val.split("/", 1)[1]
            return self.colors.get(key, val)
        if val.startswith("@string/"):
            key = val.split("/", 1)[1]
            return self.strings.get(key, val)
        if val.startswith("@dimen/"):
            key = val.split("/", 1)[1]
            return self.dimens.get(key, val)
        return val
