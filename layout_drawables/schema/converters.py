# layout_drawables/schema/converters.py
"""
Value converters attached to registered attributes. ``from_string`` returns
the parsed value, or ``None`` when the text is not acceptable.
"""
import re
from typing import Iterable, Optional, Sequence

from ..parser.resource_resolver import AttributeDefinition, AttributeFormat
from ..utils import ANDROID_URI, TOOLS_URI

_REFERENCE_RE = re.compile(r'^@(?:\+)?(?:([\w.]+):)?([a-z]+)/([\w.]+)$')
_THEME_ATTR_RE = re.compile(r'^\?(?:([\w.]+):)?(?:attr/)?([\w.]+)$')
_COLOR_RE = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$')
_DIMEN_RE = re.compile(r'^(-?\d+(?:\.\d+)?)(dp|dip|sp|px|pt|in|mm)$')
_FRACTION_RE = re.compile(r'^(-?\d+(?:\.\d+)?)%p?$')
_PLACEHOLDER_RE = re.compile(r'\$\{[^}]+\}')


class Converter:
    def from_string(self, value: str):
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"


class StringConverter(Converter):
    def from_string(self, value):
        return value


class ColorConverter(Converter):
    def from_string(self, value):
        return value if _COLOR_RE.match(value or "") else None


class DimensionConverter(Converter):
    def from_string(self, value):
        m = _DIMEN_RE.match((value or "").strip())
        if not m:
            return None
        return float(m.group(1)), m.group(2)


class BooleanConverter(Converter):
    def from_string(self, value):
        if value == "true":
            return True
        if value == "false":
            return False
        return None


class IntegerConverter(Converter):
    def from_string(self, value):
        try:
            return int(value, 0)
        except (TypeError, ValueError):
            return None


class FloatConverter(Converter):
    def from_string(self, value):
        try:
            return float(value)
        except (TypeError, ValueError):
            return None


class FractionConverter(Converter):
    def from_string(self, value):
        m = _FRACTION_RE.match((value or "").strip())
        return float(m.group(1)) / 100 if m else None


class EnumConverter(Converter):
    def __init__(self, values: Iterable[str]):
        self.values = tuple(values)

    def from_string(self, value):
        return value if value in self.values else None

    def __repr__(self):
        return f"EnumConverter({list(self.values)!r})"


class FlagsConverter(EnumConverter):
    def from_string(self, value):
        parts = [p.strip() for p in (value or "").split("|")]
        if parts and all(p in self.values for p in parts):
            return parts
        return None


_LITERAL_CONVERTERS = {
    AttributeFormat.STRING: StringConverter,
    AttributeFormat.COLOR: ColorConverter,
    AttributeFormat.DIMENSION: DimensionConverter,
    AttributeFormat.BOOLEAN: BooleanConverter,
    AttributeFormat.INTEGER: IntegerConverter,
    AttributeFormat.FLOAT: FloatConverter,
    AttributeFormat.FRACTION: FractionConverter,
}


class ResourceReferenceConverter(Converter):
    """@type/name, @pkg:type/name, ?attr に加えて、許可された値形式も受け付ける。"""

    def __init__(self, formats: Iterable[AttributeFormat] = (AttributeFormat.REFERENCE,)):
        self.formats = tuple(formats)
        self._literals = [_LITERAL_CONVERTERS[f]() for f in self.formats if f in _LITERAL_CONVERTERS]

    def from_string(self, value):
        if value is None:
            return None
        if value == "@null" or _REFERENCE_RE.match(value) or _THEME_ATTR_RE.match(value):
            return value
        for c in self._literals:
            parsed = c.from_string(value)
            if parsed is not None:
                return parsed
        return None

    def __repr__(self):
        return f"ResourceReferenceConverter({[f.value for f in self.formats]!r})"


class CompositeConverter(Converter):
    def __init__(self, converters: Sequence[Converter]):
        self.converters = list(converters)

    def from_string(self, value):
        for c in self.converters:
            parsed = c.from_string(value)
            if parsed is not None:
                return parsed
        return None

    def __repr__(self):
        return f"CompositeConverter({self.converters!r})"


class ManifestPlaceholderConverter(Converter):
    """${applicationId} のようなビルド時プレースホルダを含む値はそのまま通す。"""

    def __init__(self, wrapped: Converter):
        self.wrapped = wrapped

    def from_string(self, value):
        if value and _PLACEHOLDER_RE.search(value):
            return value
        return self.wrapped.from_string(value)

    def __repr__(self):
        return f"ManifestPlaceholderConverter({self.wrapped!r})"


def get_converter(attr_def: AttributeDefinition) -> Optional[Converter]:
    formats = attr_def.formats
    if not formats:
        return None
    keyword = None
    if AttributeFormat.FLAGS in formats:
        keyword = FlagsConverter(attr_def.values)
    elif AttributeFormat.ENUM in formats:
        keyword = EnumConverter(attr_def.values)
    rest = [f for f in formats if f not in (AttributeFormat.ENUM, AttributeFormat.FLAGS)]

    if AttributeFormat.REFERENCE in rest:
        value_conv = ResourceReferenceConverter(rest)
    elif AttributeFormat.STRING in rest:
        # string は何でも受け付けるので他の形式は見ない
        value_conv = StringConverter()
    elif len(rest) == 1:
        value_conv = _LITERAL_CONVERTERS[rest[0]]()
    elif rest:
        value_conv = CompositeConverter([_LITERAL_CONVERTERS[f]() for f in rest])
    else:
        value_conv = None

    if keyword is not None and value_conv is not None:
        return CompositeConverter([keyword, value_conv])
    return keyword or value_conv


# tools: 名前空間で特別扱いする属性
_TOOLS_CONVERTERS = {
    "context": StringConverter,
    "ignore": StringConverter,
    "targetApi": StringConverter,
    "layout": lambda: ResourceReferenceConverter(),
    "listitem": lambda: ResourceReferenceConverter(),
    "showIn": lambda: ResourceReferenceConverter(),
}


def get_tools_converter(attr_def: AttributeDefinition) -> Optional[Converter]:
    factory = _TOOLS_CONVERTERS.get(attr_def.name)
    if factory is not None:
        return factory()
    return get_converter(attr_def)


# (要素種別, 名前空間, 属性名) ごとの専用コンバータ
_SPECIFIC_CONVERTERS = {
    ("layout", ANDROID_URI, "id"): lambda: ResourceReferenceConverter(),
    ("layout", ANDROID_URI, "onClick"): StringConverter,
    ("layout", ANDROID_URI, "style"): lambda: ResourceReferenceConverter(),
    ("layout", TOOLS_URI, "context"): StringConverter,
}


def get_specific_converter(xml_name, element) -> Optional[Converter]:
    factory = _SPECIFIC_CONVERTERS.get((element.kind, xml_name.namespace, xml_name.local_name))
    return factory() if factory is not None else None


def must_be_soft(converter: Converter, formats) -> bool:
    if isinstance(converter, (CompositeConverter, ResourceReferenceConverter)):
        return False
    return len(formats) > 1
