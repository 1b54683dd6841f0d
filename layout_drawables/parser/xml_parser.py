# layout_drawables/parser/xml_parser.py
from typing import Iterator, List, NamedTuple, Optional, Tuple

from lxml import etree

from .resource_resolver import ResourceResolver
from ..utils import split_qualified


class Attribute(NamedTuple):
    namespace: Optional[str]
    name: str
    value: str


class AttributeSet:
    """XML 属性の順序付きコレクション。名前空間違いの同名属性も保持する。"""

    def __init__(self, attributes=None):
        self._attributes: List[Attribute] = list(attributes or [])

    @classmethod
    def from_element(cls, el) -> "AttributeSet":
        attrs = []
        for k, v in el.attrib.items():
            ns, local = split_qualified(k)
            attrs.append(Attribute(ns, local, v))
        return cls(attrs)

    def get(self, name: str, namespace: Optional[str] = None, default=None):
        for a in self._attributes:
            if a.name == name and (namespace is None or a.namespace == namespace):
                return a.value
        return default

    def items(self) -> Iterator[Tuple[str, str]]:
        for a in self._attributes:
            yield a.name, a.value

    def in_namespace(self, namespace: str) -> "AttributeSet":
        return AttributeSet(a for a in self._attributes if a.namespace == namespace)

    def __iter__(self):
        return iter(self._attributes)

    def __len__(self):
        return len(self._attributes)

    def __repr__(self):
        return f"AttributeSet({self._attributes!r})"


class DomElement:
    """
    ツール側（属性補完・検証）から見た XML 要素。
    kind: "layout" / "data_binding" / "manifest" / "values"
    """

    def __init__(self, tag: str, kind: str, attrs: AttributeSet, parent: Optional["DomElement"] = None):
        self.tag = tag
        self.kind = kind
        self.attrs = attrs
        self.parent = parent
        self.children: List["DomElement"] = []

    def parent_of_kind(self, kind: str) -> Optional["DomElement"]:
        p = self.parent
        while p is not None:
            if p.kind == kind:
                return p
            p = p.parent
        return None

    def walk(self):
        yield self
        for ch in self.children:
            yield from ch.walk()

    def __repr__(self):
        return f"<DomElement {self.tag} kind={self.kind}>"


def _parse_node(el):
    node = {
        "type": split_qualified(el.tag)[1],   # e.g., LinearLayout / TextView
        "attrs": AttributeSet.from_element(el),
        "children": []
    }
    for child in el:
        if isinstance(child.tag, str):  # コメント等スキップ
            node["children"].append(_parse_node(child))
    return node


def _root_kind(root_tag: str) -> str:
    if root_tag == "manifest":
        return "manifest"
    if root_tag == "resources":
        return "values"
    return "layout"


def _build_dom(el, kind: str, parent: Optional[DomElement]) -> DomElement:
    tag = split_qualified(el.tag)[1]
    # <layout><data>...</data></layout> の中身はデータバインディング定義
    if kind == "layout" and tag == "data" and parent is not None and parent.tag == "layout":
        kind = "data_binding"
    dom = DomElement(tag, kind, AttributeSet.from_element(el), parent)
    for child in el:
        if isinstance(child.tag, str):
            dom.children.append(_build_dom(child, kind, dom))
    return dom


def parse_layout_xml(xml_path, values_dir=None):
    """
    xml_path: res/layout/xxx.xml
    values_dir: res/values ディレクトリ
    return: (ir: dict, resolver: ResourceResolver)
    """
    tree = etree.parse(xml_path)
    root = tree.getroot()
    ir = _parse_node(root)
    resolver = ResourceResolver(values_dir) if values_dir else None
    return ir, resolver


def parse_dom(xml_path) -> DomElement:
    root = etree.parse(xml_path).getroot()
    return _build_dom(root, _root_kind(split_qualified(root.tag)[1]), None)


def read_manifest_package(manifest_path) -> Optional[str]:
    """AndroidManifest.xml の package 属性。無ければ None。"""
    root = etree.parse(manifest_path).getroot()
    return root.get("package") or None
