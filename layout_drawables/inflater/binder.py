# layout_drawables/inflater/binder.py
from typing import Dict, List, NamedTuple, Optional

from ..schema.groups import SchemaGroup, resolve_schema_groups
from ..utils import AUTO_URI, DRAWABLE_TYPE_ATTR, SET_AS_ATTR


class DrawableSpec(NamedTuple):
    drawable_type: str
    groups: List[SchemaGroup]
    attributes: Dict[str, str]


# setAs の値 -> View のプロパティ名
_TARGETS = {
    "background": "background",
    "foreground": "foreground",
    "src": "drawable",
}


class DrawableBinder:
    """
    res-auto 名前空間の属性から DrawableSpec を組み立て、View に付ける。
    描画そのものはしない。
    resolver があれば @color/ @dimen/ @string/ の参照を値に置き換える。
    """

    def __init__(self, namespace: str = AUTO_URI, resolver=None):
        self.namespace = namespace
        self.resolver = resolver

    def _own_attrs(self, attrs) -> Dict[str, str]:
        # AttributeSet なら自分の名前空間だけ、dict などはローカル名そのまま
        if hasattr(attrs, "in_namespace"):
            attrs = attrs.in_namespace(self.namespace)
        return dict(attrs.items())

    def build_spec(self, attrs) -> Optional[DrawableSpec]:
        if attrs is None:
            return None
        own = self._own_attrs(attrs)
        drawable_type = own.get(DRAWABLE_TYPE_ATTR)
        if not drawable_type:
            return None
        values = {}
        for name, value in own.items():
            if name in (DRAWABLE_TYPE_ATTR, SET_AS_ATTR):
                continue
            values[name] = self.resolver.resolve(value) if self.resolver is not None else value
        return DrawableSpec(drawable_type, resolve_schema_groups("", own), values)

    def apply(self, view, attrs):
        spec = self.build_spec(attrs)
        if spec is None:
            return
        set_as = self._own_attrs(attrs).get(SET_AS_ATTR, "background")
        setattr(view, _TARGETS.get(set_as, "background"), spec)
