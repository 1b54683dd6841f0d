# layout_drawables/schema/groups.py
from enum import Enum
from typing import Dict, List

from ..utils import (
    COMMON_STYLEABLE,
    DRAWABLE_TYPE_ATTR,
    DRAWABLE_TYPES,
    SHAPE_SLOTS,
    is_slot_attr,
    is_structural_tag,
)


class SchemaGroup(str, Enum):
    SHAPE = "Drawable_Shape"
    SHAPE1 = "Drawable_Shape1"
    SHAPE2 = "Drawable_Shape2"
    SHAPE3 = "Drawable_Shape3"
    SHAPE4 = "Drawable_Shape4"
    SELECTOR = "Drawable_Selector"
    LAYER = "Drawable_Layer"
    RIPPLE = "Drawable_Ripple"
    LEVEL = "Drawable_Level"
    CLIP = "Drawable_Clip"
    INSET = "Drawable_Inset"
    SCALE = "Drawable_Scale"
    ANIMATION = "Drawable_Animation"
    COMMON = COMMON_STYLEABLE


TYPE_TO_GROUP: Dict[str, SchemaGroup] = {k: SchemaGroup(v) for k, v in DRAWABLE_TYPES.items()}
SLOT_TO_GROUP: Dict[str, SchemaGroup] = {k: SchemaGroup(v) for k, v in SHAPE_SLOTS.items()}


def _attr_pairs(attributes):
    if attributes is None:
        return []
    if hasattr(attributes, "items"):
        return attributes.items()
    return attributes


def resolve_schema_groups(tag_name: str, attributes) -> List[SchemaGroup]:
    """
    タグの属性から登録すべきスキーマグループを順序付き・重複なしで返す。
    attributes: AttributeSet / dict / (name, value) の iterable
    """
    if is_structural_tag(tag_name):
        return []

    groups: Dict[SchemaGroup, None] = {}
    drawable_type_found = False
    for name, value in _attr_pairs(attributes):
        if name == DRAWABLE_TYPE_ATTR:
            # 未知の値でもフォールバックは抑止する
            drawable_type_found = True
            group = TYPE_TO_GROUP.get(value)
            if group is not None:
                groups.setdefault(group)
            continue
        group = SLOT_TO_GROUP.get(value)
        if group is not None and is_slot_attr(name):
            groups.setdefault(group)

    if not drawable_type_found:
        groups.setdefault(SchemaGroup.COMMON)
    return list(groups)
