# layout_drawables/utils.py
from typing import Optional, Tuple

ANDROID_URI = "http://schemas.android.com/apk/res/android"
AUTO_URI = "http://schemas.android.com/apk/res-auto"
TOOLS_URI = "http://schemas.android.com/tools"
URI_PREFIX = "http://schemas.android.com/apk/res/"

ANDROID_NS_NAME = "android"
ANDROID_NS_NAME_PREFIX = "android:"

DRAWABLE_TYPE_ATTR = "drawableType"
SET_AS_ATTR = "setAs"

# drawableType の値 -> styleable 名
DRAWABLE_TYPES = {
    "shape": "Drawable_Shape",
    "selector": "Drawable_Selector",
    "layer_list": "Drawable_Layer",
    "ripple": "Drawable_Ripple",
    "level_list": "Drawable_Level",
    "clip": "Drawable_Clip",
    "inset": "Drawable_Inset",
    "scale": "Drawable_Scale",
    "animation": "Drawable_Animation",
}

# shapeXxx="shape2" のようなスロット指定 -> styleable 名
SHAPE_SLOTS = {
    "shape": "Drawable_Shape",
    "shape1": "Drawable_Shape1",
    "shape2": "Drawable_Shape2",
    "shape3": "Drawable_Shape3",
    "shape4": "Drawable_Shape4",
}

COMMON_STYLEABLE = "Drawable"

SLOT_ATTR_FAMILIES = (
    "shape",
    "selector",
    "layer",
    "ripple",
    "level",
    "clip",
    "inset",
    "scale",
    "anim",
)

STRUCTURAL_TAGS = frozenset(["layout", "fragment", "include", "requestFocus", "merge"])


def is_slot_attr(attr_name: str) -> bool:
    return attr_name.startswith(SLOT_ATTR_FAMILIES)


def is_structural_tag(tag_name: str) -> bool:
    return tag_name in STRUCTURAL_TAGS


def split_qualified(name: str) -> Tuple[Optional[str], str]:
    """
    lxml の Clark 表記 '{uri}local' を (uri, local) に分解する。
    名前空間なしなら (None, name)。
    """
    if name and name[0] == "{":
        uri, _, local = name[1:].partition("}")
        return uri, local
    return None, name
