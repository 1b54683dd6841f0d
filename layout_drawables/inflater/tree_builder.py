# layout_drawables/inflater/tree_builder.py
"""
Minimal host tree-builder: turns the dict IR from ``parse_layout_xml`` into
live ``View`` instances. Creation hooks follow the two-slot model the
interceptor plugs into (``_factory2`` primary, ``_factory`` secondary).
"""
import logging
from typing import Callable, Dict, Optional, Type

logger = logging.getLogger(__name__)

PrimaryHook = Callable[..., Optional["View"]]      # (parent, name, context, attrs)
SecondaryHook = Callable[..., Optional["View"]]    # (name, context, attrs)


class ComponentNotFound(LookupError):
    """指定 prefix ではクラスが解決できない（致命的ではない）。"""


class View:
    def __init__(self, name: str, attrs=None):
        self.name = name
        self.attrs = attrs
        self.parent: Optional["View"] = None
        self.children = []
        self.background = None
        self.foreground = None
        self.drawable = None

    def add_child(self, child: "View"):
        child.parent = self
        self.children.append(child)

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class TextView(View): pass
class Button(TextView): pass
class EditText(TextView): pass
class ImageView(View): pass
class ViewGroup(View): pass
class LinearLayout(ViewGroup): pass
class FrameLayout(ViewGroup): pass
class RelativeLayout(ViewGroup): pass
class ViewStub(View): pass
class WebView(View): pass


COMPONENTS: Dict[str, Type[View]] = {
    "android.view.View": View,
    "android.view.ViewGroup": ViewGroup,
    "android.view.ViewStub": ViewStub,
    "android.widget.TextView": TextView,
    "android.widget.Button": Button,
    "android.widget.EditText": EditText,
    "android.widget.ImageView": ImageView,
    "android.widget.LinearLayout": LinearLayout,
    "android.widget.FrameLayout": FrameLayout,
    "android.widget.RelativeLayout": RelativeLayout,
    "android.webkit.WebView": WebView,
}


class Context:
    def __init__(self, builder: "TreeBuilder" = None):
        self.builder = builder


class TreeBuilder:
    # 生成フックのスロット。set_factory2 は一度しか呼べない
    _factory: Optional[SecondaryHook] = None
    _factory2: Optional[PrimaryHook] = None

    def __init__(self, components: Dict[str, Type[View]] = None):
        self.components = dict(COMPONENTS if components is None else components)
        self._factory_set = False

    @staticmethod
    def from_context(context: Context) -> "TreeBuilder":
        if context.builder is None:
            context.builder = TreeBuilder()
        return context.builder

    def set_factory(self, hook: SecondaryHook):
        if self._factory_set:
            raise RuntimeError("A factory has already been set on this TreeBuilder")
        self._factory_set = True
        self._factory = hook

    def set_factory2(self, hook: PrimaryHook):
        if self._factory_set:
            raise RuntimeError("A factory has already been set on this TreeBuilder")
        self._factory_set = True
        self._factory2 = hook

    def create_view(self, name: str, prefix: Optional[str], attrs) -> View:
        qualified = (prefix or "") + name
        cls = self.components.get(qualified)
        if cls is None:
            raise ComponentNotFound(qualified)
        return cls(name, attrs)

    def _create_from_tag(self, parent, name, context, attrs) -> View:
        view = None
        if self._factory2 is not None:
            view = self._factory2(parent, name, context, attrs)
        elif self._factory is not None:
            view = self._factory(name, context, attrs)
        if view is not None:
            return view
        try:
            if "." in name:
                return self.create_view(name, None, attrs)
            return self.create_view(name, "android.view.", attrs)
        except ComponentNotFound:
            logger.debug("no component for %s; using plain View", name)
            return View(name, attrs)

    def inflate(self, ir: dict, context: Optional[Context] = None, parent: Optional[View] = None) -> View:
        """
        ir: parse_layout_xml が返す dict IR
        """
        context = context or Context(self)
        view = self._create_from_tag(parent, ir["type"], context, ir.get("attrs"))
        if parent is not None:
            parent.add_child(view)
        for ch in ir.get("children", []) or []:
            self.inflate(ch, context, view)
        return view


class WrappingTreeBuilder(TreeBuilder):
    """既存ビルダーを包むシム。デフォルト生成は base_builder 側で行う。"""

    def __init__(self, base: TreeBuilder):
        super().__init__(base.components)
        self._base = base

    @property
    def base_builder(self) -> TreeBuilder:
        return self._base
