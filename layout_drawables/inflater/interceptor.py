# layout_drawables/inflater/interceptor.py
"""
Creation hook that lets every inflated node pick up its inline drawable.
The chain wraps whatever hooks the tree-builder already had, and is written
into the builder's primary slot even when ``set_factory2`` was already used.
"""
import inspect
import logging
import threading
from typing import NamedTuple, Optional

from .tree_builder import ComponentNotFound, Context, TreeBuilder, WrappingTreeBuilder

logger = logging.getLogger(__name__)

COMPONENT_NAMESPACES = (
    "android.widget.",
    "android.webkit.",
    "android.app.",
    "android.view.",
)


class InterceptorChain:
    def __init__(self, binder):
        self.binder = binder
        self._primary = None
        self._secondary = None
        self._captured = False

    @property
    def captured(self) -> bool:
        return self._captured

    @property
    def previous_primary(self):
        return self._primary

    @property
    def previous_secondary(self):
        return self._secondary

    def capture(self, primary, secondary):
        """インストール時に一度だけ、既存フックを取り込む。"""
        if self._captured:
            raise RuntimeError("previous hooks were already captured")
        self._primary = primary
        self._secondary = secondary
        self._captured = True

    def __call__(self, parent, name: str, context: Context, attrs):
        result = None
        if self._primary is not None:
            result = self._primary(parent, name, context, attrs)
        if self._secondary is not None and result is None:
            result = self._secondary(name, context, attrs)
        # ViewStub をここで作ると遅延 inflate の状態が壊れる
        if name.endswith("ViewStub"):
            return None

        if result is None and "." not in name:
            builder = self._default_builder(context)
            for prefix in COMPONENT_NAMESPACES:
                try:
                    result = builder.create_view(name, prefix, attrs)
                except ComponentNotFound:
                    continue
                if result is not None:
                    break

        if result is not None:
            self.binder.apply(result, attrs)
        return result

    def create_view(self, name: str, context: Context, attrs):
        return self(None, name, context, attrs)

    @staticmethod
    def _default_builder(context: Context) -> TreeBuilder:
        builder = TreeBuilder.from_context(context)
        if isinstance(builder, WrappingTreeBuilder):
            return builder.base_builder
        return builder


class InstallResult(NamedTuple):
    installed: bool
    previous_primary: object = None
    previous_secondary: object = None


class HookInstaller:
    def try_install(self, builder: TreeBuilder, chain: InterceptorChain) -> InstallResult:
        raise NotImplementedError


class SlotLookup:
    """
    ホストの TreeBuilder からフックスロットを探す処理。結果（見つかった名前 / None）は
    最初の試行で確定し、以後は再探索しない。
    """

    def __init__(self, owner=TreeBuilder, slot_name: str = "_factory2"):
        self.owner = owner
        self.slot_name = slot_name
        self._lock = threading.RLock()
        self._attempted = False
        self._slot: Optional[str] = None
        self._reported = set()

    @property
    def attempted(self) -> bool:
        return self._attempted

    def get(self) -> Optional[str]:
        with self._lock:
            if not self._attempted:
                self._slot = self._lookup()
                self._attempted = True
            return self._slot

    def _lookup(self) -> Optional[str]:
        try:
            inspect.getattr_static(self.owner, self.slot_name)
        except AttributeError:
            self.report_once(
                "lookup",
                "could not find slot %r on %s; inline drawables will not be available",
                self.slot_name, self.owner.__name__,
            )
            return None
        return self.slot_name

    def report_once(self, cause: str, msg: str, *args):
        with self._lock:
            if cause in self._reported:
                return
            self._reported.add(cause)
        logger.error(msg, *args)

    def reset(self):
        with self._lock:
            self._attempted = False
            self._slot = None
            self._reported.clear()


_slot_lookup = SlotLookup()


def slot_lookup() -> SlotLookup:
    return _slot_lookup


class SlotHookInstaller(HookInstaller):
    def __init__(self, lookup: Optional[SlotLookup] = None):
        self.lookup = lookup or _slot_lookup

    def try_install(self, builder, chain):
        slot = self.lookup.get()
        if slot is None:
            return InstallResult(False)

        primary = getattr(builder, slot, None)
        secondary = getattr(builder, "_factory", None)
        if isinstance(primary, InterceptorChain):
            return InstallResult(True, primary.previous_primary, primary.previous_secondary)

        if chain.captured:
            # 一つの chain が取り込めるのは一つの builder の既存フックだけ
            self.lookup.report_once(
                "rebind",
                "interceptor %r is already bound to another builder; not installed on %r",
                chain, builder,
            )
            return InstallResult(False, primary, secondary)

        try:
            object.__setattr__(builder, slot, chain)
        except (AttributeError, TypeError) as e:
            self.lookup.report_once(
                "write:" + type(e).__name__,
                "could not set the hook on %r (%s); inline drawables will not be available",
                builder, e,
            )
            return InstallResult(False, primary, secondary)
        chain.capture(primary, secondary)
        return InstallResult(True, primary, secondary)


def install(builder: TreeBuilder, chain: InterceptorChain, installer: Optional[HookInstaller] = None) -> bool:
    """builder に chain を強制的に差し込む。失敗してもホストは落とさない。"""
    installer = installer or SlotHookInstaller()
    result = installer.try_install(builder, chain)
    if result.installed:
        logger.debug("interceptor installed on %r", builder)
    return result.installed
