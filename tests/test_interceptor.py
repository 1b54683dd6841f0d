import logging

from layout_drawables.inflater.interceptor import (
    InterceptorChain,
    SlotHookInstaller,
    SlotLookup,
    install,
)
from layout_drawables.inflater.tree_builder import (
    Button,
    Context,
    TextView,
    TreeBuilder,
    View,
    WebView,
    WrappingTreeBuilder,
)


class RecordingBinder:
    def __init__(self):
        self.calls = []

    def apply(self, view, attrs):
        self.calls.append((view, attrs))


def _chain(primary=None, secondary=None):
    binder = RecordingBinder()
    chain = InterceptorChain(binder)
    chain.capture(primary, secondary)
    return chain, binder


# --- intercept ------------------------------------------------

def test_primary_hook_result_is_bound():
    made = View("Custom")
    seen = []

    def primary(parent, name, context, attrs):
        seen.append((parent, name))
        return made

    chain, binder = _chain(primary=primary)
    assert chain(None, "Custom", Context(TreeBuilder()), {"a": "1"}) is made
    assert seen == [(None, "Custom")]
    assert binder.calls == [(made, {"a": "1"})]


def test_secondary_hook_runs_only_when_primary_returns_nothing():
    made = View("Custom")
    order = []

    def primary(parent, name, context, attrs):
        order.append("primary")
        return None

    def secondary(name, context, attrs):
        order.append("secondary")
        return made

    chain, binder = _chain(primary, secondary)
    assert chain(None, "Custom", Context(TreeBuilder()), None) is made
    assert order == ["primary", "secondary"]
    assert len(binder.calls) == 1


def test_default_instantiation_tries_prefixes_in_order():
    chain, binder = _chain()
    ctx = Context(TreeBuilder())
    assert isinstance(chain(None, "Button", ctx, None), Button)
    assert isinstance(chain(None, "WebView", ctx, None), WebView)
    assert len(binder.calls) == 2


def test_widget_prefix_wins_over_view_prefix():
    builder = TreeBuilder({"android.widget.Thing": TextView, "android.view.Thing": View})
    chain, _ = _chain()
    assert type(chain(None, "Thing", Context(builder), None)) is TextView


def test_nothing_matches_returns_none_without_binding():
    chain, binder = _chain()
    assert chain(None, "NoSuchWidget", Context(TreeBuilder()), None) is None
    assert chain(None, "com.example.Custom", Context(TreeBuilder()), None) is None
    assert binder.calls == []


def test_view_stub_is_never_constructed():
    calls = []

    def primary(parent, name, context, attrs):
        calls.append(name)
        return View(name)

    chain, binder = _chain(primary=primary)
    assert chain(None, "ViewStub", Context(TreeBuilder()), None) is None
    assert calls == ["ViewStub"]
    assert binder.calls == []


def test_wrapping_builder_is_unwrapped_for_default_creation():
    base = TreeBuilder({"android.widget.Only": TextView})
    shim = WrappingTreeBuilder(base)
    shim.components = {}
    chain, _ = _chain()
    assert isinstance(chain(None, "Only", Context(shim), None), TextView)


def test_secondary_signature_forwards_without_parent():
    chain, binder = _chain()
    assert isinstance(chain.create_view("TextView", Context(TreeBuilder()), None), TextView)
    assert len(binder.calls) == 1


# --- force install --------------------------------------------

def test_install_bypasses_single_registration_and_captures_previous():
    builder = TreeBuilder()

    def old_primary(parent, name, context, attrs):
        return None

    builder.set_factory2(old_primary)
    chain = InterceptorChain(RecordingBinder())
    assert install(builder, chain) is True
    assert builder._factory2 is chain
    assert chain.previous_primary is old_primary
    assert chain.previous_secondary is None


def test_install_twice_does_not_wrap_itself():
    builder = TreeBuilder()
    first = InterceptorChain(RecordingBinder())
    assert install(builder, first)
    assert install(builder, InterceptorChain(RecordingBinder()))
    assert builder._factory2 is first
    assert first.previous_primary is None


def test_slot_lookup_runs_once():
    class CountingLookup(SlotLookup):
        count = 0

        def _lookup(self):
            CountingLookup.count += 1
            return super()._lookup()

    lookup = CountingLookup()
    installer = SlotHookInstaller(lookup)
    installer.try_install(TreeBuilder(), InterceptorChain(RecordingBinder()))
    installer.try_install(TreeBuilder(), InterceptorChain(RecordingBinder()))
    assert CountingLookup.count == 1


def test_missing_slot_degrades_and_logs_once(caplog):
    class OtherHost:
        pass

    lookup = SlotLookup(owner=OtherHost)
    installer = SlotHookInstaller(lookup)
    with caplog.at_level(logging.ERROR):
        for _ in range(3):
            builder = TreeBuilder()
            assert install(builder, InterceptorChain(RecordingBinder()), installer) is False
            assert builder._factory2 is None
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1


def test_unwritable_slot_degrades_and_logs_once(caplog):
    class LockedBuilder(TreeBuilder):
        @property
        def _factory2(self):
            return None

    installer = SlotHookInstaller(SlotLookup())
    with caplog.at_level(logging.ERROR):
        for _ in range(2):
            assert install(LockedBuilder(), InterceptorChain(RecordingBinder()), installer) is False
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1


def test_inflate_runs_binder_once_per_created_node():
    builder = TreeBuilder()
    binder = RecordingBinder()
    install(builder, InterceptorChain(binder))
    ir = {
        "type": "LinearLayout",
        "attrs": None,
        "children": [
            {"type": "TextView", "attrs": None, "children": []},
            {"type": "ViewStub", "attrs": None, "children": []},
        ],
    }
    root = builder.inflate(ir)
    assert [type(v).__name__ for v in root.children] == ["TextView", "ViewStub"]
    assert [v.name for v, _ in binder.calls] == ["LinearLayout", "TextView"]


def test_same_chain_on_second_builder_is_refused_without_raising(caplog):
    chain = InterceptorChain(RecordingBinder())
    first, second = TreeBuilder(), TreeBuilder()
    assert install(first, chain) is True
    with caplog.at_level(logging.ERROR):
        assert install(second, chain) is False
        assert install(TreeBuilder(), chain) is False
    assert first._factory2 is chain
    assert second._factory2 is None
    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 1


def test_chain_can_be_installed_after_a_failed_write():
    class LockedBuilder(TreeBuilder):
        @property
        def _factory2(self):
            return None

    chain = InterceptorChain(RecordingBinder())
    installer = SlotHookInstaller(SlotLookup())
    assert install(LockedBuilder(), chain, installer) is False
    assert chain.captured is False

    builder = TreeBuilder()
    assert install(builder, chain, installer) is True
    assert builder._factory2 is chain


def test_previous_secondary_hook_is_captured_and_used_during_inflate():
    made = []

    def old_secondary(name, context, attrs):
        if name == "Custom":
            view = View("Custom", attrs)
            made.append(view)
            return view
        return None

    builder = TreeBuilder()
    builder.set_factory(old_secondary)
    binder = RecordingBinder()
    chain = InterceptorChain(binder)
    assert install(builder, chain) is True
    assert chain.previous_secondary is old_secondary
    assert chain.previous_primary is None

    root = builder.inflate({"type": "Custom", "attrs": {"k": "v"}, "children": []})
    assert made == [root]
    assert binder.calls == [(root, {"k": "v"})]
