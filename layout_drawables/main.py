# layout_drawables/main.py
import argparse
import logging
import sys

from .inflater.binder import DrawableBinder
from .inflater.interceptor import InterceptorChain, install
from .inflater.tree_builder import Context, TreeBuilder
from .parser.resource_resolver import ResourceResolver
from .parser.xml_parser import parse_dom, parse_layout_xml, read_manifest_package
from .schema.processing import AttributeCollector, Facet, ResourceManagers, register_layout_attributes


def _print_view(view, depth=0):
    pad = "  " * depth
    line = f"{pad}{type(view).__name__} <{view.name}>"
    for prop in ("background", "foreground", "drawable"):
        spec = getattr(view, prop)
        if spec is not None:
            groups = ",".join(g.value for g in spec.groups)
            line += f" {prop}={spec.drawable_type}[{groups}]"
    print(line)
    for ch in view.children:
        _print_view(ch, depth + 1)


def cmd_inflate(args) -> int:
    try:
        ir, resolver = parse_layout_xml(args.xml, args.values)
    except Exception as e:
        print(f"[ERROR] Failed to parse XML: {e}")
        return 1

    builder = TreeBuilder()
    if not install(builder, InterceptorChain(DrawableBinder(resolver=resolver))):
        print("[WARN] interceptor not installed; views are inflated without drawables")
    root = builder.inflate(ir, Context(builder))
    _print_view(root)
    return 0


def _build_facet(args) -> Facet:
    package = None
    if args.manifest:
        package = read_manifest_package(args.manifest)
    module = ResourceResolver(args.values)
    system = ResourceResolver(args.system_values) if args.system_values else None
    return Facet(
        module_name=args.module,
        app_project=not args.library,
        requires_android_model=args.android_model,
        manifest_package=package,
        resource_managers=ResourceManagers(module, system),
    )


def cmd_inspect(args) -> int:
    try:
        root = parse_dom(args.xml)
        facet = _build_facet(args)
    except Exception as e:
        print(f"[ERROR] Failed to parse XML: {e}")
        return 1

    errors = 0
    try:
        for el in root.walk():
            collector = AttributeCollector()
            groups = register_layout_attributes(facet, el, collector)
            if not groups:
                continue
            print(f"{el.tag}: {', '.join(g.value for g in groups)}")
            for attr in el.attrs:
                handle = collector.lookup(attr.name, attr.namespace)
                if handle is None:
                    continue
                _, ok = handle.check(attr.value)
                if ok:
                    continue
                if handle.soft:
                    print(f"  [WARN] {attr.name}={attr.value!r} does not match {handle.converter!r}")
                else:
                    errors += 1
                    print(f"  [ERROR] {attr.name}={attr.value!r} does not match {handle.converter!r}")
    except Exception as e:
        print(f"[ERROR] Processing failed: {e}")
        return 2
    return 1 if errors else 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="python -m layout_drawables.main",
        description="Inline drawable attributes for Android layout XML: inflate and inspect.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_inf = sub.add_parser("inflate", help="Inflate a layout and print the view tree with drawables")
    p_inf.add_argument("--xml", required=True, help="Path to layout XML (e.g. res/layout/activity_main.xml)")
    p_inf.add_argument("--values", help="Path to res/values directory for resource resolution")
    p_inf.set_defaults(func=cmd_inflate)

    p_ins = sub.add_parser("inspect", help="Resolve schema groups and check attribute values")
    p_ins.add_argument("--xml", required=True, help="Path to layout XML")
    p_ins.add_argument("--values", required=True, help="Path to res/values directory holding attrs.xml")
    p_ins.add_argument("--system-values", dest="system_values", help="res/values of the platform (android: attrs)")
    p_ins.add_argument("--manifest", help="Path to AndroidManifest.xml")
    p_ins.add_argument("--module", default="app", help="Module name")
    p_ins.add_argument("--library", action="store_true", help="Treat the module as a library module")
    p_ins.add_argument("--android-model", dest="android_model", action="store_true",
                       help="Module uses the newer build model (always res-auto namespace)")
    p_ins.set_defaults(func=cmd_inspect)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    print(f"[CONFIG] command= {args.command}")
    print(f"[CONFIG] xml= {args.xml}")
    print(f"[CONFIG] values= {args.values or '<none>'}")

    code = args.func(args)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
