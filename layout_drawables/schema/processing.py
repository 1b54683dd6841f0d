# layout_drawables/schema/processing.py
"""
Registers the drawable attribute groups on a markup element for the tooling
layer (completion, validation). Group membership comes from
``resolve_schema_groups``; the definitions themselves come from the module's
attrs.xml registry.
"""
import logging
import threading
from typing import Callable, Dict, NamedTuple, Optional

from .converters import (
    Converter,
    ManifestPlaceholderConverter,
    get_converter,
    get_specific_converter,
    get_tools_converter,
    must_be_soft,
)
from .groups import resolve_schema_groups
from ..parser.resource_resolver import AttributeDefinition, StyleableDefinition
from ..utils import (
    ANDROID_NS_NAME,
    ANDROID_NS_NAME_PREFIX,
    ANDROID_URI,
    AUTO_URI,
    TOOLS_URI,
    URI_PREFIX,
)

logger = logging.getLogger(__name__)


class XmlName(NamedTuple):
    local_name: str
    namespace: Optional[str]


class ResolvedAttribute:
    """登録された属性の拡張ハンドル。コンバータは後から付く。"""

    def __init__(self, xml_name: XmlName, definition: AttributeDefinition, group_name: str):
        self.xml_name = xml_name
        self.definition = definition
        self.group_name = group_name
        self.converter: Optional[Converter] = None
        self.soft = False

    def set_converter(self, converter: Converter, soft: bool = False):
        self.converter = converter
        self.soft = soft

    def check(self, value: str):
        """(parsed, ok) を返す。コンバータなしは常に ok。"""
        if self.converter is None:
            return value, True
        parsed = self.converter.from_string(value)
        return parsed, parsed is not None

    def __repr__(self):
        return (f"ResolvedAttribute({self.xml_name.local_name!r}, ns={self.xml_name.namespace!r}, "
                f"group={self.group_name!r}, converter={self.converter!r}, soft={self.soft})")


RegistrationCallback = Callable[[XmlName, AttributeDefinition, str], Optional[ResolvedAttribute]]


class AttributeCollector:
    """RegistrationCallback の実装。同じ (name, ns) の二重登録には None を返す。"""

    def __init__(self):
        self.registered: Dict[XmlName, ResolvedAttribute] = {}

    def __call__(self, xml_name: XmlName, attr_def: AttributeDefinition, group_name: str):
        if xml_name in self.registered:
            return None
        handle = ResolvedAttribute(xml_name, attr_def, group_name)
        self.registered[xml_name] = handle
        return handle

    def lookup(self, local_name: str, namespace: Optional[str]) -> Optional[ResolvedAttribute]:
        return self.registered.get(XmlName(local_name, namespace))


class ResourceManagers:
    """resPackage -> 属性定義レジストリ（ResourceResolver）"""

    def __init__(self, module_resolver=None, system_resolver=None):
        self.module_resolver = module_resolver
        self.system_resolver = system_resolver

    def get_resource_manager(self, res_package: Optional[str]):
        if res_package is None:
            return self.module_resolver
        if res_package == ANDROID_NS_NAME:
            return self.system_resolver
        return None


class FacetConfiguration:
    def __init__(self, app_project: bool):
        self._app_project = app_project

    def is_app_project(self) -> bool:
        return self._app_project


class Facet:
    """
    モジュールの記述。
    requires_android_model: 新しいビルドモデル（Gradle 同期済み）かどうか
    manifest_package: AndroidManifest.xml の package（未解決なら None）
    """

    def __init__(self, module_name: str, app_project: bool = True, requires_android_model: bool = False,
                 manifest_package: Optional[str] = None, resource_managers: Optional[ResourceManagers] = None):
        self.module_name = module_name
        self.configuration = FacetConfiguration(app_project)
        self.requires_android_model = requires_android_model
        self.manifest_package = manifest_package
        self.resource_managers = resource_managers or ResourceManagers()

    def is_app_project(self) -> bool:
        return self.configuration.is_app_project()


class AppProjectProbe:
    """
    Facet が is_app_project() を持たない古いホストでは configuration 側に問い合わせる。
    configuration 経路が一度でも通ったら、以後はそちらを先に試す。
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._use_configuration = False

    @property
    def uses_configuration(self) -> bool:
        return self._use_configuration

    def reset(self):
        with self._lock:
            self._use_configuration = False

    @staticmethod
    def _configuration_probe(facet):
        probe = getattr(getattr(facet, "configuration", None), "is_app_project", None)
        return probe if callable(probe) else None

    def __call__(self, facet) -> bool:
        if self._use_configuration:
            probe = self._configuration_probe(facet)
            if probe is not None:
                return bool(probe())
        direct = getattr(facet, "is_app_project", None)
        if callable(direct):
            return bool(direct())
        probe = self._configuration_probe(facet)
        if probe is None:
            return False
        result = bool(probe())
        with self._lock:
            self._use_configuration = True
        return result


_app_project_probe = AppProjectProbe()


def app_project_probe() -> AppProjectProbe:
    return _app_project_probe


def is_app_project(facet) -> bool:
    return _app_project_probe(facet)


def get_namespace_uri(facet, res_package: Optional[str]) -> Optional[str]:
    """None は「未解決」（名前空間修飾なし）。"""
    if res_package is None:
        if not is_app_project(facet) or facet.requires_android_model:
            return AUTO_URI
        package = facet.manifest_package
        if package:
            return URI_PREFIX + package
    elif res_package == ANDROID_NS_NAME:
        return ANDROID_URI
    return None


def _resolve_converter(xml_name: XmlName, attr_def: AttributeDefinition, element) -> Optional[Converter]:
    converter = get_specific_converter(xml_name, element)
    if converter is not None:
        return converter
    if xml_name.namespace == TOOLS_URI:
        return get_tools_converter(attr_def)
    converter = get_converter(attr_def)
    if converter is not None and element.parent_of_kind("manifest") is not None:
        converter = ManifestPlaceholderConverter(converter)
    return converter


def _register_attribute(attr_def: AttributeDefinition, group_name: str, namespace: Optional[str],
                        element, callback: RegistrationCallback):
    name = attr_def.name
    if namespace != ANDROID_URI and name.startswith(ANDROID_NS_NAME_PREFIX):
        name = name[len(ANDROID_NS_NAME_PREFIX):]
        namespace = ANDROID_URI

    xml_name = XmlName(name, namespace)
    handle = callback(xml_name, attr_def, group_name)
    if handle is None:
        return
    converter = _resolve_converter(xml_name, attr_def, element)
    if converter is not None:
        handle.set_converter(converter, must_be_soft(converter, attr_def.formats))


def register_attributes_for_group(facet, element, group_name: str, res_package: Optional[str],
                                  callback: RegistrationCallback):
    manager = facet.resource_managers.get_resource_manager(res_package)
    if manager is None:
        return
    attr_defs = manager.attribute_definitions()
    if attr_defs is None:
        return

    namespace = get_namespace_uri(facet, res_package)
    styleable: Optional[StyleableDefinition] = attr_defs.get_styleable_by_name(group_name)
    if styleable is None:
        # 見つからないグループは黙ってスキップ（警告は出さない）
        logger.debug("styleable %s not found in %s", group_name, facet.module_name)
        return
    for attr_def in styleable.attributes:
        _register_attribute(attr_def, styleable.name, namespace, element, callback)


def register_layout_attributes(facet, element, callback: RegistrationCallback):
    """レイアウト要素に対して、該当する全グループの属性を登録する。"""
    if element.kind != "layout":
        return []
    groups = resolve_schema_groups(element.tag, element.attrs)
    for group in groups:
        register_attributes_for_group(facet, element, group.value, None, callback)
    return groups
