import pytest

from layout_drawables.inflater.interceptor import slot_lookup
from layout_drawables.parser.resource_resolver import ResourceResolver
from layout_drawables.schema.processing import app_project_probe

ATTRS_XML = """<?xml version="1.0" encoding="utf-8"?>
<resources>
    <attr name="shapeSolidColor" format="color|reference"/>
    <attr name="drawableType">
        <enum name="shape" value="0"/>
        <enum name="ripple" value="3"/>
    </attr>
    <declare-styleable name="Drawable">
        <attr name="drawableType"/>
        <attr name="setAs" format="string|color"/>
        <attr name="android:background"/>
    </declare-styleable>
    <declare-styleable name="Drawable_Shape">
        <attr name="shapeSolidColor"/>
        <attr name="shapeCornerRadius" format="dimension"/>
        <attr name="shapeType">
            <enum name="rectangle" value="0"/>
            <enum name="oval" value="1"/>
        </attr>
    </declare-styleable>
    <declare-styleable name="Drawable_Ripple">
        <attr name="rippleColor" format="color"/>
        <attr name="rippleContent" format="reference|enum">
            <enum name="shape" value="0"/>
        </attr>
    </declare-styleable>
    <declare-styleable name="Drawable_Shape2">
        <attr name="shape2SolidColor" format="color"/>
    </declare-styleable>
</resources>
"""

LAYOUT_XML = """<?xml version="1.0" encoding="utf-8"?>
<LinearLayout xmlns:android="http://schemas.android.com/apk/res/android"
    xmlns:app="http://schemas.android.com/apk/res-auto"
    android:orientation="vertical">
    <TextView
        android:text="hello"
        app:drawableType="shape"
        app:shapeSolidColor="#FF0000"
        app:shapeCornerRadius="4dp"/>
    <Button
        app:drawableType="ripple"
        app:setAs="foreground"
        app:rippleColor="blue"/>
    <ViewStub android:layout="@layout/stub"/>
    <include layout="@layout/other"/>
</LinearLayout>
"""


@pytest.fixture(autouse=True)
def _reset_process_caches():
    slot_lookup().reset()
    app_project_probe().reset()
    yield
    slot_lookup().reset()
    app_project_probe().reset()


@pytest.fixture
def values_dir(tmp_path):
    d = tmp_path / "values"
    d.mkdir()
    (d / "attrs.xml").write_text(ATTRS_XML, encoding="utf-8")
    (d / "colors.xml").write_text(
        '<resources><color name="primary">#112233</color></resources>', encoding="utf-8")
    return d


@pytest.fixture
def layout_path(tmp_path):
    p = tmp_path / "activity_main.xml"
    p.write_text(LAYOUT_XML, encoding="utf-8")
    return p


@pytest.fixture
def resolver(values_dir):
    return ResourceResolver(str(values_dir))
