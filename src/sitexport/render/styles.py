"""Style resolution — turn props and authored styles into concrete CSS maps.

Precedence, highest first: authored ``styles`` > explicit props > preset.
Every resolver returns a fresh ordered ``dict`` and depends only on its
inputs, so the same component always serializes to the same ``style``
attribute.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sitexport.tree.values import as_bool, as_str, css_length

if TYPE_CHECKING:
    from sitexport._types import StyleMap
    from sitexport.tree.nodes import ComponentInstance


# ---------------------------------------------------------------------------
# Layout presets
# ---------------------------------------------------------------------------

DEFAULT_LAYOUT = "flex-column"

LAYOUT_PRESETS: dict[str, StyleMap] = {
    "flex-column": {"display": "flex", "flexDirection": "column"},
    "flex-row": {"display": "flex", "flexDirection": "row"},
    "flex-wrap": {"display": "flex", "flexDirection": "row", "flexWrap": "wrap"},
    "grid-2col": {"display": "grid", "gridTemplateColumns": "repeat(2, 1fr)"},
    "grid-3col": {"display": "grid", "gridTemplateColumns": "repeat(3, 1fr)"},
    "grid-4col": {"display": "grid", "gridTemplateColumns": "repeat(4, 1fr)"},
    "grid-auto": {"display": "grid", "gridTemplateColumns": "repeat(auto-fit, minmax(200px, 1fr))"},
    "grid-20-80": {"display": "grid", "gridTemplateColumns": "20% 80%"},
    "grid-25-75": {"display": "grid", "gridTemplateColumns": "25% 75%"},
    "grid-33-67": {"display": "grid", "gridTemplateColumns": "33.33% 66.67%"},
    "grid-40-60": {"display": "grid", "gridTemplateColumns": "40% 60%"},
    "grid-60-40": {"display": "grid", "gridTemplateColumns": "60% 40%"},
    "grid-67-33": {"display": "grid", "gridTemplateColumns": "66.67% 33.33%"},
    "grid-75-25": {"display": "grid", "gridTemplateColumns": "75% 25%"},
    "grid-80-20": {"display": "grid", "gridTemplateColumns": "80% 20%"},
}

_ROW_LAYOUTS = frozenset({"flex-row", "flex-wrap"})

# Container props copied verbatim when set (applied after the preset)
_CONTAINER_PROPS = ("padding", "gap", "minHeight", "alignItems", "justifyContent", "flexWrap")


def effective_layout(component: ComponentInstance) -> str:
    """Layout name from ``layoutType`` (builder) or ``layoutMode`` (templates)."""
    name = as_str(component.prop("layoutType", "layoutMode"), DEFAULT_LAYOUT)
    return name if name in LAYOUT_PRESETS else DEFAULT_LAYOUT


def is_row_layout(layout: str) -> bool:
    """True for layouts whose layout children share the row (``flex: 1``)."""
    return layout in _ROW_LAYOUTS


def resolve_container_styles(component: ComponentInstance, depth: int) -> StyleMap:
    """Resolve the ``style`` map of a Container or ScrollableContainer.

    ``width`` and ``maxWidth`` are never carried over from authored styles;
    the width follows the parent layout and ``maxWidth`` comes from props.
    At ``depth > 0`` the nested transparency rule strips builder-default
    card styling.
    """
    carried = {k: v for k, v in component.styles.items() if k not in ("width", "maxWidth")}
    if depth > 0:
        carried = strip_default_surface(carried)

    resolved: StyleMap = dict(LAYOUT_PRESETS[effective_layout(component)])

    for name in _CONTAINER_PROPS:
        value = css_length(component.props.get(name))
        if value:
            resolved[name] = value

    max_width = css_length(component.props.get("maxWidth"))
    if max_width and max_width != "none":
        resolved["maxWidth"] = max_width
    if as_bool(component.props.get("centerContent")):
        resolved["marginLeft"] = "auto"
        resolved["marginRight"] = "auto"

    if component.kind == "ScrollableContainer":
        resolved["overflow"] = "auto"
        max_height = css_length(component.props.get("maxHeight"))
        if max_height:
            resolved["maxHeight"] = max_height

    resolved.update(carried)
    return resolved


# ---------------------------------------------------------------------------
# Nested transparency rule
# ---------------------------------------------------------------------------

_WHITE = frozenset({
    "white", "#fff", "#ffffff", "#ffff", "#ffffffff",
    "rgb(255,255,255)", "rgba(255,255,255,1)", "rgba(255,255,255,1.0)",
    "hsl(0,0%,100%)",
})
_NEUTRAL = frozenset({"transparent", "initial", "inherit", "unset", "none"})
_ZERO_ALPHA_RE = re.compile(r"^(?:rgba|hsla)\(.*,0*\.?0*\)$")
_DEFAULT_RADII = frozenset({"0", "0px", "4px", "8px", "12px", "16px"})
_DEFAULT_BORDERS = frozenset({"none", "0", "0px", "0none", "1pxsolidtransparent"})
_SOFT_SHADOWS = ("rgba(0,0,0,0.1)", "rgba(0,0,0,0.05)", "rgba(0,0,0,.1)", "rgba(0,0,0,.05)")


def _compact(value: str) -> str:
    return re.sub(r"\s+", "", value).lower()


def has_intentional_background(styles: StyleMap) -> bool:
    """A gradient or ``url(...)`` image counts as deliberate decoration."""
    for key in ("background", "backgroundImage"):
        value = styles.get(key, "").lower()
        if "gradient" in value or "url(" in value:
            return True
    return False


def is_default_background_color(value: str) -> bool:
    """Unset, any notation of white, fully transparent, ``initial`` or ``inherit``."""
    compact = _compact(value)
    if not compact:
        return True
    return compact in _WHITE or compact in _NEUTRAL or bool(_ZERO_ALPHA_RE.match(compact))


def strip_default_surface(styles: StyleMap) -> StyleMap:
    """Remove builder-default card styling from a nested container.

    Without an intentional background, a default (or unset)
    ``backgroundColor`` drops both ``backgroundColor`` and ``background``;
    ``borderRadius``, ``boxShadow`` and ``border`` go unless they hold an
    explicit non-default value.  Explicit non-default values always survive.
    """
    if has_intentional_background(styles):
        return dict(styles)

    result = dict(styles)
    if is_default_background_color(styles.get("backgroundColor", "")):
        result.pop("backgroundColor", None)
        result.pop("background", None)

    if _compact(styles.get("borderRadius", "")) in _DEFAULT_RADII | {""}:
        result.pop("borderRadius", None)

    shadow = _compact(styles.get("boxShadow", ""))
    if shadow in ("", "none") or any(s in shadow for s in _SOFT_SHADOWS):
        result.pop("boxShadow", None)

    if _compact(styles.get("border", "")) in _DEFAULT_BORDERS | {""}:
        result.pop("border", None)

    return result


# ---------------------------------------------------------------------------
# Buttons
# ---------------------------------------------------------------------------

BUTTON_VARIANTS: dict[str, StyleMap] = {
    "primary": {"backgroundColor": "#007bff", "color": "white"},
    "secondary": {"backgroundColor": "#6c757d", "color": "white"},
    "success": {"backgroundColor": "#28a745", "color": "white"},
    "danger": {"backgroundColor": "#dc3545", "color": "white"},
    "warning": {"backgroundColor": "#ffc107", "color": "#212529"},
    "outline": {"backgroundColor": "transparent", "color": "#007bff", "border": "2px solid #007bff"},
    "outline-light": {"backgroundColor": "transparent", "color": "#ffffff", "border": "2px solid #ffffff"},
    "link": {"backgroundColor": "transparent", "color": "#007bff", "textDecoration": "underline"},
}

BUTTON_SIZES: dict[str, StyleMap] = {
    "small": {"padding": "6px 12px", "fontSize": "13px"},
    "medium": {"padding": "8px 16px", "fontSize": "14px"},
    "large": {"padding": "12px 24px", "fontSize": "16px"},
}


def button_variant(component: ComponentInstance) -> str:
    variant = as_str(component.props.get("variant"), "primary")
    return variant if variant in BUTTON_VARIANTS else "primary"


def button_size(component: ComponentInstance) -> str:
    size = as_str(component.props.get("size"), "medium")
    return size if size in BUTTON_SIZES else "medium"


def resolve_button_styles(component: ComponentInstance) -> StyleMap:
    """Base button look, then variant, then size, then authored styles."""
    full_width = as_bool(component.props.get("fullWidth"))
    disabled = as_bool(component.props.get("disabled"))
    resolved: StyleMap = {
        "display": "block" if full_width else "inline-block",
        "width": "100%" if full_width else "auto",
        "fontWeight": "500",
        "textAlign": "center",
        "whiteSpace": "nowrap",
        "verticalAlign": "middle",
        "userSelect": "none",
        "borderRadius": "6px",
        "transition": "all 0.2s",
        "cursor": "not-allowed" if disabled else "pointer",
        "opacity": "0.65" if disabled else "1",
        "border": "none",
    }
    resolved.update(BUTTON_VARIANTS[button_variant(component)])
    resolved.update(BUTTON_SIZES[button_size(component)])
    resolved.update(component.styles)
    return resolved


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ImageStyles:
    """The three nested style maps of an image (container, wrapper, img)."""

    container: StyleMap
    wrapper: StyleMap
    img: StyleMap


def resolve_image_styles(component: ComponentInstance, *, has_parent: bool) -> ImageStyles:
    """Resolve the container/wrapper/img maps of an Image component.

    Width and height come from props, then the stored ``size``, then a
    parent-aware default (``100%`` inside a parent, ``auto`` at the root).
    An explicit width disables ``maxWidth: 100%`` and flex stretching.
    """
    props_width = css_length(component.props.get("width"))
    props_height = css_length(component.props.get("height"))
    stored_width = component.size.get("width", "")
    stored_height = component.size.get("height", "")

    explicit_width = bool(props_width or stored_width)
    explicit_height = any(h and h != "auto" for h in (props_height, stored_height))

    container: StyleMap = {
        "width": props_width or stored_width or ("100%" if has_parent else "auto"),
        "height": props_height or stored_height or "auto",
    }
    if not explicit_width:
        container["maxWidth"] = "100%"
    container.update({"position": "relative", "overflow": "hidden", "boxSizing": "border-box"})
    if explicit_width:
        container.update({"flexShrink": "0", "flexGrow": "0"})
    container.update(component.styles)

    aspect_ratio = as_str(component.props.get("aspectRatio"), "auto")
    wrapper: StyleMap = {
        "width": "100%",
        "height": "100%" if explicit_height else "auto",
    }
    if not explicit_height and aspect_ratio != "auto":
        wrapper["aspectRatio"] = aspect_ratio
    wrapper.update({
        "backgroundColor": as_str(component.props.get("placeholderColor"), "#e0e0e0"),
        "borderRadius": css_length(component.props.get("borderRadius")) or "0px",
        "overflow": "hidden",
        "position": "relative",
        "display": "flex",
        "alignItems": "center",
        "justifyContent": "center",
    })

    img: StyleMap = {
        "width": "100%",
        "height": "100%",
        "objectFit": as_str(component.props.get("objectFit"), "cover"),
        "objectPosition": as_str(component.props.get("objectPosition"), "center"),
    }
    return ImageStyles(container=container, wrapper=wrapper, img=img)


# ---------------------------------------------------------------------------
# Navbars
# ---------------------------------------------------------------------------

NAVBAR_LAYOUTS = ("default", "centered", "split", "minimal")

_NAVBAR_JUSTIFY = {
    "centered": "center",
    "split": "space-between",
    "minimal": "flex-start",
    "default": "space-between",
}


@dataclass(frozen=True, slots=True)
class NavbarStyles:
    """Resolved style maps for the parts of a navbar."""

    layout: str
    container: StyleMap
    brand: StyleMap
    brand_image: StyleMap
    list: StyleMap
    item: StyleMap
    link: StyleMap
    active_link: StyleMap
    toggle: StyleMap
    toggle_bar: StyleMap


def resolve_navbar_styles(component: ComponentInstance) -> NavbarStyles:
    """Resolve every navbar style map from props and authored styles."""
    styles = component.styles
    layout = as_str(component.props.get("layout"), "default")
    if layout not in NAVBAR_LAYOUTS:
        layout = "default"
    text_color = styles.get("textColor") or styles.get("color") or "#333333"
    accent = styles.get("accentColor") or "#007bff"

    container: StyleMap = {
        "display": "flex",
        "alignItems": "center",
        "justifyContent": _NAVBAR_JUSTIFY[layout],
        "width": "100%",
        "minHeight": "40px",
        "backgroundColor": styles.get("backgroundColor") or "#ffffff",
        "color": text_color,
        "padding": styles.get("padding") or "0 20px",
        "boxShadow": styles.get("boxShadow") or "0 2px 4px rgba(0,0,0,0.1)",
        "borderBottom": styles.get("borderBottom") or "1px solid #e0e0e0",
        "fontFamily": styles.get("fontFamily") or "inherit",
        "fontSize": styles.get("fontSize") or "16px",
        "boxSizing": "border-box",
        "transition": "all 0.3s ease",
    }
    if as_bool(component.props.get("sticky")) or component.kind == "NavbarSticky":
        container.update({"position": "sticky", "top": "0", "zIndex": "1000"})
    if styles.get("backdropFilter"):
        container["backdropFilter"] = styles["backdropFilter"]

    def link(active: bool) -> StyleMap:
        return {
            "display": "flex",
            "alignItems": "center",
            "padding": "8px 12px",
            "textDecoration": "none",
            "color": accent if active else text_color,
            "fontWeight": "600" if active else "400",
            "borderBottom": f"2px solid {accent if active else 'transparent'}",
            "transition": "all 0.2s ease",
            "whiteSpace": "nowrap",
        }

    return NavbarStyles(
        layout=layout,
        container=container,
        brand={
            "display": "flex",
            "alignItems": "center",
            "gap": "10px",
            "textDecoration": "none",
            "color": text_color,
            "fontWeight": "600",
            "fontSize": "1.25em",
        },
        brand_image={"height": "32px", "width": "auto"},
        list={
            "display": "flex",
            "flexDirection": "row",
            "alignItems": "center",
            "gap": "8px",
            "listStyle": "none",
            "margin": "0",
            "padding": "0",
        },
        item={"margin": "0", "listStyle": "none"},
        link=link(False),
        active_link=link(True),
        toggle={
            "display": "none",
            "flexDirection": "column",
            "justifyContent": "space-around",
            "width": "24px",
            "height": "20px",
            "background": "transparent",
            "border": "none",
            "cursor": "pointer",
            "padding": "0",
        },
        toggle_bar={
            "width": "24px",
            "height": "3px",
            "backgroundColor": text_color,
            "borderRadius": "2px",
            "transition": "all 0.3s ease",
        },
    )
