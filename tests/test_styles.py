"""Tests for sitexport.render.styles — deterministic style resolution."""

from __future__ import annotations

import pytest

from sitexport.render.markup import inline_style
from sitexport.render.styles import (
    is_default_background_color,
    resolve_button_styles,
    resolve_container_styles,
    resolve_image_styles,
    resolve_navbar_styles,
    strip_default_surface,
)
from sitexport.tree.nodes import ComponentInstance

from .conftest import component


def make(kind: str, **kwargs: object) -> ComponentInstance:
    return ComponentInstance.from_dict(component(kind, "x", **kwargs))  # type: ignore[arg-type]


class TestContainerStyles:
    """resolve_container_styles — preset, props, authored styles."""

    def test_default_layout(self) -> None:
        assert resolve_container_styles(make("Container"), 0) == {
            "display": "flex", "flexDirection": "column",
        }

    def test_grid_preset(self) -> None:
        styles = resolve_container_styles(make("Container", props={"layoutType": "grid-3col"}), 0)
        assert styles["gridTemplateColumns"] == "repeat(3, 1fr)"

    def test_layout_mode_alias_and_unknown_layout(self) -> None:
        assert resolve_container_styles(make("Container", props={"layoutMode": "flex-row"}), 0)[
            "flexDirection"
        ] == "row"
        assert resolve_container_styles(make("Container", props={"layoutType": "zigzag"}), 0)[
            "flexDirection"
        ] == "column"

    def test_props_applied_after_preset(self) -> None:
        styles = resolve_container_styles(make("Container", props={"padding": 20, "gap": "1rem"}), 0)
        assert styles["padding"] == "20px"
        assert styles["gap"] == "1rem"

    def test_authored_styles_win(self) -> None:
        styles = resolve_container_styles(
            make("Container", props={"padding": 20}, styles={"padding": "4px", "display": "block"}), 0,
        )
        assert styles["padding"] == "4px"
        assert styles["display"] == "block"

    def test_width_and_max_width_not_carried(self) -> None:
        styles = resolve_container_styles(
            make("Container", props={"maxWidth": 960}, styles={"width": "50%", "maxWidth": "10px"}), 0,
        )
        assert "width" not in styles
        assert styles["maxWidth"] == "960px"

    def test_center_content(self) -> None:
        styles = resolve_container_styles(make("Container", props={"centerContent": True}), 0)
        assert styles["marginLeft"] == styles["marginRight"] == "auto"

    def test_scrollable_container(self) -> None:
        styles = resolve_container_styles(make("ScrollableContainer", props={"maxHeight": 400}), 0)
        assert styles["overflow"] == "auto"
        assert styles["maxHeight"] == "400px"

    def test_deterministic(self) -> None:
        c = make("Container", props={"layoutType": "grid-2col", "gap": 8}, styles={"color": "red"})
        first = resolve_container_styles(c, 1)
        second = resolve_container_styles(c, 1)
        assert first == second
        assert list(first) == list(second)
        assert inline_style(first) == inline_style(second)


class TestNestedTransparency:
    """strip_default_surface — builder-default card styling on nested containers."""

    CARD = {
        "backgroundColor": "#FFFFFF",
        "borderRadius": "8px",
        "boxShadow": "0 2px 4px rgba(0, 0, 0, 0.1)",
        "border": "none",
        "color": "#333",
    }

    def test_root_keeps_card(self) -> None:
        styles = resolve_container_styles(make("Container", styles=self.CARD), 0)
        assert styles["backgroundColor"] == "#FFFFFF"
        assert styles["borderRadius"] == "8px"

    def test_nested_drops_default_card(self) -> None:
        styles = resolve_container_styles(make("Container", styles=self.CARD), 1)
        for key in ("backgroundColor", "borderRadius", "boxShadow", "border"):
            assert key not in styles
        assert styles["color"] == "#333"

    def test_explicit_values_survive(self) -> None:
        styles = strip_default_surface({
            "backgroundColor": "#f5f5f5",
            "borderRadius": "20px",
            "boxShadow": "0 10px 30px rgba(0,0,0,0.4)",
            "border": "1px solid #ddd",
        })
        assert styles == {
            "backgroundColor": "#f5f5f5",
            "borderRadius": "20px",
            "boxShadow": "0 10px 30px rgba(0,0,0,0.4)",
            "border": "1px solid #ddd",
        }

    def test_intentional_background_keeps_everything(self) -> None:
        styles = {"background": "linear-gradient(#fff, #000)", "borderRadius": "8px"}
        assert strip_default_surface(styles) == styles

    def test_plain_background_shorthand_dropped_without_colour(self) -> None:
        styles = strip_default_surface({"background": "red", "color": "#333"})
        assert styles == {"color": "#333"}

    def test_explicit_colour_keeps_shorthand(self) -> None:
        styles = strip_default_surface({"backgroundColor": "#f5f5f5", "background": "red"})
        assert styles == {"backgroundColor": "#f5f5f5", "background": "red"}

    @pytest.mark.parametrize(
        "value",
        ["", "white", "#fff", "rgb(255, 255, 255)", "rgba(255,255,255,1)", "transparent",
         "rgba(0, 0, 0, 0)", "inherit"],
    )
    def test_default_background_colors(self, value: str) -> None:
        assert is_default_background_color(value) is True

    @pytest.mark.parametrize("value", ["#f5f5f5", "red", "rgba(0,0,0,0.5)"])
    def test_non_default_background_colors(self, value: str) -> None:
        assert is_default_background_color(value) is False


class TestButtonStyles:
    """resolve_button_styles — variant, size and state."""

    def test_defaults(self) -> None:
        styles = resolve_button_styles(make("Button"))
        assert styles["backgroundColor"] == "#007bff"
        assert styles["padding"] == "8px 16px"
        assert styles["display"] == "inline-block"
        assert styles["cursor"] == "pointer"

    def test_unknown_variant_falls_back_to_primary(self) -> None:
        assert resolve_button_styles(make("Button", props={"variant": "neon"}))["backgroundColor"] == "#007bff"

    def test_outline_large_full_width(self) -> None:
        styles = resolve_button_styles(
            make("Button", props={"variant": "outline", "size": "large", "fullWidth": True}),
        )
        assert styles["border"] == "2px solid #007bff"
        assert styles["fontSize"] == "16px"
        assert styles["width"] == "100%"

    def test_disabled(self) -> None:
        styles = resolve_button_styles(make("Button", props={"disabled": "true"}))
        assert styles["cursor"] == "not-allowed"
        assert styles["opacity"] == "0.65"

    def test_authored_styles_win(self) -> None:
        styles = resolve_button_styles(make("Button", styles={"backgroundColor": "black"}))
        assert styles["backgroundColor"] == "black"


class TestImageStyles:
    """resolve_image_styles — container, wrapper and img maps."""

    def test_nested_default_width(self) -> None:
        styles = resolve_image_styles(make("Image"), has_parent=True)
        assert styles.container["width"] == "100%"
        assert styles.container["maxWidth"] == "100%"

    def test_root_default_width(self) -> None:
        assert resolve_image_styles(make("Image"), has_parent=False).container["width"] == "auto"

    def test_explicit_width_disables_stretching(self) -> None:
        styles = resolve_image_styles(make("Image", props={"width": 240}), has_parent=True)
        assert styles.container["width"] == "240px"
        assert "maxWidth" not in styles.container
        assert styles.container["flexShrink"] == "0"

    def test_stored_size_used(self) -> None:
        styles = resolve_image_styles(make("Image", size={"width": "50%", "height": 120}), has_parent=True)
        assert styles.container["width"] == "50%"
        assert styles.container["height"] == "120px"
        assert styles.wrapper["height"] == "100%"

    def test_aspect_ratio_without_height(self) -> None:
        styles = resolve_image_styles(make("Image", props={"aspectRatio": "16/9"}), has_parent=True)
        assert styles.wrapper["aspectRatio"] == "16/9"

    def test_img_fit(self) -> None:
        styles = resolve_image_styles(make("Image", props={"objectFit": "contain"}), has_parent=False)
        assert styles.img["objectFit"] == "contain"
        assert styles.img["objectPosition"] == "center"


class TestNavbarStyles:
    """resolve_navbar_styles — layouts, colours and stickiness."""

    def test_default_layout(self) -> None:
        styles = resolve_navbar_styles(make("Navbar"))
        assert styles.layout == "default"
        assert styles.container["justifyContent"] == "space-between"
        assert "position" not in styles.container

    def test_centered(self) -> None:
        assert resolve_navbar_styles(make("Navbar", props={"layout": "centered"})).container[
            "justifyContent"
        ] == "center"

    def test_unknown_layout(self) -> None:
        assert resolve_navbar_styles(make("Navbar", props={"layout": "diagonal"})).layout == "default"

    def test_sticky_kind(self) -> None:
        styles = resolve_navbar_styles(make("NavbarSticky"))
        assert styles.container["position"] == "sticky"
        assert styles.container["zIndex"] == "1000"

    def test_accent_colour_on_active_link(self) -> None:
        styles = resolve_navbar_styles(make("Navbar", styles={"accentColor": "#e91e63"}))
        assert styles.active_link["color"] == "#e91e63"
        assert styles.link["borderBottom"] == "2px solid transparent"
