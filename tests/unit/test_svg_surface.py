"""
Unit tests for renderer/svg_surface.py
"""

import math
import xml.etree.ElementTree as ET

from animation.session import render_solution
from animation.sprites import Sprite
from animation.visualiser import OUT_OF_BOUNDS_TEXT
from renderer.surface import Surface
from renderer.svg_surface import SvgSurface

SVG_NS = "{http://www.w3.org/2000/svg}"


def _parse(surface: SvgSurface) -> ET.Element:
    return ET.fromstring(surface.to_svg())


def _tags(surface: SvgSurface) -> list[str]:
    return [el.tag.removeprefix(SVG_NS) for el in _parse(surface)]


class TestPrimitives:

    def test_satisfies_surface_protocol(self):
        assert isinstance(SvgSurface(700, 250), Surface)

    def test_empty_document_has_background(self):
        root = _parse(SvgSurface(700, 250))
        assert root.get("width") == "700"
        assert root.get("viewBox") == "0 0 700 250"
        assert _tags(SvgSurface(700, 250)) == ["rect"]

    def test_line(self):
        s = SvgSurface(700, 250)
        s.draw_line((10, 20), (30, 40))
        line = _parse(s)[1]
        assert (line.get("x1"), line.get("y2")) == ("10.00", "40.00")

    def test_text_is_escaped(self):
        s = SvgSurface(700, 250)
        s.draw_text("a < b & c", 1, 2, 25)
        text = _parse(s)[1]
        assert text.text == "a < b & c"
        assert text.get("font-size") == "25.00"

    def test_circle(self):
        s = SvgSurface(700, 250)
        s.fill_circle((100, 150), 3.75, "black")
        circle = _parse(s)[1]
        assert (circle.get("cx"), circle.get("r"), circle.get("fill")) == ("100.00", "3.75", "black")

    def test_clockwise_hop_arc(self):
        s = SvgSurface(700, 250)
        s.draw_arc((100, 150), 10, math.pi, 2 * math.pi, False)
        d = _parse(s)[1].get("d")
        assert d == "M 90.00 150.00 A 10.00 10.00 0 0 1 110.00 150.00"

    def test_counterclockwise_hop_arc(self):
        s = SvgSurface(700, 250)
        s.draw_arc((100, 150), 10, 2 * math.pi, math.pi, True)
        d = _parse(s)[1].get("d")
        assert d == "M 110.00 150.00 A 10.00 10.00 0 0 0 90.00 150.00"

    def test_image_links_file(self, sprite_dir):
        s = SvgSurface(700, 250)
        sprite = Sprite("stand", sprite_dir / "sprite-stand.png", 100, 200)
        s.draw_image(sprite, 5, 6, 20, 40)
        image = _parse(s)[1]
        assert image.get("href").startswith("file://")
        assert image.get("href").endswith("sprite-stand.png")
        assert image.get("width") == "20.00"


class TestClearRect:

    def test_removes_elements_anchored_inside(self):
        s = SvgSurface(700, 250)
        s.draw_text("3", 300, 40, 25)
        s.draw_line((50, 150), (650, 150))
        s.clear_rect(300, 15, 150, 25)

        assert len(s) == 1
        assert _tags(s) == ["rect", "line"]

    def test_text_overwrite_keeps_latest(self):
        s = SvgSurface(700, 250)
        for text in ("3", "3 +", "3 + 5"):
            s.clear_rect(300, 15, 150, 25)
            s.draw_text(text, 300, 40, 25)

        texts = [el.text for el in _parse(s) if el.tag.endswith("text")]
        assert texts == ["3 + 5"]


class TestSnapshot:

    def test_finished_solution(self, test_settings):
        s = SvgSurface(700, 250)
        render_solution(s, "add", 3, 5, test_settings)
        root = _parse(s)

        texts = [el.text for el in root if el.tag.endswith("text")]
        assert texts[-1] == "3 + 5 = 8"
        assert len([el for el in root if el.tag.endswith("path")]) == 5
        assert len([el for el in root if el.tag.endswith("circle")]) == 1

    def test_out_of_bounds_message(self, test_settings):
        s = SvgSurface(700, 250)
        render_solution(s, "add", 9, 5, test_settings)

        texts = [el.text for el in _parse(s) if el.tag.endswith("text")]
        assert texts[-1] == OUT_OF_BOUNDS_TEXT
