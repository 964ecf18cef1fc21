"""Tests for the summary image."""
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from countries.exceptions import RenderError
from countries.models import Country
from countries.rendering import SummaryRenderer, build_layout, format_gdp
from countries.store import ArtifactStore, CountryStore

from .conftest import SNAPSHOT


def texts(lines):
    return [text for _, _, text, _ in lines]


class TestLayout:

    def test_lines(self):
        top = [
            SimpleNamespace(name="China", estimated_gdp=Decimal("2500000000.456")),
            SimpleNamespace(name="Nowhere", estimated_gdp=None),
        ]
        assert texts(build_layout(250, top, SNAPSHOT)) == [
            "Country Currency API Summary",
            "Total countries: 250",
            "Top 5 Countries by Estimated GDP:",
            "China: 2,500,000,000.46",
            "Nowhere: N/A",
            "Last refreshed at: 2025-10-27 12:00:00",
        ]

    def test_at_most_five_ranked_lines(self):
        top = [SimpleNamespace(name=f"C{i}", estimated_gdp=Decimal(i)) for i in range(8)]
        ranked = [text for x, _, text, _ in build_layout(8, top, SNAPSHOT) if x == 40]
        assert ranked == ["C0: 0.00", "C1: 1.00", "C2: 2.00", "C3: 3.00", "C4: 4.00"]

    @pytest.mark.parametrize("value,expected", [
        (Decimal("0"), "0.00"),
        (Decimal("1234.5"), "1,234.50"),
        (None, "N/A"),
    ])
    def test_format_gdp(self, value, expected):
        assert format_gdp(value) == expected


@pytest.mark.django_db
class TestSummaryRenderer:

    @pytest.fixture
    def artifacts(self, tmp_path):
        return ArtifactStore(tmp_path / "cache")

    def test_writes_png(self, artifacts, tmp_path):
        Country.objects.create(name="Italy", population=100, estimated_gdp=Decimal("166666.67"))
        artifact = SummaryRenderer(CountryStore(), artifacts).render(SNAPSHOT)

        path = tmp_path / "cache" / "summary.png"
        assert artifact.path == str(path)
        assert artifact.size == path.stat().st_size
        assert path.read_bytes().startswith(b"\x89PNG")

    def test_overwrites_previous_image(self, artifacts, tmp_path):
        path = tmp_path / "cache" / "summary.png"
        path.parent.mkdir()
        path.write_bytes(b"stale")

        SummaryRenderer(CountryStore(), artifacts).render(SNAPSHOT)

        assert path.read_bytes().startswith(b"\x89PNG")
        assert [p.name for p in path.parent.iterdir()] == ["summary.png"]

    def test_missing_font_is_render_error(self, artifacts, tmp_path):
        renderer = SummaryRenderer(CountryStore(), artifacts, font_path=str(tmp_path / "nope.ttf"))
        with pytest.raises(RenderError, match="Font file not found"):
            renderer.render(SNAPSHOT)
        assert not artifacts.exists("summary.png")

    def test_write_failure_is_render_error(self, artifacts):
        renderer = SummaryRenderer(CountryStore(), artifacts)
        with patch.object(artifacts, "write_bytes", side_effect=PermissionError("read-only")):
            with pytest.raises(RenderError, match="Failed to save image"):
                renderer.render(SNAPSHOT)

    def test_uses_top_five_by_gdp(self, artifacts):
        for name, gdp in [("A", None), ("B", 10), ("C", 30), ("D", 20), ("E", 5), ("F", 1), ("G", 0)]:
            Country.objects.create(name=name, population=1, estimated_gdp=gdp)
        renderer = SummaryRenderer(CountryStore(), artifacts)

        with patch("countries.rendering.build_layout", wraps=build_layout) as layout:
            renderer.render(SNAPSHOT)

        total, top, as_of = layout.call_args.args
        assert total == 7
        assert [c.name for c in top] == ["C", "D", "B", "E", "F"]
        assert as_of == SNAPSHOT
