import io
import logging
import os
from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFont

from .exceptions import RenderError

logger = logging.getLogger(__name__)

SUMMARY_IMAGE_NAME = "summary.png"
TOP_N = 5

IMAGE_SIZE = (600, 400)
TITLE = "Country Currency API Summary"


@dataclass(frozen=True)
class Artifact:
    path: str
    size: int


def format_gdp(value):
    if value is None:
        return "N/A"
    return f"{value:,.2f}"


def build_layout(total_countries, top_countries, as_of):
    """
    Return the text lines of the summary as ``(x, y, text, style)`` tuples.

    ``style`` is either "title" or "body"; the positions are for a 600x400
    canvas.
    """
    lines = [
        (150, 20, TITLE, "title"),
        (20, 70, f"Total countries: {total_countries}", "body"),
        (20, 110, f"Top {TOP_N} Countries by Estimated GDP:", "body"),
    ]
    y = 150
    for country in top_countries[:TOP_N]:
        lines.append((40, y, f"{country.name}: {format_gdp(country.estimated_gdp)}", "body"))
        y += 30
    lines.append((20, 340, f"Last refreshed at: {as_of:%Y-%m-%d %H:%M:%S}", "body"))
    return lines


class SummaryRenderer:
    """
    Draws the summary PNG from the persisted countries and stores it as
    ``summary.png`` in the artifact store, replacing any earlier image.
    """

    def __init__(self, store, artifacts, font_path=None):
        self.store = store
        self.artifacts = artifacts
        self.font_path = font_path

    def _fonts(self):
        if self.font_path is None:
            default = ImageFont.load_default()
            return {"title": default, "body": default}
        if not os.path.isfile(self.font_path):
            raise RenderError(f"Font file not found at: {self.font_path}")
        try:
            return {
                "title": ImageFont.truetype(self.font_path, 22),
                "body": ImageFont.truetype(self.font_path, 16),
            }
        except OSError as e:
            raise RenderError(f"Cannot load font {self.font_path}: {e}") from e

    def draw(self, lines):
        fonts = self._fonts()
        img = Image.new("RGB", IMAGE_SIZE, color="white")
        canvas = ImageDraw.Draw(img)
        for x, y, text, style in lines:
            canvas.text((x, y), text, fill="black", font=fonts[style])
        buf = io.BytesIO()
        img.save(buf, "PNG")
        return buf.getvalue()

    def render(self, as_of):
        total = self.store.count()
        top = self.store.top_by_gdp(TOP_N)
        lines = build_layout(total, top, as_of)

        try:
            data = self.draw(lines)
        except RenderError:
            raise
        except (OSError, ValueError) as e:
            raise RenderError(f"Failed to create image: {e}") from e

        try:
            path = self.artifacts.write_bytes(SUMMARY_IMAGE_NAME, data)
        except OSError as e:
            raise RenderError(f"Failed to save image: {e}") from e

        logger.info("Summary image written to %s (%d bytes)", path, len(data))
        return Artifact(path=path, size=len(data))
