import math
import pathlib

import PIL.Image
import pypdf
import pytest

import kdp_book_builder as kbb
import kdp_book_builder.config
import kdp_book_builder.cover


#============================================
def test_cover_layout_with_bleed() -> None:
	layout = kbb.cover.compute_cover_layout(8.25, 11.0, 120, "color", True)
	assert math.isclose(layout.spine_width_in, 120 * 0.002347)
	assert math.isclose(layout.full_width_in, 2 * 8.25 + layout.spine_width_in + 0.25)
	assert math.isclose(layout.full_height_in, 11.25)
	assert layout.pixel_size == (5109, 3375)
	assert math.isclose(layout.spine.x, 0.125 + 8.25)
	assert math.isclose(layout.front_trim.x, layout.spine.x + layout.spine_width_in)
	assert math.isclose(layout.front_art.x + layout.front_art.width, layout.full_width_in)


#============================================
def test_cover_layout_without_bleed() -> None:
	layout = kbb.cover.compute_cover_layout(6.0, 9.0, 0, "white", False)
	assert layout.spine_width_in == 0.0
	assert layout.full_width_in == 12.0
	assert layout.full_height_in == 9.0
	assert not kbb.cover.spine_safe_box(layout).is_valid()


#============================================
def test_unknown_paper_rejected() -> None:
	with pytest.raises(kbb.config.LayoutInputError):
		kbb.cover.compute_cover_layout(6.0, 9.0, 100, "glossy", True)
	with pytest.raises(kbb.config.LayoutInputError):
		kbb.cover.spine_width_in(-1, "white")


#============================================
def test_panel_art_covers_area() -> None:
	layout = kbb.cover.compute_cover_layout(8.25, 11.0, 120, "color", True)
	area = layout.front_art
	placement = kbb.cover.fit_panel_art(3000, 3000, area)
	assert placement.offset_x_in <= area.x + 1e-9
	assert placement.offset_y_in <= area.y + 1e-9
	assert placement.offset_x_in + placement.draw_width_in >= area.x + area.width - 1e-9
	assert placement.offset_y_in + placement.draw_height_in >= area.bottom - 1e-9


#============================================
def test_cover_filename() -> None:
	layout = kbb.cover.compute_cover_layout(8.25, 11.0, 120, "color", True)
	assert kbb.cover.cover_filename(layout) == "COVER_8.25x11_120p_color_BLEED.pdf"


#============================================
def test_render_cover_pdf(tmp_path: pathlib.Path) -> None:
	front = tmp_path / "front.png"
	PIL.Image.new("RGB", (600, 800), (200, 30, 30)).save(front)
	layout = kbb.cover.compute_cover_layout(6.0, 9.0, 200, "cream", True)
	output_path = tmp_path / "cover.pdf"
	kbb.cover.render_cover_pdf(layout, output_path, front_image=front, include_guides=True)
	reader = pypdf.PdfReader(str(output_path))
	assert len(reader.pages) == 1
	assert float(reader.pages[0].mediabox.width) == pytest.approx(layout.full_width_in * 72)
	assert float(reader.pages[0].mediabox.height) == pytest.approx(layout.full_height_in * 72)
