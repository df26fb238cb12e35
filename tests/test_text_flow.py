import math

import pytest

import kdp_book_builder as kbb
import kdp_book_builder.config
import kdp_book_builder.geometry
import kdp_book_builder.text_flow
import kdp_book_builder.units


ContentBox = kbb.config.ContentBox

FONT_SIZE = 11.0
LINE_HEIGHT = 1.35


#============================================
def _box() -> ContentBox:
	page_spec = kbb.geometry.resolve_page_spec(6.0, 9.0, False, 0.5)
	return kbb.geometry.require_content_box(page_spec)


#============================================
def _paragraph(line_count: int) -> str:
	"""
	Paragraph of one-word lines joined by hard breaks.
	"""
	return "\n".join(["word"] * line_count)


#============================================
def _flow(text: str, heading: str | None = None) -> list:
	return kbb.text_flow.flow_text(text, _box(), FONT_SIZE, LINE_HEIGHT, heading=heading)


#============================================
def test_leading() -> None:
	assert math.isclose(kbb.text_flow.compute_leading(11.0, 1.35), 0.20625)


#============================================
def test_empty_text_gives_no_pages() -> None:
	assert _flow("") == []
	assert _flow("  \n\n \r\n ") == []


#============================================
def test_newline_styles_match() -> None:
	"""
	CRLF, CR and Unicode separators flow like LF.
	"""
	expected = _flow("alpha\n\nbeta\ngamma")
	assert _flow("alpha\r\n\r\nbeta\r\ngamma") == expected
	assert _flow("alpha\r\rbeta\rgamma") == expected
	assert _flow("alpha\u2029\u2029beta\u2028gamma") == expected
	assert len(expected) == 1
	assert [line.text for line in expected[0].lines] == ["alpha", "beta", "gamma"]


#============================================
def test_line_positions_are_monotonic() -> None:
	text = "\n\n".join(["lorem ipsum dolor sit amet " * 30] * 8)
	pages = _flow(text, heading="Chapter")
	assert len(pages) > 1
	box = _box()
	leading = kbb.text_flow.compute_leading(FONT_SIZE, LINE_HEIGHT)
	for page in pages:
		ys = [line.y_in for line in page.lines]
		assert ys == sorted(ys)
		assert len(set(ys)) == len(ys)
		for line in page.lines:
			assert line.y_in >= box.y
			if not line.bold:
				assert line.y_in + leading <= box.bottom + 1e-9
				width = kbb.text_flow.measure_width(line.text, kbb.config.FONT_SERIF, FONT_SIZE)
				assert width <= box.width + 1e-9
		body_ys = [line.y_in for line in page.lines if not line.bold]
		for previous, current in zip(body_ys, body_ys[1:]):
			# same paragraph, or a paragraph break with its half-leading gap
			delta = current - previous
			assert math.isclose(delta, leading) or math.isclose(delta, 1.5 * leading)


#============================================
def test_lines_in_a_paragraph_step_by_leading() -> None:
	pages = _flow(_paragraph(20))
	leading = kbb.text_flow.compute_leading(FONT_SIZE, LINE_HEIGHT)
	ys = [line.y_in for line in pages[0].lines]
	assert len(ys) == 20
	for previous, current in zip(ys, ys[1:]):
		assert math.isclose(current - previous, leading)


#============================================
@pytest.mark.parametrize("line_height", [0.5, 0.8, 1.0])
def test_baseline_stays_in_box_with_tight_line_height(line_height: float) -> None:
	"""
	The baseline sits one font size below the slot top and stays inside the box.
	"""
	box = _box()
	pages = kbb.text_flow.flow_text(_paragraph(200), box, FONT_SIZE, line_height, heading="Heading")
	assert len(pages) > 1
	for page in pages:
		for line in page.lines:
			baseline = line.y_in + kbb.units.points_to_inches(line.font_size_pt)
			assert baseline <= box.bottom + 1e-9


#============================================
def test_heading_then_body_offset() -> None:
	pages = _flow("body text", heading="Title")
	assert pages[0].kind == kbb.text_flow.KIND_HEADING
	heading_line, body_line = pages[0].lines
	assert heading_line.bold
	assert heading_line.font_size_pt == FONT_SIZE + 3.0
	assert math.isclose(heading_line.y_in, 0.5)
	assert math.isclose(body_line.y_in, 0.85)


#============================================
def test_heading_only_gives_one_page() -> None:
	pages = _flow("", heading="Title")
	assert len(pages) == 1
	assert len(pages[0].lines) == 1


#============================================
def test_three_paragraph_fixture_fits_one_page() -> None:
	"""
	36 lines and two paragraph gaps end exactly inside the 8.5 in bottom.
	"""
	text = "\n\n".join([_paragraph(12), _paragraph(12), _paragraph(12)])
	pages = _flow(text, heading="Heading")
	assert len(pages) == 1
	assert len(pages[0].lines) == 37


#============================================
def test_one_more_line_spills_to_second_page() -> None:
	text = "\n\n".join([_paragraph(12), _paragraph(12), _paragraph(13)])
	pages = _flow(text, heading="Heading")
	assert len(pages) == 2
	assert pages[1].kind == kbb.text_flow.KIND_BODY
	assert len(pages[1].lines) == 1
	assert math.isclose(pages[1].lines[0].y_in, 0.5)


#============================================
def test_overlong_token_is_hard_broken() -> None:
	box = _box()
	token = "x" * 400
	lines = kbb.text_flow.wrap_paragraph(token, box.width, kbb.config.FONT_SERIF, FONT_SIZE)
	assert len(lines) > 1
	assert "".join(lines) == token
	for line in lines:
		width = kbb.text_flow.measure_width(line, kbb.config.FONT_SERIF, FONT_SIZE)
		assert width <= box.width + 1e-9


#============================================
def test_wrap_collapses_spaces_and_keeps_hard_breaks() -> None:
	lines = kbb.text_flow.wrap_paragraph("a   b\nc", 5.0, kbb.config.FONT_SERIF, FONT_SIZE)
	assert lines == ["a b", "c"]


#============================================
def test_leading_taller_than_box_is_fatal() -> None:
	box = ContentBox(0.5, 0.5, 5.0, 0.1)
	with pytest.raises(kbb.config.LayoutInputError):
		kbb.text_flow.flow_text("text", box, FONT_SIZE, LINE_HEIGHT)


#============================================
def test_invalid_box_is_fatal() -> None:
	with pytest.raises(kbb.config.LayoutInputError):
		kbb.text_flow.flow_text("text", ContentBox(0.0, 0.0, 0.0, 5.0), FONT_SIZE, LINE_HEIGHT)
