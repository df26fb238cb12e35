import pytest

import kdp_book_builder as kbb
import kdp_book_builder.assembler
import kdp_book_builder.config


BookSettings = kbb.config.BookSettings
ContentItem = kbb.config.ContentItem


#============================================
def _item(title: str = "Work", description: str = "A short description.") -> ContentItem:
	return ContentItem(
		image_pixel_width=1500,
		image_pixel_height=2400,
		title=title,
		description=description,
	)


#============================================
def _long_item() -> ContentItem:
	"""
	Item whose text spills onto a second page.
	"""
	description = "\n\n".join(["lorem ipsum dolor sit amet " * 20] * 12)
	return _item(title="Long", description=description)


#============================================
def _roles(document: kbb.assembler.Document) -> list[str]:
	return [page.role for page in document.pages]


#============================================
def test_title_page_then_pad_then_items() -> None:
	settings = BookSettings(title="Atlas", author="A. Painter")
	document = kbb.assembler.assemble_item_book([_item(), _item()], settings)
	assert _roles(document) == ["title", "blank", "image", "text", "image", "text"]
	assert [page.number for page in document.pages] == [1, 2, 3, 4, 5, 6]


#============================================
def test_title_page_lines_are_centred() -> None:
	settings = BookSettings(title="Atlas", author="A. Painter")
	document = kbb.assembler.assemble_item_book([_item()], settings)
	title_line, author_line = document.pages[0].flowed.lines
	assert title_line.x_in == 3.0
	assert title_line.y_in == pytest.approx(9.0 * 0.40)
	assert title_line.font_size_pt == 19.0
	assert title_line.bold
	assert author_line.y_in == pytest.approx(9.0 * 0.47)
	assert author_line.font_size_pt == 13.0


#============================================
def test_odd_item_is_padded_except_last() -> None:
	"""
	Every item after the first starts on an odd page number.
	"""
	settings = BookSettings(title="Atlas")
	items = [_item(), _long_item(), _item(), _long_item()]
	document = kbb.assembler.assemble_item_book(items, settings)
	image_numbers = [page.number for page in document.pages if page.role == "image"]
	assert all(number % 2 == 1 for number in image_numbers)
	# no pad after the last item
	assert document.pages[-1].role == "text"


#============================================
def test_parity_off_has_no_blanks() -> None:
	settings = BookSettings(title="Atlas", enforce_spread_parity=False)
	document = kbb.assembler.assemble_item_book([_long_item(), _item()], settings)
	assert "blank" not in _roles(document)


#============================================
def test_no_title_page_without_title_or_author() -> None:
	settings = BookSettings()
	document = kbb.assembler.assemble_item_book([_item()], settings)
	assert _roles(document) == ["image", "text"]


#============================================
def test_empty_description_still_gets_text_page() -> None:
	settings = BookSettings(include_title_page=False)
	document = kbb.assembler.assemble_item_book([_item(title="", description="")], settings)
	assert _roles(document) == ["image", "text"]
	assert document.pages[1].flowed.lines == ()


#============================================
def test_assembly_is_deterministic() -> None:
	settings = BookSettings(title="Atlas", author="A. Painter")
	items = [_item(), _long_item(), _item()]
	first = kbb.assembler.assemble_item_book(items, settings)
	second = kbb.assembler.assemble_item_book(items, settings)
	assert first == second


#============================================
def test_empty_items_are_fatal() -> None:
	with pytest.raises(kbb.config.LayoutInputError):
		kbb.assembler.assemble_item_book([], BookSettings(title="Atlas"))


#============================================
def test_text_size_override() -> None:
	item = ContentItem(
		image_pixel_width=1500,
		image_pixel_height=2400,
		title="Work",
		description="body",
		text_size_override=9.0,
	)
	settings = BookSettings(include_title_page=False)
	document = kbb.assembler.assemble_item_book([item], settings)
	heading_line, body_line = document.pages[1].flowed.lines
	assert body_line.font_size_pt == 9.0
	assert heading_line.font_size_pt == 12.0


#============================================
def test_warnings_are_collected() -> None:
	low_res = ContentItem(image_pixel_width=100, image_pixel_height=100, title="Tiny")
	document = kbb.assembler.assemble_item_book([low_res], BookSettings(title="Atlas"))
	assert any('Item 1 "Tiny"' in warning for warning in document.warnings)
	assert any("below the minimum of 24" in warning for warning in document.warnings)


#============================================
def test_text_book_sections_in_order() -> None:
	settings = BookSettings(
		title="Essays",
		author="B. Writer",
		intro_text="An introduction.",
		bibliography_text="Some references.",
	)
	document = kbb.assembler.assemble_text_book("Body paragraph one.\n\nTwo.", settings)
	texts = [
		line.text
		for page in document.pages
		if page.flowed is not None
		for line in page.flowed.lines
	]
	assert texts[:2] == ["Essays", "B. Writer"]
	assert texts.index("Introduction") < texts.index("Body paragraph one.")
	assert texts.index("Two.") < texts.index("Appendices and Bibliography")
	assert _roles(document)[:2] == ["title", "blank"]


#============================================
def test_text_book_without_text_is_fatal() -> None:
	with pytest.raises(kbb.config.LayoutInputError):
		kbb.assembler.assemble_text_book("  ", BookSettings(include_title_page=False))
