import pytest

import kdp_book_builder as kbb
import kdp_book_builder.config
import kdp_book_builder.dpi_check
import kdp_book_builder.geometry


BookSettings = kbb.config.BookSettings
ContentItem = kbb.config.ContentItem


#============================================
def _page_spec(bleed: bool = False) -> kbb.config.PageSpec:
	return kbb.geometry.resolve_page_spec(6.0, 9.0, bleed, 0.5)


#============================================
def test_exact_boundary_has_no_warning() -> None:
	"""
	A 5x8 in content box needs exactly 1500x2400 px at 300 DPI.
	"""
	item = ContentItem(image_pixel_width=1500, image_pixel_height=2400)
	assert kbb.dpi_check.required_pixels(5.0, 8.0) == (1500, 2400)
	assert kbb.dpi_check.check_item_dpi(item, _page_spec(), "Item 1") == []


#============================================
@pytest.mark.parametrize("size", [(1499, 2400), (1500, 2399), (1000, 1000)])
def test_one_pixel_short_gives_one_warning(size: tuple[int, int]) -> None:
	item = ContentItem(image_pixel_width=size[0], image_pixel_height=size[1], title="Sunflowers")
	warnings = kbb.dpi_check.check_item_dpi(item, _page_spec(), kbb.dpi_check.item_label(item, 2))
	assert len(warnings) == 1
	assert warnings[0].startswith('Item 3 "Sunflowers"')
	assert "1500x2400px" in warnings[0]


#============================================
def test_full_bleed_needs_whole_page_pixels() -> None:
	"""
	Full-bleed images are checked against the full effective page.
	"""
	item = ContentItem(image_pixel_width=1500, image_pixel_height=2400, full_bleed_image=True)
	warnings = kbb.dpi_check.check_item_dpi(item, _page_spec(bleed=True), "Item 1")
	assert len(warnings) == 1
	assert "1838x2775px" in warnings[0]


#============================================
def test_zero_pixel_item_is_fatal() -> None:
	item = ContentItem(image_pixel_width=0, image_pixel_height=0)
	with pytest.raises(kbb.config.LayoutInputError):
		kbb.dpi_check.check_item_dpi(item, _page_spec(), "Item 1")


#============================================
def test_full_bleed_without_bleed_warns() -> None:
	item = ContentItem(image_pixel_width=5000, image_pixel_height=8000, full_bleed_image=True)
	warnings = kbb.dpi_check.revalidate([item], _page_spec(bleed=False))
	assert len(warnings) == 1
	assert "without bleed" in warnings[0]
	assert kbb.dpi_check.revalidate([item], _page_spec(bleed=True)) == []


#============================================
def test_margin_tiers() -> None:
	assert kbb.dpi_check.minimum_margin_in(24) == 0.375
	assert kbb.dpi_check.minimum_margin_in(151) == 0.5
	assert kbb.dpi_check.minimum_margin_in(400) == 0.625
	assert kbb.dpi_check.minimum_margin_in(700) == 0.75
	page_spec = kbb.geometry.resolve_page_spec(6.0, 9.0, False, 0.4)
	assert kbb.dpi_check.check_margin(page_spec, 100) == []
	assert len(kbb.dpi_check.check_margin(page_spec, 200)) == 1


#============================================
def test_page_count_minimum() -> None:
	assert kbb.dpi_check.check_page_count(24) == []
	assert kbb.dpi_check.check_page_count(10) == ["Page count 10 is below the minimum of 24 pages"]


#============================================
def test_preflight_estimates_pages() -> None:
	"""
	Title page plus pad plus two pages per item.
	"""
	settings = BookSettings(title="Atlas")
	items = [ContentItem(image_pixel_width=1500, image_pixel_height=2400) for _ in range(11)]
	assert kbb.dpi_check.estimate_item_page_count(len(items), settings) == 24
	assert kbb.dpi_check.preflight(items, settings) == []
	warnings = kbb.dpi_check.preflight(items[:3], settings)
	assert warnings == ["Page count 8 is below the minimum of 24 pages"]
