"""
Advisory print checks: image DPI, bleed consistency, margins, page count.

Every check returns human-readable warning strings. Nothing here raises
for an advisory condition; fatal geometry still raises LayoutInputError.
"""

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.config
import kdp_book_builder.geometry
import kdp_book_builder.image_fit
import kdp_book_builder.units


ContentItem = kbb.config.ContentItem
PageSpec = kbb.config.PageSpec
BookSettings = kbb.config.BookSettings
LayoutInputError = kbb.config.LayoutInputError

PRINT_DPI = kbb.config.PRINT_DPI
MIN_PAGE_COUNT = kbb.config.MIN_PAGE_COUNT

# (max page count, minimum margin in inches), binding-side tiers
MARGIN_TIERS = (
	(150, 0.375),
	(300, 0.5),
	(500, 0.625),
)
MARGIN_TIER_MAX = 0.75


#============================================
def item_label(item: ContentItem, index: int) -> str:
	"""
	Label an item in warning text.

	Args:
		item: Content item.
		index: Zero-based item index.

	Returns:
		Label such as 'Item 3 "Sunflowers"'.
	"""
	label = f"Item {index + 1}"
	if item.title.strip():
		label += f' "{item.title.strip()}"'
	return label


#============================================
def required_pixels(box_width: float, box_height: float, dpi: int = PRINT_DPI) -> tuple[int, int]:
	"""
	Pixels needed to print a box at the target resolution.

	Args:
		box_width: Box width in inches.
		box_height: Box height in inches.
		dpi: Target resolution.

	Returns:
		Tuple of (width, height) in pixels.
	"""
	return (
		kbb.units.inches_to_pixels(box_width, dpi),
		kbb.units.inches_to_pixels(box_height, dpi),
	)


#============================================
def check_item_dpi(item: ContentItem, page_spec: PageSpec, label: str, dpi: int = PRINT_DPI) -> list[str]:
	"""
	Check that an item's image has enough pixels for its print box.

	Args:
		item: Content item.
		page_spec: Page spec.
		label: Item label for the message.
		dpi: Target resolution.

	Returns:
		Zero or one warning.
	"""
	if item.image_pixel_width <= 0 or item.image_pixel_height <= 0:
		raise LayoutInputError(
			f"{label}: source image has no pixels "
			f"({item.image_pixel_width}x{item.image_pixel_height}px)"
		)
	box = kbb.image_fit.target_box(item, page_spec)
	needed_width, needed_height = required_pixels(box.width, box.height, dpi)
	if item.image_pixel_width < needed_width or item.image_pixel_height < needed_height:
		return [
			f"{label}: image is {item.image_pixel_width}x{item.image_pixel_height}px, "
			f"needs at least {needed_width}x{needed_height}px for {dpi} DPI"
		]
	return []


#============================================
def check_full_bleed_consistency(item: ContentItem, page_spec: PageSpec, label: str) -> list[str]:
	"""
	Warn when a full-page image is used without bleed.

	Args:
		item: Content item.
		page_spec: Page spec.
		label: Item label for the message.

	Returns:
		Zero or one warning.
	"""
	if item.full_bleed_image and not page_spec.bleed_enabled:
		return [f"{label}: full-bleed image on a page without bleed, enable bleed for edge-to-edge print"]
	return []


#============================================
def revalidate(items: list[ContentItem], page_spec: PageSpec) -> list[str]:
	"""
	Re-run the per-item advisories after any settings change.

	Args:
		items: Content items in book order.
		page_spec: Page spec.

	Returns:
		Warnings in item order.
	"""
	warnings: list[str] = []
	for index, item in enumerate(items):
		label = item_label(item, index)
		warnings.extend(check_item_dpi(item, page_spec, label))
		warnings.extend(check_full_bleed_consistency(item, page_spec, label))
	return warnings


#============================================
def minimum_margin_in(page_count: int) -> float:
	"""
	Minimum binding-side margin for a page count.

	Args:
		page_count: Interior page count.

	Returns:
		Margin in inches.
	"""
	for max_pages, margin in MARGIN_TIERS:
		if page_count <= max_pages:
			return margin
	return MARGIN_TIER_MAX


#============================================
def check_margin(page_spec: PageSpec, page_count: int) -> list[str]:
	"""
	Check the symmetric margin against the binding-side minimum.

	Args:
		page_spec: Page spec.
		page_count: Interior page count.

	Returns:
		Zero or one warning.
	"""
	needed = minimum_margin_in(page_count)
	if page_spec.margin_in < needed:
		return [
			f"Margin {page_spec.margin_in:g} in is below the {needed:g} in "
			f"minimum for {page_count} pages"
		]
	return []


#============================================
def check_page_count(page_count: int, minimum: int = MIN_PAGE_COUNT) -> list[str]:
	"""
	Check the page count against the print service minimum.

	Args:
		page_count: Interior page count.
		minimum: Minimum page count.

	Returns:
		Zero or one warning.
	"""
	if page_count < minimum:
		return [f"Page count {page_count} is below the minimum of {minimum} pages"]
	return []


#============================================
def estimate_item_page_count(item_count: int, settings: BookSettings) -> int:
	"""
	Lower-bound page estimate for an item book without flowing any text.

	Assumes one text page per item, so every item is an even pair and
	no parity padding is needed between items.

	Args:
		item_count: Number of items.
		settings: Book settings.

	Returns:
		Estimated page count.
	"""
	pages = 0
	if settings.has_title_page:
		pages += 1
		if settings.enforce_spread_parity:
			pages += 1
	return pages + 2 * item_count


#============================================
def preflight(
	items: list[ContentItem],
	settings: BookSettings,
	page_count: int | None = None,
) -> list[str]:
	"""
	Pre-export check that runs without a pagination pass.

	Args:
		items: Content items.
		settings: Book settings.
		page_count: Known page count, estimated when None.

	Returns:
		All advisory warnings.
	"""
	page_spec = settings.page_spec()
	kbb.geometry.require_content_box(page_spec)
	if page_count is None:
		page_count = estimate_item_page_count(len(items), settings)
	warnings = revalidate(items, page_spec)
	warnings.extend(check_margin(page_spec, page_count))
	warnings.extend(check_page_count(page_count))
	return warnings
