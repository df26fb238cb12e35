"""
Page geometry: effective page size with bleed and the margin content box.
"""

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.config


PageSpec = kbb.config.PageSpec
ContentBox = kbb.config.ContentBox
LayoutInputError = kbb.config.LayoutInputError

TRIM_PRESETS = kbb.config.TRIM_PRESETS


#============================================
def effective_size(trim_width: float, trim_height: float, bleed: bool) -> tuple[float, float]:
	"""
	Compute the printed page size including bleed.

	Bleed adds a fixed 0.125 in to the width and 0.25 in to the height,
	the interior convention of the print service. It is not 0.125 on
	every side.

	Args:
		trim_width: Trim width in inches.
		trim_height: Trim height in inches.
		bleed: Whether bleed is enabled.

	Returns:
		Tuple of (width, height) in inches.
	"""
	spec = PageSpec(trim_width_in=trim_width, trim_height_in=trim_height, bleed_enabled=bleed, margin_in=0.0)
	return (spec.effective_width_in, spec.effective_height_in)


#============================================
def resolve_page_spec(
	trim_width: float,
	trim_height: float,
	bleed: bool,
	margin: float,
) -> PageSpec:
	"""
	Build a validated page spec.

	Args:
		trim_width: Trim width in inches.
		trim_height: Trim height in inches.
		bleed: Whether bleed is enabled.
		margin: Margin in inches, applied on all four sides.

	Returns:
		PageSpec.
	"""
	return PageSpec(
		trim_width_in=trim_width,
		trim_height_in=trim_height,
		bleed_enabled=bleed,
		margin_in=margin,
	)


#============================================
def compute_content_box(page_spec: PageSpec) -> ContentBox:
	"""
	Compute the content box inside the margins.

	The box may have non-positive sides when the margin is too large;
	use require_content_box() where that must be fatal.

	Args:
		page_spec: Page spec.

	Returns:
		ContentBox in inches from the page top-left corner.
	"""
	return page_spec.content_box


#============================================
def require_content_box(page_spec: PageSpec) -> ContentBox:
	"""
	Compute the content box and reject one with no usable area.

	Args:
		page_spec: Page spec.

	Returns:
		ContentBox.
	"""
	box = compute_content_box(page_spec)
	if not box.is_valid():
		raise LayoutInputError(
			f"Margin {page_spec.margin_in} in leaves no content area on a "
			f"{page_spec.effective_width_in:g}x{page_spec.effective_height_in:g} in page"
		)
	return box


#============================================
def full_page_box(page_spec: PageSpec) -> ContentBox:
	"""
	Box covering the whole effective page.

	Args:
		page_spec: Page spec.

	Returns:
		ContentBox at the page origin.
	"""
	return ContentBox(
		x=0.0,
		y=0.0,
		width=page_spec.effective_width_in,
		height=page_spec.effective_height_in,
	)


#============================================
def find_trim_preset(key: str) -> tuple[float, float]:
	"""
	Look up a trim preset such as "6x9".

	Args:
		key: Preset key.

	Returns:
		Tuple of (width, height) in inches.
	"""
	normalized = key.strip().lower().replace(" ", "")
	if normalized not in TRIM_PRESETS:
		known = ", ".join(TRIM_PRESETS)
		raise LayoutInputError(f"Unknown trim preset {key!r}, expected one of: {known}")
	return TRIM_PRESETS[normalized]
