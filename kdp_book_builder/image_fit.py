"""
Image fit math: contain within a box or cover the whole page.
"""

# Standard Library
import dataclasses
import pathlib

# PIP3 modules
import PIL.Image

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.config
import kdp_book_builder.geometry


ContentBox = kbb.config.ContentBox
ContentItem = kbb.config.ContentItem
PageSpec = kbb.config.PageSpec
LayoutInputError = kbb.config.LayoutInputError

FIT_CONTAIN = "contain"
FIT_COVER = "cover"


@dataclasses.dataclass(frozen=True)
class ImagePlacement:
	fit_mode: str
	draw_width_in: float
	draw_height_in: float
	offset_x_in: float
	offset_y_in: float


#============================================
def _check_pixels(pixel_width: int, pixel_height: int) -> None:
	if pixel_width <= 0 or pixel_height <= 0:
		raise LayoutInputError(
			f"Source image must have positive dimensions, got {pixel_width}x{pixel_height}px"
		)


#============================================
def _check_box(box: ContentBox) -> None:
	if not box.is_valid():
		raise LayoutInputError(
			f"Target box has no area ({box.width:g}x{box.height:g} in), margin too large"
		)


#============================================
def fit_contain(
	pixel_width: int,
	pixel_height: int,
	box: ContentBox,
	scale_percent: float = 100.0,
	offset_x_percent: float = 0.0,
	offset_y_percent: float = 0.0,
) -> ImagePlacement:
	"""
	Fit an image inside a box without cropping.

	The offset is a fraction of half the letterbox slack left by the
	unscaled fit, so offsets within +/-50 keep a 100% image inside the
	box. Larger scales may push the image past the box edges.

	Args:
		pixel_width: Source width in pixels.
		pixel_height: Source height in pixels.
		box: Target box in inches.
		scale_percent: User scale multiplier in percent.
		offset_x_percent: Horizontal bias in percent.
		offset_y_percent: Vertical bias in percent.

	Returns:
		ImagePlacement relative to the page origin.
	"""
	_check_pixels(pixel_width, pixel_height)
	_check_box(box)
	image_aspect = pixel_width / pixel_height
	box_aspect = box.width / box.height
	if image_aspect > box_aspect:
		fit_width = box.width
		fit_height = box.width / image_aspect
	else:
		fit_height = box.height
		fit_width = box.height * image_aspect

	scale = scale_percent / 100.0
	draw_width = fit_width * scale
	draw_height = fit_height * scale

	free_x = box.width - fit_width
	free_y = box.height - fit_height
	x = box.x + (box.width - draw_width) / 2.0 + (offset_x_percent / 100.0) * (free_x / 2.0)
	y = box.y + (box.height - draw_height) / 2.0 + (offset_y_percent / 100.0) * (free_y / 2.0)
	return ImagePlacement(
		fit_mode=FIT_CONTAIN,
		draw_width_in=draw_width,
		draw_height_in=draw_height,
		offset_x_in=x,
		offset_y_in=y,
	)


#============================================
def fit_cover(
	pixel_width: int,
	pixel_height: int,
	page_width: float,
	page_height: float,
	scale_percent: float = 100.0,
	offset_x_percent: float = 0.0,
	offset_y_percent: float = 0.0,
) -> ImagePlacement:
	"""
	Fit an image so it covers the full page, cropping one axis.

	The offset pans across the crop range: +50 aligns the left/top edge
	of the image with the page edge, -50 the right/bottom edge.

	Args:
		pixel_width: Source width in pixels.
		pixel_height: Source height in pixels.
		page_width: Page width in inches.
		page_height: Page height in inches.
		scale_percent: User scale multiplier in percent.
		offset_x_percent: Horizontal pan in percent.
		offset_y_percent: Vertical pan in percent.

	Returns:
		ImagePlacement relative to the page origin.
	"""
	_check_pixels(pixel_width, pixel_height)
	_check_box(ContentBox(x=0.0, y=0.0, width=page_width, height=page_height))
	image_aspect = pixel_width / pixel_height
	page_aspect = page_width / page_height
	if image_aspect > page_aspect:
		fit_height = page_height
		fit_width = page_height * image_aspect
	else:
		fit_width = page_width
		fit_height = page_width / image_aspect

	scale = scale_percent / 100.0
	draw_width = fit_width * scale
	draw_height = fit_height * scale

	x = (page_width - draw_width) / 2.0 + (offset_x_percent / 100.0) * (draw_width - page_width)
	y = (page_height - draw_height) / 2.0 + (offset_y_percent / 100.0) * (draw_height - page_height)
	return ImagePlacement(
		fit_mode=FIT_COVER,
		draw_width_in=draw_width,
		draw_height_in=draw_height,
		offset_x_in=x,
		offset_y_in=y,
	)


#============================================
def target_box(item: ContentItem, page_spec: PageSpec) -> ContentBox:
	"""
	Box an item's image occupies: full page for full-bleed, else the content box.

	Args:
		item: Content item.
		page_spec: Page spec.

	Returns:
		ContentBox.
	"""
	if item.full_bleed_image:
		return kbb.geometry.full_page_box(page_spec)
	return kbb.geometry.require_content_box(page_spec)


#============================================
def fit_item_image(item: ContentItem, page_spec: PageSpec) -> ImagePlacement:
	"""
	Compute the image geometry for one item page.

	Args:
		item: Content item.
		page_spec: Page spec.

	Returns:
		ImagePlacement.
	"""
	if item.full_bleed_image:
		return fit_cover(
			item.image_pixel_width,
			item.image_pixel_height,
			page_spec.effective_width_in,
			page_spec.effective_height_in,
			item.scale_percent,
			item.offset_x_percent,
			item.offset_y_percent,
		)
	return fit_contain(
		item.image_pixel_width,
		item.image_pixel_height,
		kbb.geometry.require_content_box(page_spec),
		item.scale_percent,
		item.offset_x_percent,
		item.offset_y_percent,
	)


#============================================
def read_image_pixel_size(path: pathlib.Path) -> tuple[int, int]:
	"""
	Read raster dimensions without decoding the pixel data.

	Args:
		path: Image path.

	Returns:
		Tuple of (width, height) in pixels.
	"""
	with PIL.Image.open(path) as image:
		return image.size


#============================================
def item_from_image(path: pathlib.Path, title: str = "", description: str = "", **fields) -> ContentItem:
	"""
	Build a content item from an image file.

	Args:
		path: Image path.
		title: Item title.
		description: Item description text.
		fields: Other ContentItem fields.

	Returns:
		ContentItem with pixel dimensions filled in.
	"""
	width, height = read_image_pixel_size(path)
	return ContentItem(
		image_pixel_width=width,
		image_pixel_height=height,
		title=title,
		description=description,
		image_path=str(path),
		**fields,
	)
