"""
Wrap-around paperback cover: back panel, spine and front panel.

Cover bleed is 0.125 in on every outer edge, unlike the interior
convention in geometry.py.
"""

# Standard Library
import dataclasses
import pathlib

# PIP3 modules
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.config
import kdp_book_builder.image_fit
import kdp_book_builder.units


ContentBox = kbb.config.ContentBox
ImagePlacement = kbb.image_fit.ImagePlacement
LayoutInputError = kbb.config.LayoutInputError

SPINE_PER_PAGE = kbb.config.SPINE_PER_PAGE
PRINT_DPI = kbb.config.PRINT_DPI

COVER_BLEED_IN = 0.125
SAFE_INSET_IN = 0.25
SPINE_SAFE_INSET_IN = 0.0625

to_points = kbb.units.inches_to_points


@dataclasses.dataclass(frozen=True)
class CoverLayout:
	trim_width_in: float
	trim_height_in: float
	page_count: int
	paper: str
	bleed_enabled: bool
	spine_width_in: float
	full_width_in: float
	full_height_in: float
	back_trim: ContentBox
	spine: ContentBox
	front_trim: ContentBox
	back_art: ContentBox
	front_art: ContentBox

	@property
	def pixel_size(self) -> tuple[int, int]:
		return (
			kbb.units.inches_to_pixels(self.full_width_in, PRINT_DPI),
			kbb.units.inches_to_pixels(self.full_height_in, PRINT_DPI),
		)


#============================================
def spine_width_in(page_count: int, paper: str) -> float:
	"""
	Spine width from the interior page count and paper type.

	Args:
		page_count: Interior page count.
		paper: "white", "cream" or "color".

	Returns:
		Spine width in inches, 0 for an empty book.
	"""
	if paper not in SPINE_PER_PAGE:
		known = ", ".join(SPINE_PER_PAGE)
		raise LayoutInputError(f"Unknown paper {paper!r}, expected one of: {known}")
	if page_count < 0:
		raise LayoutInputError(f"Page count must not be negative, got {page_count}")
	return page_count * SPINE_PER_PAGE[paper]


#============================================
def compute_cover_layout(
	trim_width: float,
	trim_height: float,
	page_count: int,
	paper: str,
	bleed: bool,
) -> CoverLayout:
	"""
	Compute the full cover geometry.

	Args:
		trim_width: Interior trim width in inches.
		trim_height: Interior trim height in inches.
		page_count: Interior page count.
		paper: Paper type.
		bleed: Whether the cover has bleed.

	Returns:
		CoverLayout with boxes in inches from the top-left corner.
	"""
	if trim_width <= 0.0 or trim_height <= 0.0:
		raise LayoutInputError(f"Trim size must be positive, got {trim_width}x{trim_height} in")
	spine = spine_width_in(page_count, paper)
	pad = COVER_BLEED_IN if bleed else 0.0
	full_width = 2.0 * trim_width + spine + 2.0 * pad
	full_height = trim_height + 2.0 * pad
	spine_x = pad + trim_width
	front_x = spine_x + spine
	return CoverLayout(
		trim_width_in=trim_width,
		trim_height_in=trim_height,
		page_count=page_count,
		paper=paper,
		bleed_enabled=bleed,
		spine_width_in=spine,
		full_width_in=full_width,
		full_height_in=full_height,
		back_trim=ContentBox(x=pad, y=pad, width=trim_width, height=trim_height),
		spine=ContentBox(x=spine_x, y=0.0, width=spine, height=full_height),
		front_trim=ContentBox(x=front_x, y=pad, width=trim_width, height=trim_height),
		back_art=ContentBox(x=0.0, y=0.0, width=spine_x, height=full_height),
		front_art=ContentBox(x=front_x, y=0.0, width=full_width - front_x, height=full_height),
	)


#============================================
def safe_box(box: ContentBox, inset_x: float = SAFE_INSET_IN, inset_y: float = SAFE_INSET_IN) -> ContentBox:
	"""
	Inset a box to its text-safe area.

	Args:
		box: Trim or spine box.
		inset_x: Horizontal inset in inches.
		inset_y: Vertical inset in inches.

	Returns:
		Inset box, possibly with non-positive sides on a thin spine.
	"""
	return ContentBox(
		x=box.x + inset_x,
		y=box.y + inset_y,
		width=box.width - 2.0 * inset_x,
		height=box.height - 2.0 * inset_y,
	)


#============================================
def spine_safe_box(layout: CoverLayout) -> ContentBox:
	"""
	Text-safe area on the spine.

	Args:
		layout: Cover layout.

	Returns:
		Spine box inset 1/16 in per side and vertically like the panels.
	"""
	return ContentBox(
		x=layout.spine.x + SPINE_SAFE_INSET_IN,
		y=layout.back_trim.y + SAFE_INSET_IN,
		width=layout.spine.width - 2.0 * SPINE_SAFE_INSET_IN,
		height=layout.trim_height_in - 2.0 * SAFE_INSET_IN,
	)


#============================================
def fit_panel_art(pixel_width: int, pixel_height: int, area: ContentBox) -> ImagePlacement:
	"""
	Cover-fit artwork to a panel area, including its outer bleed.

	Args:
		pixel_width: Source width in pixels.
		pixel_height: Source height in pixels.
		area: Panel art area.

	Returns:
		ImagePlacement relative to the cover origin.
	"""
	placement = kbb.image_fit.fit_cover(pixel_width, pixel_height, area.width, area.height)
	return dataclasses.replace(
		placement,
		offset_x_in=placement.offset_x_in + area.x,
		offset_y_in=placement.offset_y_in + area.y,
	)


#============================================
def cover_filename(layout: CoverLayout) -> str:
	"""
	Export name for a cover.

	Args:
		layout: Cover layout.

	Returns:
		Name such as "COVER_8.25x11_120p_color_BLEED.pdf".
	"""
	name = (
		f"COVER_{layout.trim_width_in:g}x{layout.trim_height_in:g}_"
		f"{layout.page_count}p_{layout.paper}"
	)
	if layout.bleed_enabled:
		name += "_BLEED"
	return f"{name}.pdf"


#============================================
def _draw_panel(
	pdf: reportlab.pdfgen.canvas.Canvas,
	image_path: pathlib.Path,
	area: ContentBox,
	full_height: float,
) -> None:
	width, height = kbb.image_fit.read_image_pixel_size(image_path)
	placement = fit_panel_art(width, height, area)
	pdf.saveState()
	clip = pdf.beginPath()
	clip.rect(
		to_points(area.x),
		to_points(full_height - area.y - area.height),
		to_points(area.width),
		to_points(area.height),
	)
	pdf.clipPath(clip, stroke=0, fill=0)
	pdf.drawImage(
		reportlab.lib.utils.ImageReader(str(image_path)),
		to_points(placement.offset_x_in),
		to_points(full_height - placement.offset_y_in - placement.draw_height_in),
		width=to_points(placement.draw_width_in),
		height=to_points(placement.draw_height_in),
		mask=None,
		preserveAspectRatio=False,
		anchor="sw",
	)
	pdf.restoreState()


#============================================
def _stroke_box(pdf: reportlab.pdfgen.canvas.Canvas, box: ContentBox, full_height: float) -> None:
	if not box.is_valid():
		return
	pdf.rect(
		to_points(box.x),
		to_points(full_height - box.y - box.height),
		to_points(box.width),
		to_points(box.height),
		stroke=1,
		fill=0,
	)


#============================================
def render_cover_pdf(
	layout: CoverLayout,
	output_path: pathlib.Path,
	back_image: pathlib.Path | None = None,
	front_image: pathlib.Path | None = None,
	include_guides: bool = False,
) -> None:
	"""
	Write a single-page cover PDF.

	Args:
		layout: Cover layout.
		output_path: Output PDF path.
		back_image: Optional back panel artwork.
		front_image: Optional front panel artwork.
		include_guides: Draw spine and safe-area guides.
	"""
	full_height = layout.full_height_in
	pdf = reportlab.pdfgen.canvas.Canvas(
		str(output_path),
		pagesize=(to_points(layout.full_width_in), to_points(full_height)),
	)
	if back_image is not None:
		_draw_panel(pdf, back_image, layout.back_art, full_height)
	if front_image is not None:
		_draw_panel(pdf, front_image, layout.front_art, full_height)

	if include_guides:
		pdf.setLineWidth(0.72)
		pdf.setStrokeColorRGB(0.6, 0.6, 0.6)
		_stroke_box(pdf, ContentBox(0.0, 0.0, layout.full_width_in, full_height), full_height)
		pdf.setStrokeColorRGB(0.7, 0.7, 0.7)
		_stroke_box(pdf, layout.spine, full_height)
		pdf.setStrokeColorRGB(1.0, 0.0, 0.0)
		pdf.setDash(6, 4)
		_stroke_box(pdf, safe_box(layout.back_trim), full_height)
		_stroke_box(pdf, safe_box(layout.front_trim), full_height)
		_stroke_box(pdf, spine_safe_box(layout), full_height)
		pdf.setDash()
	pdf.showPage()
	pdf.save()
