"""
Rendering: PDF emission with reportlab and on-screen preview geometry.
"""

# Standard Library
import pathlib
import unicodedata

# PIP3 modules
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.assembler
import kdp_book_builder.config
import kdp_book_builder.text_flow
import kdp_book_builder.units


BookSettings = kbb.config.BookSettings
Document = kbb.assembler.Document
DocumentPage = kbb.assembler.DocumentPage
FlowedPage = kbb.text_flow.FlowedPage

CSS_PIXELS_PER_INCH = kbb.config.CSS_PIXELS_PER_INCH
PAGE_NUMBER_SIZE = kbb.config.PAGE_NUMBER_SIZE
PROGRESS_BAR_WIDTH = kbb.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = kbb.config.PROGRESS_UPDATE_EVERY

MIN_ZOOM = 0.5
MAX_ZOOM = 2.0
PLACEHOLDER_GRAY = 0.85

to_points = kbb.units.inches_to_points


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def sanitize_token(value: str) -> str:
	"""
	Sanitize a string for filenames.

	Diacritics are stripped after NFKD normalization and every remaining
	non-alphanumeric character becomes an underscore.

	Args:
		value: Input string.

	Returns:
		Sanitized string.
	"""
	normalized = unicodedata.normalize("NFKD", value or "")
	ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
	result: list[str] = []
	for char in ascii_text.strip():
		if char.isalnum():
			result.append(char)
		else:
			result.append("_")
	sanitized = "".join(result)
	if not sanitized:
		return "book"
	return sanitized


#============================================
def build_output_filename(title: str, bleed: bool) -> str:
	"""
	Build the export file name for a book.

	Args:
		title: Book title.
		bleed: Whether bleed is enabled.

	Returns:
		File name such as "Citta_d_arte_BLEED.pdf".
	"""
	name = sanitize_token(title)
	if bleed:
		name += "_BLEED"
	return f"{name}.pdf"


#============================================
def draw_flowed_page(
	pdf: reportlab.pdfgen.canvas.Canvas,
	flowed: FlowedPage,
	settings: BookSettings,
	page_height: float,
) -> None:
	"""
	Draw the text lines of a flowed page.

	Line y values are slot tops from the page top; the baseline sits one
	font size below the slot top.

	Args:
		pdf: ReportLab canvas.
		flowed: Flowed page.
		settings: Book settings, for the font family.
		page_height: Page height in inches.
	"""
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	for line in flowed.lines:
		font_name = settings.bold_font_name if line.bold else settings.font_name
		pdf.setFont(font_name, line.font_size_pt)
		baseline = line.y_in + kbb.units.points_to_inches(line.font_size_pt)
		x = to_points(line.x_in)
		y = to_points(page_height - baseline)
		if line.align == kbb.text_flow.ALIGN_CENTER:
			pdf.drawCentredString(x, y, line.text)
		else:
			pdf.drawString(x, y, line.text)


#============================================
def draw_image_page(
	pdf: reportlab.pdfgen.canvas.Canvas,
	page: DocumentPage,
	page_height: float,
	image_cache: dict[str, reportlab.lib.utils.ImageReader],
) -> None:
	"""
	Draw an image page, or a gray placeholder when no file is attached.

	Args:
		pdf: ReportLab canvas.
		page: Document page with an image placement.
		page_height: Page height in inches.
		image_cache: ImageReader cache keyed by path.
	"""
	placement = page.image
	x = to_points(placement.offset_x_in)
	y = to_points(page_height - placement.offset_y_in - placement.draw_height_in)
	width = to_points(placement.draw_width_in)
	height = to_points(placement.draw_height_in)
	if not page.image_path:
		pdf.setFillColorRGB(PLACEHOLDER_GRAY, PLACEHOLDER_GRAY, PLACEHOLDER_GRAY)
		pdf.rect(x, y, width, height, stroke=0, fill=1)
		return
	if page.image_path not in image_cache:
		image_cache[page.image_path] = reportlab.lib.utils.ImageReader(page.image_path)
	pdf.drawImage(
		image_cache[page.image_path],
		x,
		y,
		width=width,
		height=height,
		mask=None,
		preserveAspectRatio=False,
		anchor="sw",
	)


#============================================
def draw_page_number(
	pdf: reportlab.pdfgen.canvas.Canvas,
	number: int,
	page_width: float,
	margin: float,
) -> None:
	"""
	Stamp a page number centred in the bottom margin.

	Args:
		pdf: ReportLab canvas.
		number: Logical page number.
		page_width: Page width in inches.
		margin: Margin in inches.
	"""
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	pdf.setFont(kbb.config.FONT_SANS, PAGE_NUMBER_SIZE)
	pdf.drawCentredString(to_points(page_width / 2.0), to_points(margin / 2.0), str(number))


#============================================
def render_document_pdf(
	document: Document,
	settings: BookSettings,
	output_path: pathlib.Path,
	verbose: bool = False,
) -> int:
	"""
	Emit a document as a PDF with one PDF page per document page.

	Args:
		document: Assembled document.
		settings: Book settings used for assembly.
		output_path: Output PDF path.
		verbose: Print a progress bar.

	Returns:
		Number of pages written.
	"""
	page_spec = document.page_spec
	page_width = page_spec.effective_width_in
	page_height = page_spec.effective_height_in
	pdf = reportlab.pdfgen.canvas.Canvas(
		str(output_path),
		pagesize=(to_points(page_width), to_points(page_height)),
	)
	pdf.setTitle(settings.title)
	pdf.setAuthor(settings.author)

	image_cache: dict[str, reportlab.lib.utils.ImageReader] = {}
	total = document.page_count
	for index, page in enumerate(document.pages, start=1):
		if page.image is not None:
			draw_image_page(pdf, page, page_height, image_cache)
		if page.flowed is not None:
			draw_flowed_page(pdf, page.flowed, settings, page_height)
		if settings.stamp_page_numbers and page.role == kbb.assembler.ROLE_TEXT:
			draw_page_number(pdf, page.number, page_width, page_spec.margin_in)
		pdf.showPage()
		if verbose and (index % PROGRESS_UPDATE_EVERY == 0 or index == total):
			print_progress("Pages", index, total)
	if verbose and total > 0:
		print()
	pdf.save()
	return total


#============================================
def clamp_zoom(zoom: float) -> float:
	"""
	Clamp a preview zoom factor to the supported range.

	Args:
		zoom: Requested zoom.

	Returns:
		Zoom within [0.5, 2.0].
	"""
	return min(MAX_ZOOM, max(MIN_ZOOM, zoom))


#============================================
def build_preview_pages(
	document: Document,
	zoom: float = 1.0,
	css_ppi: float = CSS_PIXELS_PER_INCH,
) -> list[dict]:
	"""
	Convert document geometry to screen pixels for a preview.

	Uses the same inch positions as the PDF emitter, so preview and export
	paginate identically at any zoom.

	Args:
		document: Assembled document.
		zoom: Zoom factor, clamped to [0.5, 2.0].
		css_ppi: Screen pixels per inch.

	Returns:
		One dictionary per page with pixel geometry.
	"""
	zoom = clamp_zoom(zoom)

	def px(value: float) -> int:
		return kbb.units.inches_to_screen_pixels(value, css_ppi, zoom)

	page_spec = document.page_spec
	previews: list[dict] = []
	for page in document.pages:
		lines = []
		if page.flowed is not None:
			for line in page.flowed.lines:
				lines.append(
					{
						"text": line.text,
						"x": px(line.x_in),
						"y": px(line.y_in),
						"size": px(kbb.units.points_to_inches(line.font_size_pt)),
						"bold": line.bold,
						"align": line.align,
					}
				)
		image = None
		if page.image is not None:
			image = {
				"x": px(page.image.offset_x_in),
				"y": px(page.image.offset_y_in),
				"width": px(page.image.draw_width_in),
				"height": px(page.image.draw_height_in),
				"path": page.image_path,
			}
		previews.append(
			{
				"number": page.number,
				"role": page.role,
				"width": px(page_spec.effective_width_in),
				"height": px(page_spec.effective_height_in),
				"lines": lines,
				"image": image,
			}
		)
	return previews


#============================================
def pair_spreads(pages: list) -> list[tuple]:
	"""
	Group pages into two-page spreads.

	Args:
		pages: Pages in order.

	Returns:
		List of (left, right) tuples, right is None for an odd last page.
	"""
	spreads: list[tuple] = []
	for index in range(0, len(pages), 2):
		right = pages[index + 1] if index + 1 < len(pages) else None
		spreads.append((pages[index], right))
	return spreads
