"""
Document assembly: title page, item spreads, text sections, spread parity.
"""

# Standard Library
import dataclasses

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.config
import kdp_book_builder.dpi_check
import kdp_book_builder.geometry
import kdp_book_builder.image_fit
import kdp_book_builder.text_flow


BookSettings = kbb.config.BookSettings
ContentItem = kbb.config.ContentItem
PageSpec = kbb.config.PageSpec
LayoutInputError = kbb.config.LayoutInputError
ImagePlacement = kbb.image_fit.ImagePlacement
FlowedLine = kbb.text_flow.FlowedLine
FlowedPage = kbb.text_flow.FlowedPage

TITLE_SIZE_DELTA = kbb.config.TITLE_SIZE_DELTA
AUTHOR_SIZE_DELTA = kbb.config.AUTHOR_SIZE_DELTA
TITLE_LINE_RATIO = kbb.config.TITLE_LINE_RATIO
AUTHOR_LINE_RATIO = kbb.config.AUTHOR_LINE_RATIO
INTRO_HEADING = kbb.config.INTRO_HEADING
BIBLIOGRAPHY_HEADING = kbb.config.BIBLIOGRAPHY_HEADING

ROLE_TITLE = "title"
ROLE_IMAGE = "image"
ROLE_TEXT = "text"
ROLE_BLANK = "blank"


@dataclasses.dataclass(frozen=True)
class DocumentPage:
	number: int
	role: str
	flowed: FlowedPage | None = None
	image: ImagePlacement | None = None
	image_path: str = ""
	item_index: int | None = None


@dataclasses.dataclass(frozen=True)
class Document:
	page_spec: PageSpec
	pages: tuple[DocumentPage, ...]
	warnings: tuple[str, ...] = ()

	@property
	def page_count(self) -> int:
		return len(self.pages)


#============================================
def _append_page(pages: list[DocumentPage], role: str, **fields) -> None:
	pages.append(DocumentPage(number=len(pages) + 1, role=role, **fields))


#============================================
def _pad_to_even(pages: list[DocumentPage]) -> None:
	if len(pages) % 2 == 1:
		_append_page(pages, ROLE_BLANK)


#============================================
def build_title_page(settings: BookSettings, page_spec: PageSpec) -> FlowedPage:
	"""
	Build the centred title page.

	Args:
		settings: Book settings.
		page_spec: Page spec.

	Returns:
		FlowedPage of kind title.
	"""
	center_x = page_spec.effective_width_in / 2.0
	page_height = page_spec.effective_height_in
	lines: list[FlowedLine] = []
	if settings.title.strip():
		lines.append(
			FlowedLine(
				text=settings.title.strip(),
				x_in=center_x,
				y_in=page_height * TITLE_LINE_RATIO,
				font_size_pt=settings.font_size_pt + TITLE_SIZE_DELTA,
				bold=True,
				align=kbb.text_flow.ALIGN_CENTER,
			)
		)
	if settings.author.strip():
		lines.append(
			FlowedLine(
				text=settings.author.strip(),
				x_in=center_x,
				y_in=page_height * AUTHOR_LINE_RATIO,
				font_size_pt=settings.font_size_pt + AUTHOR_SIZE_DELTA,
				align=kbb.text_flow.ALIGN_CENTER,
			)
		)
	return FlowedPage(kind=kbb.text_flow.KIND_TITLE, lines=tuple(lines))


#============================================
def _start_pages(settings: BookSettings, page_spec: PageSpec) -> list[DocumentPage]:
	pages: list[DocumentPage] = []
	if settings.has_title_page:
		_append_page(pages, ROLE_TITLE, flowed=build_title_page(settings, page_spec))
		if settings.enforce_spread_parity:
			_pad_to_even(pages)
	return pages


#============================================
def flow_item_text(item: ContentItem, settings: BookSettings, page_spec: PageSpec) -> list[FlowedPage]:
	"""
	Flow one item's title and description.

	Args:
		item: Content item.
		settings: Book settings.
		page_spec: Page spec.

	Returns:
		At least one flowed page.
	"""
	box = kbb.geometry.require_content_box(page_spec)
	font_size = item.text_size_override or settings.font_size_pt
	flowed = kbb.text_flow.flow_text(
		item.description,
		box,
		font_size,
		settings.line_height,
		font_name=settings.font_name,
		heading=item.title,
		heading_font_name=settings.bold_font_name,
	)
	if not flowed:
		# an item always owns a text page, even an empty one
		flowed = [FlowedPage(kind=kbb.text_flow.KIND_BODY, lines=())]
	return flowed


#============================================
def assemble_item_book(items: list[ContentItem], settings: BookSettings) -> Document:
	"""
	Assemble an image-plus-text book.

	Each item contributes one image page and its text pages. When spread
	parity is enforced a blank page follows any item that leaves the
	running count odd, except the last item.

	Args:
		items: Content items in book order.
		settings: Book settings.

	Returns:
		Document with advisory warnings attached.
	"""
	page_spec = settings.page_spec()
	kbb.geometry.require_content_box(page_spec)
	if not items:
		raise LayoutInputError("No items to lay out")
	warnings = kbb.dpi_check.revalidate(items, page_spec)

	pages = _start_pages(settings, page_spec)
	last_index = len(items) - 1
	for index, item in enumerate(items):
		placement = kbb.image_fit.fit_item_image(item, page_spec)
		_append_page(
			pages,
			ROLE_IMAGE,
			image=placement,
			image_path=item.image_path,
			item_index=index,
		)
		for flowed_page in flow_item_text(item, settings, page_spec):
			_append_page(pages, ROLE_TEXT, flowed=flowed_page, item_index=index)
		if settings.enforce_spread_parity and index < last_index:
			_pad_to_even(pages)

	warnings.extend(kbb.dpi_check.check_margin(page_spec, len(pages)))
	warnings.extend(kbb.dpi_check.check_page_count(len(pages)))
	return Document(page_spec=page_spec, pages=tuple(pages), warnings=tuple(warnings))


#============================================
def assemble_text_book(body: str, settings: BookSettings) -> Document:
	"""
	Assemble a text-only book: title, introduction, body, bibliography.

	Args:
		body: Main body text.
		settings: Book settings with optional intro and bibliography text.

	Returns:
		Document with advisory warnings attached.
	"""
	page_spec = settings.page_spec()
	box = kbb.geometry.require_content_box(page_spec)

	pages = _start_pages(settings, page_spec)
	sections = (
		(INTRO_HEADING, settings.intro_text),
		(None, body),
		(BIBLIOGRAPHY_HEADING, settings.bibliography_text),
	)
	for heading, text in sections:
		if not (text or "").strip():
			continue
		flowed = kbb.text_flow.flow_text(
			text,
			box,
			settings.font_size_pt,
			settings.line_height,
			font_name=settings.font_name,
			heading=heading,
			heading_font_name=settings.bold_font_name,
		)
		for flowed_page in flowed:
			_append_page(pages, ROLE_TEXT, flowed=flowed_page)
	if not pages:
		raise LayoutInputError("No text to lay out")

	warnings: list[str] = []
	warnings.extend(kbb.dpi_check.check_margin(page_spec, len(pages)))
	warnings.extend(kbb.dpi_check.check_page_count(len(pages)))
	return Document(page_spec=page_spec, pages=tuple(pages), warnings=tuple(warnings))
