"""
Text flow: newline normalization, word wrap and pagination.

Positions are in inches from the page top-left corner. A line's y is the
top of its slot. The slot is the leading, or the font size when the leading
is smaller, so the baseline (one font size below y) never leaves the
content box.

Overlong tokens: a word wider than the content box is hard-broken at
character level, so no emitted line is wider than the box. A single
glyph wider than the box is the only exception and sits alone on its
line.
"""

# Standard Library
import dataclasses
import re

# PIP3 modules
import reportlab.pdfbase.pdfmetrics

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.config
import kdp_book_builder.units


ContentBox = kbb.config.ContentBox
LayoutInputError = kbb.config.LayoutInputError

FONT_SERIF = kbb.config.FONT_SERIF
FONT_SERIF_BOLD = kbb.config.FONT_SERIF_BOLD
HEADING_OFFSET_IN = kbb.config.HEADING_OFFSET_IN
HEADING_SIZE_DELTA = kbb.config.HEADING_SIZE_DELTA
PARAGRAPH_GAP_FACTOR = kbb.config.PARAGRAPH_GAP_FACTOR

KIND_TITLE = "title"
KIND_HEADING = "section-heading"
KIND_BODY = "body"
ALIGN_LEFT = "left"
ALIGN_CENTER = "center"

FLOW_EPSILON = 1e-9
NEWLINE_PATTERN = re.compile("\r\n?|\u2028|\u2029")
PARAGRAPH_PATTERN = re.compile("\n{2,}")


@dataclasses.dataclass(frozen=True)
class FlowedLine:
	text: str
	x_in: float
	y_in: float
	font_size_pt: float
	bold: bool = False
	align: str = ALIGN_LEFT


@dataclasses.dataclass(frozen=True)
class FlowedPage:
	kind: str
	lines: tuple[FlowedLine, ...]


#============================================
def normalize_newlines(text: str) -> str:
	"""
	Map CRLF, CR and Unicode line/paragraph separators to LF.

	Args:
		text: Raw text.

	Returns:
		Text using only LF newlines.
	"""
	return NEWLINE_PATTERN.sub("\n", text or "")


#============================================
def split_paragraphs(text: str) -> list[str]:
	"""
	Split text on blank-line runs, dropping empty paragraphs.

	Args:
		text: LF-normalized text.

	Returns:
		Paragraph strings.
	"""
	return [part for part in PARAGRAPH_PATTERN.split(text) if part.strip()]


#============================================
def compute_leading(font_size_pt: float, line_height: float) -> float:
	"""
	Baseline-to-baseline distance in inches.

	Args:
		font_size_pt: Font size in points.
		line_height: Line height multiplier.

	Returns:
		Leading in inches.
	"""
	return kbb.units.points_to_inches(font_size_pt) * line_height


#============================================
def compute_line_slot(font_size_pt: float, line_height: float) -> float:
	"""
	Vertical room a line needs below its slot top.

	Args:
		font_size_pt: Font size in points.
		line_height: Line height multiplier.

	Returns:
		The larger of the leading and the font size, in inches.
	"""
	return max(compute_leading(font_size_pt, line_height), kbb.units.points_to_inches(font_size_pt))


#============================================
def measure_width(text: str, font_name: str, font_size_pt: float) -> float:
	"""
	Measure a string with the font's glyph metrics.

	Args:
		text: Text to measure.
		font_name: ReportLab font name.
		font_size_pt: Font size in points.

	Returns:
		Width in inches.
	"""
	width_pt = reportlab.pdfbase.pdfmetrics.stringWidth(text, font_name, font_size_pt)
	return kbb.units.points_to_inches(width_pt)


#============================================
def break_token(token: str, width_in: float, font_name: str, font_size_pt: float) -> list[str]:
	"""
	Hard-break a token that is wider than the line.

	Args:
		token: Unbreakable token.
		width_in: Line width in inches.
		font_name: ReportLab font name.
		font_size_pt: Font size in points.

	Returns:
		Pieces, each fitting the width except a lone oversize glyph.
	"""
	pieces: list[str] = []
	current = ""
	for char in token:
		candidate = current + char
		if current and measure_width(candidate, font_name, font_size_pt) > width_in + FLOW_EPSILON:
			pieces.append(current)
			current = char
		else:
			current = candidate
	if current:
		pieces.append(current)
	return pieces


#============================================
def wrap_paragraph(text: str, width_in: float, font_name: str, font_size_pt: float) -> list[str]:
	"""
	Word-wrap one paragraph to a line width.

	Single newlines inside the paragraph are hard line breaks and runs of
	whitespace collapse to one space.

	Args:
		text: Paragraph text.
		width_in: Line width in inches.
		font_name: ReportLab font name.
		font_size_pt: Font size in points.

	Returns:
		Wrapped lines.
	"""
	lines: list[str] = []
	for raw_line in text.split("\n"):
		current = ""
		for word in raw_line.split():
			candidate = f"{current} {word}" if current else word
			if measure_width(candidate, font_name, font_size_pt) <= width_in + FLOW_EPSILON:
				current = candidate
				continue
			if current:
				lines.append(current)
			if measure_width(word, font_name, font_size_pt) <= width_in + FLOW_EPSILON:
				current = word
				continue
			pieces = break_token(word, width_in, font_name, font_size_pt)
			lines.extend(pieces[:-1])
			current = pieces[-1]
		if current:
			lines.append(current)
	return lines


#============================================
def flow_text(
	text: str,
	box: ContentBox,
	font_size_pt: float,
	line_height: float,
	font_name: str = FONT_SERIF,
	heading: str | None = None,
	heading_font_name: str = FONT_SERIF_BOLD,
	heading_size_pt: float | None = None,
) -> list[FlowedPage]:
	"""
	Flow text into pages inside a content box.

	Args:
		text: Raw text, any newline style.
		box: Content box in inches.
		font_size_pt: Body font size in points.
		line_height: Line height multiplier.
		font_name: Body font used for measuring.
		heading: Optional bold heading on the first page.
		heading_font_name: Heading font name.
		heading_size_pt: Heading size, body size + 3 when None.

	Returns:
		Flowed pages. Empty text without a heading gives no pages.
	"""
	if not box.is_valid():
		raise LayoutInputError(
			f"Content box has no area ({box.width:g}x{box.height:g} in), margin too large"
		)
	leading = compute_leading(font_size_pt, line_height)
	slot = compute_line_slot(font_size_pt, line_height)
	if slot > box.height + FLOW_EPSILON:
		raise LayoutInputError(
			f"Line height {slot:.3f} in is taller than the content box ({box.height:g} in)"
		)
	paragraphs = split_paragraphs(normalize_newlines(text))
	heading_text = (heading or "").strip()
	if not paragraphs and not heading_text:
		return []

	pages: list[FlowedPage] = []
	lines: list[FlowedLine] = []
	kind = KIND_BODY
	y = box.y
	if heading_text:
		if heading_size_pt is None:
			heading_size_pt = font_size_pt + HEADING_SIZE_DELTA
		heading_leading = compute_leading(heading_size_pt, line_height)
		heading_slot = compute_line_slot(heading_size_pt, line_height)
		heading_lines = wrap_paragraph(heading_text, box.width, heading_font_name, heading_size_pt)
		for index, heading_line in enumerate(heading_lines):
			lines.append(
				FlowedLine(heading_line, box.x, box.y + index * heading_leading, heading_size_pt, bold=True)
			)
		if lines[-1].y_in + heading_slot > box.bottom + FLOW_EPSILON:
			raise LayoutInputError(f"Heading {heading_text[:40]!r} does not fit in the content box")
		kind = KIND_HEADING
		# long titles wrap; the body starts below the last heading line
		y = lines[-1].y_in + HEADING_OFFSET_IN

	bottom = box.bottom
	for paragraph in paragraphs:
		for line_text in wrap_paragraph(paragraph, box.width, font_name, font_size_pt):
			if y + slot > bottom + FLOW_EPSILON:
				pages.append(FlowedPage(kind=kind, lines=tuple(lines)))
				lines = []
				kind = KIND_BODY
				y = box.y
			lines.append(FlowedLine(line_text, box.x, y, font_size_pt))
			y += leading
		gap = leading * PARAGRAPH_GAP_FACTOR
		if y + gap > bottom + FLOW_EPSILON:
			pages.append(FlowedPage(kind=kind, lines=tuple(lines)))
			lines = []
			kind = KIND_BODY
			y = box.y
		else:
			y += gap

	if lines:
		pages.append(FlowedPage(kind=kind, lines=tuple(lines)))
	return pages
