"""
Optional cleanup passes for extracted source text.
"""

# Standard Library
import collections
import re

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.text_flow


normalize_newlines = kbb.text_flow.normalize_newlines

EDGE_SAMPLE_CHARS = 120
REPEAT_RATIO = 0.6
MIN_PAGES_FOR_REPEATS = 3

PUBLISHER_PATTERNS = [
	re.compile(pattern, re.IGNORECASE)
	for pattern in (
		r"^ *©",
		r"^ *copyright",
		r"^ *isbn",
		r"^ *all rights reserved",
		r"^ *printed in",
		r"^ *first edition",
		r"^ *edizione",
		r"^ *prima edizione",
		r"^ *impaginazione",
		r"^ *stampato in",
		r"^ *collana",
	)
]
FOOTNOTE_PATTERNS = (
	re.compile(r"\[(\d{1,3})\]"),
	re.compile(r"\((\d{1,3})\)"),
	re.compile(r"\^\d{1,3}"),
)
# letters directly followed by a short number, "word12" -> "word"
TRAILING_MARKER_PATTERN = re.compile(r"([^\W\d_])\d{1,3}\b")
NOTES_SECTION_PATTERN = re.compile(
	r"\n(?:NOTES?|ENDNOTES|NOTE\s+DELL'EDITORE|NOTA\s+DEL\s+CURATORE)\b[\s\S]*?"
	r"(?=\n[A-ZÀ-ÖØ-Ý0-9 ,;:'\"-]{8,}\n|$)"
)
TYPOGRAPHY_REPLACEMENTS = {
	"\u2013": "-",
	"\u2014": "-",
	"\u201c": '"',
	"\u201d": '"',
	"\u2018": "'",
	"\u2019": "'",
	"\u00a0": " ",
}


#============================================
def remove_repeated_headers_footers(pages: list[str]) -> list[str]:
	"""
	Drop running headers and footers repeated across most pages.

	A page head (first 120 chars) or tail (last 120 chars) seen on at least
	60% of the pages is removed everywhere. Needs three or more pages.

	Args:
		pages: Page texts in order.

	Returns:
		Cleaned page texts.
	"""
	if len(pages) < MIN_PAGES_FOR_REPEATS:
		return list(pages)
	heads: collections.Counter = collections.Counter()
	tails: collections.Counter = collections.Counter()
	for page in pages:
		text = normalize_newlines(page).strip()
		if not text:
			continue
		heads[text[:EDGE_SAMPLE_CHARS]] += 1
		tails[text[-EDGE_SAMPLE_CHARS:]] += 1
	# a fragment must repeat to count as a running head
	min_hits = max(2, int(len(pages) * REPEAT_RATIO))
	repeated = [text for text, count in heads.items() if count >= min_hits]
	repeated += [text for text, count in tails.items() if count >= min_hits]
	cleaned = []
	for page in pages:
		text = normalize_newlines(page)
		for fragment in repeated:
			text = text.replace(fragment, "")
		cleaned.append(text)
	return cleaned


#============================================
def remove_publisher_lines(text: str) -> str:
	"""
	Drop copyright, ISBN and imprint lines.

	Args:
		text: Source text.

	Returns:
		Text without publisher lines, blank lines kept.
	"""
	kept = [
		line for line in normalize_newlines(text).split("\n")
		if not any(pattern.search(line) for pattern in PUBLISHER_PATTERNS)
	]
	return "\n".join(kept)


#============================================
def remove_footnote_markers(text: str) -> str:
	"""
	Strip footnote reference markers such as [3], (12), ^4 and word7.

	Args:
		text: Source text.

	Returns:
		Text without markers.
	"""
	result = normalize_newlines(text)
	for pattern in FOOTNOTE_PATTERNS:
		result = pattern.sub("", result)
	return TRAILING_MARKER_PATTERN.sub(r"\1", result)


#============================================
def remove_notes_sections(text: str) -> str:
	"""
	Remove notes sections up to the next all-caps heading line.

	Args:
		text: Source text.

	Returns:
		Text without notes sections.
	"""
	return NOTES_SECTION_PATTERN.sub("\n", normalize_newlines(text))


#============================================
def tidy(text: str) -> str:
	"""
	Normalize whitespace and typographic punctuation.

	Args:
		text: Source text.

	Returns:
		Tidied text.
	"""
	result = normalize_newlines(text)
	for old, new in TYPOGRAPHY_REPLACEMENTS.items():
		result = result.replace(old, new)
	result = re.sub(r"[\t\f\v]+", " ", result)
	result = re.sub(r"[^\S\n]{2,}", " ", result)
	return re.sub(r"\n{3,}", "\n\n", result)


#============================================
def clean_units(
	units: list[str],
	headers_footers: bool = True,
	publisher_lines: bool = True,
	footnotes: bool = False,
	notes_sections: bool = False,
	tidy_text: bool = True,
) -> list[str]:
	"""
	Run the selected cleanup passes over extracted units.

	Args:
		units: Raw text units (pages or chapters).
		headers_footers: Remove repeated running heads.
		publisher_lines: Remove imprint lines.
		footnotes: Remove footnote markers.
		notes_sections: Remove notes sections.
		tidy_text: Normalize whitespace and punctuation.

	Returns:
		Cleaned units.
	"""
	result = list(units)
	if headers_footers:
		result = remove_repeated_headers_footers(result)
	passes = []
	if publisher_lines:
		passes.append(remove_publisher_lines)
	if notes_sections:
		passes.append(remove_notes_sections)
	if footnotes:
		passes.append(remove_footnote_markers)
	if tidy_text:
		passes.append(tidy)
	for cleanup_pass in passes:
		result = [cleanup_pass(unit) for unit in result]
	return result
