"""
Raw text units from source PDFs.
"""

# Standard Library
import pathlib

# PIP3 modules
import pypdf

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.text_flow


#============================================
def extract_pdf_pages(path: pathlib.Path) -> list[str]:
	"""
	Extract the text of each page of a PDF, in page order.

	Args:
		path: PDF path.

	Returns:
		One string per page, empty for pages without a text layer.
	"""
	reader = pypdf.PdfReader(str(path))
	return [page.extract_text() or "" for page in reader.pages]


#============================================
def join_units(units: list[str]) -> str:
	"""
	Join page or chapter strings into one body text.

	Units are newline-normalized, trimmed and separated by a blank line so
	each starts a new paragraph. Empty units are dropped.

	Args:
		units: Raw text units.

	Returns:
		Body text.
	"""
	parts = []
	for unit in units:
		text = kbb.text_flow.normalize_newlines(unit).strip()
		if text:
			parts.append(text)
	return "\n\n".join(parts)
