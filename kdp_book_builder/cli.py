"""
CLI entry points for print-ready book layout.
"""

# Standard Library
import argparse
import json
import pathlib
import time

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.assembler
import kdp_book_builder.cleanup
import kdp_book_builder.config
import kdp_book_builder.cover
import kdp_book_builder.describe
import kdp_book_builder.dpi_check
import kdp_book_builder.draft
import kdp_book_builder.extract
import kdp_book_builder.geometry
import kdp_book_builder.image_fit
import kdp_book_builder.render


BookSettings = kbb.config.BookSettings
ContentItem = kbb.config.ContentItem

DEFAULT_MARGIN = kbb.config.DEFAULT_MARGIN
DEFAULT_FONT_SIZE = kbb.config.DEFAULT_FONT_SIZE
DEFAULT_LINE_HEIGHT = kbb.config.DEFAULT_LINE_HEIGHT
DEFAULT_DRAFT_PATH = "draft.json"


#============================================
def build_book_settings(
	args: argparse.Namespace,
	intro_text: str = "",
	bibliography_text: str = "",
) -> BookSettings:
	"""
	Build book settings from the shared layout args.

	Args:
		args: Parsed argparse namespace.
		intro_text: Introduction text.
		bibliography_text: Bibliography text.

	Returns:
		BookSettings.
	"""
	trim_width, trim_height = kbb.geometry.find_trim_preset(args.trim)
	return BookSettings(
		title=args.title,
		author=args.author,
		include_title_page=args.title_page,
		trim_width_in=trim_width,
		trim_height_in=trim_height,
		bleed_enabled=args.bleed,
		margin_in=args.margin,
		font_size_pt=args.font_size,
		line_height=args.line_height,
		use_serif=args.serif,
		enforce_spread_parity=args.spread_parity,
		stamp_page_numbers=args.page_numbers,
		intro_text=intro_text,
		bibliography_text=bibliography_text,
	)


#============================================
def build_text_settings(args: argparse.Namespace) -> BookSettings:
	"""
	Build text book settings from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		BookSettings.
	"""
	intro_text = ""
	if args.intro_path:
		intro_text = pathlib.Path(args.intro_path).read_text(encoding="utf-8")
	bibliography_text = ""
	if args.bibliography_path:
		bibliography_text = pathlib.Path(args.bibliography_path).read_text(encoding="utf-8")
	return build_book_settings(args, intro_text, bibliography_text)


#============================================
def load_book(args: argparse.Namespace) -> tuple[BookSettings, list[ContentItem]]:
	"""
	Load a draft from the key-value store or a local file.

	Args:
		args: Parsed argparse namespace with draft_path and kv_load.

	Returns:
		Tuple of (settings, items).
	"""
	if args.kv_load:
		print(f"Draft: KV {args.kv_load}")
		payload = kbb.draft.KvDraftStore().load(args.kv_load)
		return kbb.draft.parse_draft(payload)
	print(f"Draft: {args.draft_path}")
	return kbb.draft.load_draft_file(pathlib.Path(args.draft_path))


#============================================
def store_book(
	args: argparse.Namespace,
	settings: BookSettings,
	items: list[ContentItem],
	default_path: str | None,
) -> None:
	"""
	Save a draft to a local file and/or the key-value store.

	Args:
		args: Parsed argparse namespace with output_path and kv_save.
		settings: Book settings.
		items: Content items.
		default_path: File written when neither an output path nor a KV id is given.
	"""
	output_path = args.output_path
	if output_path is None and not args.kv_save:
		output_path = default_path
	if output_path:
		kbb.draft.save_draft_file(pathlib.Path(output_path), settings, items)
		print(f"Saved draft: {output_path}")
	if args.kv_save:
		kbb.draft.KvDraftStore().save(args.kv_save, kbb.draft.build_draft(settings, items))
		print(f"Saved draft: KV {args.kv_save}")


#============================================
def print_warnings(warnings: list[str] | tuple[str, ...]) -> None:
	"""
	Print advisory warnings.

	Args:
		warnings: Warning strings.
	"""
	if not warnings:
		print("Checks: no warnings")
		return
	print(f"Checks: {len(warnings)} warning(s)")
	for warning in warnings:
		print(f"  WARNING: {warning}")


#============================================
def resolve_output(output_path: str | None, title: str, bleed: bool) -> pathlib.Path:
	"""
	Use the given output path or derive one from the title.

	Args:
		output_path: Output path from the CLI, may be None.
		title: Book title.
		bleed: Whether bleed is enabled.

	Returns:
		Output path.
	"""
	if output_path:
		return pathlib.Path(output_path)
	return pathlib.Path(kbb.render.build_output_filename(title, bleed))


#============================================
def write_preview_json(document: kbb.assembler.Document, output_path: pathlib.Path, zoom: float) -> None:
	"""
	Write preview page geometry and spread pairing as JSON.

	Args:
		document: Assembled document.
		output_path: JSON path.
		zoom: Preview zoom factor.
	"""
	pages = kbb.render.build_preview_pages(document, zoom=zoom)
	spreads = [
		[left["number"], right["number"] if right is not None else None]
		for left, right in kbb.render.pair_spreads(pages)
	]
	data = {
		"zoom": kbb.render.clamp_zoom(zoom),
		"pages": pages,
		"spreads": spreads,
	}
	with output_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)


#============================================
def add_layout_args(parser: argparse.ArgumentParser) -> None:
	"""
	Add the page layout option group.

	Args:
		parser: Sub-command parser.
	"""
	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument("-t", "--trim", dest="trim", default="6x9", help="Trim preset (6x9, 8x10, 8.25x11, 8.5x11).")
	layout_group.add_argument("-b", "--bleed", dest="bleed", action="store_true", help="Enable bleed.")
	layout_group.add_argument("-B", "--no-bleed", dest="bleed", action="store_false", help="Disable bleed.")
	layout_group.add_argument("-m", "--margin", dest="margin", type=float, default=DEFAULT_MARGIN, help="Margin in inches.")
	layout_group.add_argument("-s", "--font-size", dest="font_size", type=float, default=DEFAULT_FONT_SIZE, help="Body font size in points.")
	layout_group.add_argument("-l", "--line-height", dest="line_height", type=float, default=DEFAULT_LINE_HEIGHT, help="Line height multiplier.")
	layout_group.add_argument("--serif", dest="serif", action="store_true", help="Serif body font.")
	layout_group.add_argument("--sans", dest="serif", action="store_false", help="Sans-serif body font.")
	layout_group.add_argument("--spread-parity", dest="spread_parity", action="store_true", help="Pad to keep spreads aligned.")
	layout_group.add_argument("--no-spread-parity", dest="spread_parity", action="store_false", help="Do not pad spreads.")
	layout_group.add_argument("--page-numbers", dest="page_numbers", action="store_true", help="Stamp page numbers.")
	layout_group.add_argument("--no-page-numbers", dest="page_numbers", action="store_false", help="No page numbers.")
	parser.set_defaults(bleed=False, serif=True, spread_parity=True, page_numbers=False)


#============================================
def add_book_args(parser: argparse.ArgumentParser) -> None:
	"""
	Add the book metadata option group.

	Args:
		parser: Sub-command parser.
	"""
	meta_group = parser.add_argument_group("Book")
	meta_group.add_argument("--title", dest="title", default="", help="Book title.")
	meta_group.add_argument("--author", dest="author", default="", help="Book author.")
	meta_group.add_argument("--title-page", dest="title_page", action="store_true", help="Add a title page.")
	meta_group.add_argument("--no-title-page", dest="title_page", action="store_false", help="No title page.")
	parser.set_defaults(title_page=True)


#============================================
def add_draft_source_args(parser: argparse.ArgumentParser) -> None:
	"""
	Add the draft source: a positional JSON path or a KV id.

	Args:
		parser: Sub-command parser.
	"""
	parser.add_argument("draft_path", nargs="?", default=None, help="Draft JSON path.")
	parser.add_argument("--kv-load", dest="kv_load", default=None, help="Load the draft from the KV store by id.")


#============================================
def parse_args() -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Lay out print-on-demand book interiors and covers.")
	subparsers = parser.add_subparsers(dest="command", required=True)

	draft_parser = subparsers.add_parser("draft", help="Create a draft JSON from image files.")
	draft_parser.add_argument("images", nargs="+", help="Image files in book order.")
	draft_parser.add_argument("-o", "--output", dest="output_path", default=None, help="Draft JSON path.")
	draft_parser.add_argument("--kv-save", dest="kv_save", default=None, help="Also save the draft to the KV store under this id.")
	add_book_args(draft_parser)
	add_layout_args(draft_parser)

	describe_parser = subparsers.add_parser("describe", help="Fill item descriptions with generated text.")
	add_draft_source_args(describe_parser)
	describe_parser.add_argument("-o", "--output", dest="output_path", default=None, help="Draft JSON path to write.")
	describe_parser.add_argument("--kv-save", dest="kv_save", default=None, help="Save the draft to the KV store under this id.")
	describe_parser.add_argument("--model", dest="model", default=kbb.describe.DEFAULT_MODEL, help="Model name.")
	describe_parser.add_argument("--overwrite", dest="overwrite", action="store_true", help="Replace existing descriptions.")
	describe_parser.add_argument("--keep", dest="overwrite", action="store_false", help="Keep existing descriptions.")
	describe_parser.set_defaults(overwrite=False)

	build_parser = subparsers.add_parser("build", help="Build an image book PDF from a draft.")
	add_draft_source_args(build_parser)
	build_parser.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	build_parser.add_argument("--preview-json", dest="preview_path", default=None, help="Also write preview geometry JSON.")
	build_parser.add_argument("-z", "--zoom", dest="zoom", type=float, default=1.0, help="Preview zoom (0.5-2.0).")

	check_parser = subparsers.add_parser("check", help="Run pre-export checks on a draft.")
	add_draft_source_args(check_parser)
	check_parser.add_argument("-p", "--paginate", dest="paginate", action="store_true", help="Use the exact page count from a full layout pass.")

	text_parser = subparsers.add_parser("textbook", help="Build a text book PDF from a source PDF.")
	text_parser.add_argument("inputs", nargs="+", help="Source PDF or text files.")
	text_parser.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	add_book_args(text_parser)
	sections_group = text_parser.add_argument_group("Sections")
	sections_group.add_argument("--intro", dest="intro_path", default=None, help="Introduction text file.")
	sections_group.add_argument("--bibliography", dest="bibliography_path", default=None, help="Bibliography text file.")
	clean_group = text_parser.add_argument_group("Cleanup")
	clean_group.add_argument("--clean-headers", dest="clean_headers", action="store_true", help="Remove repeated running heads.")
	clean_group.add_argument("--clean-publisher", dest="clean_publisher", action="store_true", help="Remove imprint lines.")
	clean_group.add_argument("--clean-footnotes", dest="clean_footnotes", action="store_true", help="Remove footnote markers.")
	clean_group.add_argument("--clean-notes", dest="clean_notes", action="store_true", help="Remove notes sections.")
	clean_group.add_argument("--no-tidy", dest="tidy", action="store_false", help="Keep whitespace and punctuation as is.")
	text_parser.set_defaults(tidy=True)
	add_layout_args(text_parser)

	cover_parser = subparsers.add_parser("cover", help="Build a wrap-around cover PDF.")
	cover_parser.add_argument("-t", "--trim", dest="trim", default="8.25x11", help="Trim preset.")
	cover_parser.add_argument("-n", "--pages", dest="pages", type=int, required=True, help="Interior page count.")
	cover_parser.add_argument("--paper", dest="paper", default="color", choices=sorted(kbb.config.SPINE_PER_PAGE), help="Paper type.")
	cover_parser.add_argument("--front", dest="front_path", default=None, help="Front artwork image.")
	cover_parser.add_argument("--back", dest="back_path", default=None, help="Back artwork image.")
	cover_parser.add_argument("-b", "--bleed", dest="bleed", action="store_true", help="Enable bleed.")
	cover_parser.add_argument("-B", "--no-bleed", dest="bleed", action="store_false", help="Disable bleed.")
	cover_parser.add_argument("-g", "--guides", dest="guides", action="store_true", help="Draw guides in the PDF.")
	cover_parser.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	cover_parser.set_defaults(bleed=True, guides=False)

	args = parser.parse_args()
	if args.command in ("describe", "build", "check"):
		if not args.draft_path and not args.kv_load:
			parser.error(f"{args.command}: give a draft JSON path or --kv-load ID")
	return args


#============================================
def run_draft(args: argparse.Namespace) -> None:
	"""
	Create a draft from image files.

	Args:
		args: Parsed argparse namespace.
	"""
	settings = build_book_settings(args)
	items = []
	for value in args.images:
		path = pathlib.Path(value)
		items.append(kbb.image_fit.item_from_image(path, title=path.stem.replace("_", " ")))
		print(f"Item: {path} ({items[-1].image_pixel_width}x{items[-1].image_pixel_height}px)")
	print_warnings(kbb.dpi_check.preflight(items, settings))
	store_book(args, settings, items, DEFAULT_DRAFT_PATH)


#============================================
def run_describe(args: argparse.Namespace) -> None:
	"""
	Fill item descriptions and save the draft.

	Args:
		args: Parsed argparse namespace.
	"""
	settings, items = load_book(args)
	generate = kbb.describe.AnthropicTextGenerator(model=args.model)
	start_time = time.perf_counter()
	items, failures = kbb.describe.fill_descriptions(items, generate, overwrite=args.overwrite)
	print(f"Descriptions: {len(items) - len(failures)} ok, {len(failures)} failed")
	for index, message in sorted(failures.items()):
		print(f"  FAILED: {kbb.dpi_check.item_label(items[index], index)}: {message}")
	if args.kv_load and not args.kv_save and not args.output_path:
		# write back to where the draft came from
		args.kv_save = args.kv_load
	store_book(args, settings, items, args.draft_path)
	print(f"Timing: total={time.perf_counter() - start_time:.2f}s")


#============================================
def run_build(args: argparse.Namespace) -> None:
	"""
	Build an image book PDF from a draft.

	Args:
		args: Parsed argparse namespace.
	"""
	start_time = time.perf_counter()
	settings, items = load_book(args)
	print(f"Items: {len(items)}")
	print(f"Trim: {settings.trim_width_in:g}x{settings.trim_height_in:g} in, bleed: {settings.bleed_enabled}")

	layout_start = time.perf_counter()
	document = kbb.assembler.assemble_item_book(items, settings)
	layout_end = time.perf_counter()
	print(f"Pages laid out: {document.page_count}")
	print_warnings(document.warnings)

	output_path = resolve_output(args.output_path, settings.title, settings.bleed_enabled)
	print(f"Output PDF: {output_path}")
	render_start = time.perf_counter()
	kbb.render.render_document_pdf(document, settings, output_path, verbose=True)
	render_end = time.perf_counter()
	if args.preview_path:
		write_preview_json(document, pathlib.Path(args.preview_path), args.zoom)
		print(f"Preview JSON: {args.preview_path}")
	print(
		"Timing: layout={:.2f}s render={:.2f}s total={:.2f}s".format(
			layout_end - layout_start,
			render_end - render_start,
			render_end - start_time,
		)
	)


#============================================
def run_check(args: argparse.Namespace) -> None:
	"""
	Run the pre-export checks on a draft.

	Args:
		args: Parsed argparse namespace.
	"""
	settings, items = load_book(args)
	page_count = None
	if args.paginate:
		page_count = kbb.assembler.assemble_item_book(items, settings).page_count
		print(f"Pages laid out: {page_count}")
	else:
		estimate = kbb.dpi_check.estimate_item_page_count(len(items), settings)
		print(f"Estimated pages: {estimate}")
	print_warnings(kbb.dpi_check.preflight(items, settings, page_count))


#============================================
def read_source_units(inputs: list[str]) -> list[str]:
	"""
	Read raw text units from PDF and plain text inputs.

	Args:
		inputs: Input paths.

	Returns:
		Text units in input order.
	"""
	units: list[str] = []
	for value in inputs:
		path = pathlib.Path(value)
		if path.suffix.lower() == ".pdf":
			units.extend(kbb.extract.extract_pdf_pages(path))
		else:
			units.append(path.read_text(encoding="utf-8"))
	return units


#============================================
def run_textbook(args: argparse.Namespace) -> None:
	"""
	Build a text book PDF from source documents.

	Args:
		args: Parsed argparse namespace.
	"""
	start_time = time.perf_counter()
	settings = build_text_settings(args)
	units = read_source_units(args.inputs)
	print(f"Source units: {len(units)}")
	units = kbb.cleanup.clean_units(
		units,
		headers_footers=args.clean_headers,
		publisher_lines=args.clean_publisher,
		footnotes=args.clean_footnotes,
		notes_sections=args.clean_notes,
		tidy_text=args.tidy,
	)
	body = kbb.extract.join_units(units)
	document = kbb.assembler.assemble_text_book(body, settings)
	print(f"Pages laid out: {document.page_count}")
	print_warnings(document.warnings)

	output_path = resolve_output(args.output_path, settings.title, settings.bleed_enabled)
	print(f"Output PDF: {output_path}")
	kbb.render.render_document_pdf(document, settings, output_path, verbose=True)
	print(f"Timing: total={time.perf_counter() - start_time:.2f}s")


#============================================
def run_cover(args: argparse.Namespace) -> None:
	"""
	Build a cover PDF.

	Args:
		args: Parsed argparse namespace.
	"""
	trim_width, trim_height = kbb.geometry.find_trim_preset(args.trim)
	layout = kbb.cover.compute_cover_layout(trim_width, trim_height, args.pages, args.paper, args.bleed)
	pixel_width, pixel_height = layout.pixel_size
	print(f"Cover width: {layout.full_width_in:.3f} in ({pixel_width} px @300DPI)")
	print(f"Cover height: {layout.full_height_in:.3f} in ({pixel_height} px @300DPI)")
	print(f"Spine: {layout.spine_width_in:.3f} in")
	output_path = pathlib.Path(args.output_path or kbb.cover.cover_filename(layout))
	front = pathlib.Path(args.front_path) if args.front_path else None
	back = pathlib.Path(args.back_path) if args.back_path else None
	kbb.cover.render_cover_pdf(layout, output_path, back_image=back, front_image=front, include_guides=args.guides)
	print(f"Output PDF: {output_path}")


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	commands = {
		"draft": run_draft,
		"describe": run_describe,
		"build": run_build,
		"check": run_check,
		"textbook": run_textbook,
		"cover": run_cover,
	}
	commands[args.command](args)


if __name__ == "__main__":
	main()
