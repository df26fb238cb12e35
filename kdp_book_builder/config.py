"""
Shared configuration, constants and value types.
"""

# Standard Library
import dataclasses
import math


POINTS_PER_INCH = 72.0
CSS_PIXELS_PER_INCH = 96.0
PRINT_DPI = 300

BLEED_WIDTH_IN = 0.125
BLEED_HEIGHT_IN = 0.25

DEFAULT_TRIM_WIDTH = 6.0
DEFAULT_TRIM_HEIGHT = 9.0
DEFAULT_MARGIN = 0.5
DEFAULT_FONT_SIZE = 11.0
DEFAULT_LINE_HEIGHT = 1.35

HEADING_OFFSET_IN = 0.35
HEADING_SIZE_DELTA = 3.0
TITLE_SIZE_DELTA = 8.0
AUTHOR_SIZE_DELTA = 2.0
TITLE_LINE_RATIO = 0.40
AUTHOR_LINE_RATIO = 0.47
PARAGRAPH_GAP_FACTOR = 0.5

MIN_SCALE_PERCENT = 10.0
MAX_OFFSET_PERCENT = 50.0
MIN_PAGE_COUNT = 24

INTRO_HEADING = "Introduction"
BIBLIOGRAPHY_HEADING = "Appendices and Bibliography"

FONT_SANS = "Helvetica"
FONT_SANS_BOLD = "Helvetica-Bold"
FONT_SERIF = "Times-Roman"
FONT_SERIF_BOLD = "Times-Bold"

PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10
PAGE_NUMBER_SIZE = 9.0

TRIM_PRESETS = {
	"6x9": (6.0, 9.0),
	"8x10": (8.0, 10.0),
	"8.25x11": (8.25, 11.0),
	"8.5x11": (8.5, 11.0),
}

# inches of spine per interior page
SPINE_PER_PAGE = {
	"white": 0.002252,
	"cream": 0.0025,
	"color": 0.002347,
}


class LayoutInputError(ValueError):
	"""
	Fatal layout input, assembly must stop.
	"""


#============================================
def _require_finite(name: str, value: float) -> None:
	if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
		raise LayoutInputError(f"{name} must be a finite number, got {value!r}")


@dataclasses.dataclass(frozen=True)
class ContentBox:
	x: float
	y: float
	width: float
	height: float

	def is_valid(self) -> bool:
		return self.width > 0.0 and self.height > 0.0

	@property
	def bottom(self) -> float:
		return self.y + self.height


@dataclasses.dataclass(frozen=True)
class PageSpec:
	trim_width_in: float
	trim_height_in: float
	bleed_enabled: bool
	margin_in: float

	def __post_init__(self) -> None:
		_require_finite("trim_width_in", self.trim_width_in)
		_require_finite("trim_height_in", self.trim_height_in)
		_require_finite("margin_in", self.margin_in)
		if self.trim_width_in <= 0.0 or self.trim_height_in <= 0.0:
			raise LayoutInputError(
				f"Trim size must be positive, got {self.trim_width_in}x{self.trim_height_in} in"
			)
		if self.margin_in < 0.0:
			raise LayoutInputError(f"Margin must not be negative, got {self.margin_in} in")

	@property
	def effective_width_in(self) -> float:
		if self.bleed_enabled:
			return self.trim_width_in + BLEED_WIDTH_IN
		return self.trim_width_in

	@property
	def effective_height_in(self) -> float:
		if self.bleed_enabled:
			return self.trim_height_in + BLEED_HEIGHT_IN
		return self.trim_height_in

	@property
	def content_box(self) -> ContentBox:
		return ContentBox(
			x=self.margin_in,
			y=self.margin_in,
			width=self.effective_width_in - 2.0 * self.margin_in,
			height=self.effective_height_in - 2.0 * self.margin_in,
		)


@dataclasses.dataclass(frozen=True)
class ContentItem:
	image_pixel_width: int
	image_pixel_height: int
	title: str = ""
	description: str = ""
	scale_percent: float = 100.0
	offset_x_percent: float = 0.0
	offset_y_percent: float = 0.0
	text_size_override: float | None = None
	full_bleed_image: bool = False
	image_path: str = ""

	def __post_init__(self) -> None:
		for name in ("image_pixel_width", "image_pixel_height"):
			value = getattr(self, name)
			if not isinstance(value, int) or isinstance(value, bool) or value < 0:
				raise LayoutInputError(f"{name} must be a non-negative integer, got {value!r}")
		_require_finite("scale_percent", self.scale_percent)
		if self.scale_percent <= 0.0:
			raise LayoutInputError(f"scale_percent must be positive, got {self.scale_percent}")
		if self.scale_percent < MIN_SCALE_PERCENT:
			# frozen dataclass, clamp in place
			object.__setattr__(self, "scale_percent", MIN_SCALE_PERCENT)
		for name in ("offset_x_percent", "offset_y_percent"):
			value = getattr(self, name)
			_require_finite(name, value)
			if abs(value) > MAX_OFFSET_PERCENT:
				raise LayoutInputError(
					f"{name} must be within +/-{MAX_OFFSET_PERCENT:g}, got {value}"
				)
		if self.text_size_override is not None:
			_require_finite("text_size_override", self.text_size_override)
			if self.text_size_override <= 0.0:
				raise LayoutInputError(
					f"text_size_override must be positive, got {self.text_size_override}"
				)


@dataclasses.dataclass(frozen=True)
class BookSettings:
	title: str = ""
	author: str = ""
	include_title_page: bool = True
	trim_width_in: float = DEFAULT_TRIM_WIDTH
	trim_height_in: float = DEFAULT_TRIM_HEIGHT
	bleed_enabled: bool = False
	margin_in: float = DEFAULT_MARGIN
	font_size_pt: float = DEFAULT_FONT_SIZE
	line_height: float = DEFAULT_LINE_HEIGHT
	use_serif: bool = True
	enforce_spread_parity: bool = True
	stamp_page_numbers: bool = False
	intro_text: str = ""
	bibliography_text: str = ""

	def __post_init__(self) -> None:
		_require_finite("font_size_pt", self.font_size_pt)
		_require_finite("line_height", self.line_height)
		if self.font_size_pt <= 0.0:
			raise LayoutInputError(f"font_size_pt must be positive, got {self.font_size_pt}")
		if self.line_height <= 0.0:
			raise LayoutInputError(f"line_height must be positive, got {self.line_height}")

	def page_spec(self) -> PageSpec:
		return PageSpec(
			trim_width_in=self.trim_width_in,
			trim_height_in=self.trim_height_in,
			bleed_enabled=self.bleed_enabled,
			margin_in=self.margin_in,
		)

	@property
	def has_title_page(self) -> bool:
		return self.include_title_page and bool(self.title.strip() or self.author.strip())

	@property
	def font_name(self) -> str:
		return FONT_SERIF if self.use_serif else FONT_SANS

	@property
	def bold_font_name(self) -> str:
		return FONT_SERIF_BOLD if self.use_serif else FONT_SANS_BOLD

