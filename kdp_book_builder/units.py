"""
Unit conversions between inches, points and pixels.
"""

# Standard Library
import math

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.config


POINTS_PER_INCH = kbb.config.POINTS_PER_INCH
CSS_PIXELS_PER_INCH = kbb.config.CSS_PIXELS_PER_INCH


#============================================
def round_half_up(value: float) -> int:
	"""
	Round to the nearest integer with .5 going up.

	Python's round() uses banker's rounding, which would make pixel
	counts differ from browser output on exact halves.

	Args:
		value: Value to round.

	Returns:
		Rounded integer.
	"""
	return int(math.floor(value + 0.5))


#============================================
def points_to_inches(value: float) -> float:
	"""
	Convert points to inches.

	Args:
		value: Points value.

	Returns:
		Inches value.
	"""
	return value / POINTS_PER_INCH


#============================================
def inches_to_points(value: float) -> float:
	"""
	Convert inches to points.

	Args:
		value: Inches value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH


#============================================
def inches_to_pixels(value: float, dpi: float) -> int:
	"""
	Convert inches to device pixels at a print resolution.

	Args:
		value: Inches value.
		dpi: Dots per inch.

	Returns:
		Pixel count.
	"""
	return round_half_up(value * dpi)


#============================================
def inches_to_screen_pixels(
	value: float,
	css_ppi: float = CSS_PIXELS_PER_INCH,
	zoom: float = 1.0,
) -> int:
	"""
	Convert inches to on-screen pixels at a zoom factor.

	Args:
		value: Inches value.
		css_ppi: Screen pixels per inch.
		zoom: Zoom factor.

	Returns:
		Pixel count.
	"""
	return round_half_up(value * css_ppi * zoom)
