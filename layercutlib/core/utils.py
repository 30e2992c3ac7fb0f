#!/usr/bin/env python3

from decimal import Decimal
from fractions import Fraction

#============================================

_QUIET_MODE = False

#============================================

def set_quiet_mode(value: bool) -> None:
	global _QUIET_MODE
	_QUIET_MODE = bool(value)

#============================================

def is_quiet_mode() -> bool:
	return _QUIET_MODE

#============================================

def parse_fps(raw_fps) -> Fraction:
	if raw_fps is None:
		raise RuntimeError("profile.fps is required")
	if isinstance(raw_fps, bool):
		raise RuntimeError("profile.fps must be int, float, or fraction string")
	if isinstance(raw_fps, Fraction):
		return raw_fps
	if isinstance(raw_fps, int):
		return Fraction(raw_fps, 1)
	if isinstance(raw_fps, float):
		return Fraction(str(raw_fps))
	if isinstance(raw_fps, str):
		if '/' in raw_fps:
			parts = raw_fps.split('/')
			return Fraction(int(parts[0]), int(parts[1]))
		return Fraction(raw_fps)
	raise RuntimeError("profile.fps must be int, float, or fraction string")

#============================================

def parse_timecode(raw_time) -> Decimal:
	if raw_time is None:
		raise RuntimeError("time value is required")
	if isinstance(raw_time, bool):
		raise RuntimeError("time values must be int, float, or timecode string")
	if isinstance(raw_time, int):
		return Decimal(raw_time)
	if isinstance(raw_time, float):
		return Decimal(str(raw_time))
	if isinstance(raw_time, str):
		value = raw_time.strip()
		if ':' not in value:
			return Decimal(value)
		parts = value.split(':')
		seconds = Decimal(parts.pop())
		minutes = Decimal(parts.pop())
		hours = Decimal(0)
		if len(parts) > 0:
			hours = Decimal(parts.pop())
		return hours * Decimal(3600) + minutes * Decimal(60) + seconds
	raise RuntimeError("time values must be int, float, or timecode string")

#============================================

def format_fps(fps: Fraction) -> str:
	if fps.denominator == 1:
		return str(fps.numerator)
	return f"{fps.numerator}/{fps.denominator}"

#============================================

def format_seconds(seconds: float) -> str:
	return f"{seconds:.3f}"

#============================================

def format_number(value: float) -> str:
	"""
	Format a number with at most six decimals and no trailing zeros.
	"""
	text = f"{value:.6f}"
	if '.' in text:
		text = text.rstrip('0').rstrip('.')
	if text == '-0':
		text = '0'
	return text

#============================================

def is_number_text(value: str) -> bool:
	try:
		float(value)
	except (TypeError, ValueError):
		return False
	return True

#============================================

_OPTION_SPECIAL_CHARS = ('\\', "'", ':')
_GRAPH_SPECIAL_CHARS = ('\\', "'", '[', ']', ',', ';')

#============================================

def _escape_chars(value: str, special_chars: tuple) -> str:
	return ''.join('\\' + char if char in special_chars else char for char in value)

#============================================

def escape_filter_value(value: str) -> str:
	"""
	Escape a filter option value for use inside a -filter_complex graph.

	ffmpeg unescapes twice: once for the graph description and once
	for the filter option string.
	"""
	option_level = _escape_chars(str(value), _OPTION_SPECIAL_CHARS)
	return _escape_chars(option_level, _GRAPH_SPECIAL_CHARS)
