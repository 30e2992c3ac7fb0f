#!/usr/bin/env python3

from layercutlib.core.errors import InvalidInput
from layercutlib.core.errors import RenderPrecondition

#============================================

QUALITY_PRESETS = {
	'high': ['-c:v', 'libx264', '-preset', 'slow', '-crf', '18',
		'-c:a', 'aac', '-b:a', '320k'],
	'medium': ['-c:v', 'libx264', '-preset', 'medium', '-crf', '23',
		'-c:a', 'aac', '-b:a', '192k'],
	'low': ['-c:v', 'libx264', '-preset', 'ultrafast', '-crf', '28',
		'-c:a', 'aac', '-b:a', '128k'],
}
DEFAULT_QUALITY = 'medium'

FORMATS = ('mp4', 'avi', 'mov')
DEFAULT_FORMAT = 'mp4'

DEFAULT_TIMEOUT = 600.0

#============================================

class RenderOptions():
	def __init__(self, output_path: str = 'output.mp4', dry_run: bool = False,
		verbose: bool = False, quality: str = DEFAULT_QUALITY,
		format: str = DEFAULT_FORMAT, timeout: float = DEFAULT_TIMEOUT):
		self.output_path = output_path
		self.dry_run = dry_run
		self.verbose = verbose
		self.quality = quality
		self.format = format
		self.timeout = timeout

	#============================
	def __repr__(self) -> str:
		return (
			f"RenderOptions(output_path={self.output_path!r}, "
			f"dry_run={self.dry_run}, verbose={self.verbose}, "
			f"quality={self.quality!r}, format={self.format!r}, "
			f"timeout={self.timeout})"
		)

#============================================

def default_render_options() -> RenderOptions:
	return RenderOptions()

#============================================

def codec_options(quality: str, container: str) -> list:
	"""
	Encoder flags for a quality preset followed by the container flag.

	Unknown values fall back to the medium preset and mp4.
	"""
	options = list(QUALITY_PRESETS.get(quality, QUALITY_PRESETS[DEFAULT_QUALITY]))
	if container not in FORMATS:
		container = DEFAULT_FORMAT
	options.extend(['-f', container])
	return options

#============================================

def configure_output(command, options: RenderOptions = None) -> None:
	"""
	Replace the command outputs with one entry built from the options.
	"""
	if command is None:
		raise InvalidInput("command cannot be None")
	if not command.complete:
		raise RenderPrecondition("command must be translated before configuring output")
	if options is None:
		options = default_render_options()
	if not options.output_path:
		raise InvalidInput("output path is required")
	command.clear_outputs()
	output_options = []
	for label in command.terminals:
		output_options.extend(['-map', label])
	output_options.extend(codec_options(options.quality, options.format))
	command.add_output(options.output_path, *output_options)
