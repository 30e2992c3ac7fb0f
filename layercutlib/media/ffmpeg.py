#!/usr/bin/env python3

from layercutlib.media.ffmpeg_command import Command
from layercutlib.media.ffmpeg_command import Filter
from layercutlib.media.ffmpeg_command import Input
from layercutlib.media.ffmpeg_command import Output
from layercutlib.media.ffmpeg_translate import Translator
from layercutlib.media.ffmpeg_options import RenderOptions
from layercutlib.media.ffmpeg_options import configure_output
from layercutlib.media.ffmpeg_options import default_render_options
from layercutlib.media.ffmpeg_execute import Executor

__all__ = [
	'Command',
	'Filter',
	'Input',
	'Output',
	'Translator',
	'RenderOptions',
	'configure_output',
	'default_render_options',
	'Executor',
]
