#!/usr/bin/env python3

"""
Pytest coverage for render options and output finalization.
"""

# Standard Library
import os
import sys

# PIP3 modules
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from layercutlib.core import timeline
from layercutlib.core.errors import InvalidInput
from layercutlib.core.errors import RenderPrecondition
from layercutlib.media import ffmpeg
from layercutlib.media import ffmpeg_options

#============================================

def _translated_command():
	"""
	Translate a one-clip project.
	"""
	project = timeline.Project(size=timeline.Size("320", "240"), fps=25, tracks=[
		timeline.VideoTrack(name="main", nodes=[
			timeline.VideoNode(id="v", path="in.mp4")]),
	])
	return ffmpeg.Translator(project).translate()

#============================================

def test_default_options() -> None:
	"""
	Ensure defaults match the documented values.
	"""
	options = ffmpeg.default_render_options()
	assert options.output_path == "output.mp4"
	assert options.dry_run is False
	assert options.verbose is False
	assert options.quality == "medium"
	assert options.format == "mp4"
	assert options.timeout == 600.0
	assert "quality='medium'" in repr(options)

#============================================

@pytest.mark.parametrize("quality, preset, crf, audio_rate", [
	("high", "slow", "18", "320k"),
	("medium", "medium", "23", "192k"),
	("low", "ultrafast", "28", "128k"),
	("bogus", "medium", "23", "192k"),
])
def test_quality_presets(quality: str, preset: str, crf: str, audio_rate: str) -> None:
	"""
	Ensure each quality maps to its encoder flags.
	"""
	options = ffmpeg_options.codec_options(quality, "mp4")
	assert options[options.index("-preset") + 1] == preset
	assert options[options.index("-crf") + 1] == crf
	assert options[options.index("-b:a") + 1] == audio_rate
	assert options[-2:] == ["-f", "mp4"]

#============================================

@pytest.mark.parametrize("container, expected", [
	("mp4", "mp4"),
	("avi", "avi"),
	("mov", "mov"),
	("mkv", "mp4"),
])
def test_container_formats(container: str, expected: str) -> None:
	"""
	Ensure unknown containers fall back to mp4.
	"""
	assert ffmpeg_options.codec_options("medium", container)[-2:] == ["-f", expected]

#============================================

def test_configure_output_is_idempotent() -> None:
	"""
	Ensure finalizing twice leaves exactly one output.
	"""
	command = _translated_command()
	ffmpeg.configure_output(command, ffmpeg.RenderOptions(output_path="a.mp4"))
	ffmpeg.configure_output(command, ffmpeg.RenderOptions(output_path="b.mov",
		format="mov", quality="low"))
	assert len(command.outputs) == 1
	output = command.outputs[0]
	assert output.path == "b.mov"
	assert output.options == [
		"-map", "[v0_0]",
		"-c:v", "libx264", "-preset", "ultrafast", "-crf", "28",
		"-c:a", "aac", "-b:a", "128k",
		"-f", "mov",
	]

#============================================

def test_configure_output_defaults() -> None:
	"""
	Ensure missing options use the defaults.
	"""
	command = _translated_command()
	ffmpeg.configure_output(command)
	assert command.outputs[0].path == "output.mp4"
	assert "23" in command.outputs[0].options

#============================================

def test_configure_output_preconditions() -> None:
	"""
	Ensure untranslated or absent commands are rejected.
	"""
	with pytest.raises(InvalidInput):
		ffmpeg.configure_output(None, ffmpeg.RenderOptions())
	with pytest.raises(RenderPrecondition):
		ffmpeg.configure_output(ffmpeg.Command(), ffmpeg.RenderOptions())
	with pytest.raises(InvalidInput):
		ffmpeg.configure_output(_translated_command(), ffmpeg.RenderOptions(output_path=""))
