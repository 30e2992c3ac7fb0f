#!/usr/bin/env python3

from layercutlib.core import utils
from layercutlib.core.loader import ProjectLoader
from layercutlib.core.renderer import Renderer
from layercutlib.media import ffmpeg

#============================================

class LayercutProject():
	def __init__(self, yaml_file: str, output_override: str = None,
		dry_run: bool = False, verbose: bool = False, quality: str = None,
		format: str = None, timeout: float = None, ffmpeg_path: str = None):
		loader = ProjectLoader(yaml_file, output_override=output_override)
		self._loaded = loader.load()
		self.yaml_file = yaml_file
		self.project = self._loaded.project
		self.output = self._loaded.output
		self.options = ffmpeg.RenderOptions(
			output_path=self.output['file'],
			dry_run=dry_run,
			verbose=verbose,
			quality=quality or self.output['quality'],
			format=format or self.output['format'],
		)
		if timeout is not None:
			self.options.timeout = timeout
		self._renderer = Renderer()
		if ffmpeg_path is not None:
			self._renderer.executor.set_ffmpeg_path(ffmpeg_path)

	#============================
	def command(self) -> ffmpeg.Command:
		command = self._renderer.get_command(self.project)
		ffmpeg.configure_output(command, self.options)
		return command

	#============================
	def command_string(self) -> str:
		return self._renderer.get_command_string(self.project, self.options)

	#============================
	def plan(self) -> dict:
		return self.command().to_dict()

	#============================
	def run(self, cancel_event=None) -> None:
		self._renderer.render(self.project, self.options, cancel_event=cancel_event)
		if self.options.dry_run:
			if not utils.is_quiet_mode():
				print("dry run: command not executed")
			return
		if not utils.is_quiet_mode():
			print(f"mpv {self.options.output_path}")
