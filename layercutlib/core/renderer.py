#!/usr/bin/env python3

import threading
from layercutlib.core.errors import InvalidProject
from layercutlib.media import ffmpeg

#============================================

class Renderer():
	def __init__(self, executor: ffmpeg.Executor = None):
		if executor is None:
			executor = ffmpeg.Executor()
		self.executor = executor

	#============================
	def render(self, project, options: ffmpeg.RenderOptions = None,
		cancel_event: threading.Event = None) -> ffmpeg.Command:
		if project is None:
			raise InvalidProject("project cannot be None")
		if options is None:
			options = ffmpeg.default_render_options()
		self.executor.set_dry_run(options.dry_run)
		self.executor.set_verbose(options.verbose)
		self.executor.set_timeout(options.timeout)
		if not options.dry_run:
			self.executor.check_ffmpeg()
		command = self.get_command(project)
		ffmpeg.configure_output(command, options)
		self.executor.execute(command, cancel_event=cancel_event)
		return command

	#============================
	def get_command(self, project) -> ffmpeg.Command:
		translator = ffmpeg.Translator(project)
		return translator.translate()

	#============================
	def get_command_string(self, project,
		options: ffmpeg.RenderOptions = None) -> str:
		command = self.get_command(project)
		ffmpeg.configure_output(command, options)
		return command.render(self.executor.ffmpeg_path)
