#!/usr/bin/env python3

import collections
import shlex
import subprocess
import threading
import time
from layercutlib.core import utils
from layercutlib.core.errors import ExecutionError
from layercutlib.core.errors import InvalidInput
from layercutlib.core.errors import RenderCancelled
from layercutlib.core.errors import RenderPrecondition
from layercutlib.core.errors import RenderTimeout
from layercutlib.media.ffmpeg_options import DEFAULT_TIMEOUT

#============================================

POLL_INTERVAL = 0.1
TERMINATE_GRACE = 5.0
STDERR_TAIL_LINES = 20

#============================================

class Executor():
	def __init__(self, ffmpeg_path: str = 'ffmpeg', dry_run: bool = False,
		verbose: bool = False, timeout: float = DEFAULT_TIMEOUT):
		self.ffmpeg_path = ffmpeg_path
		self.dry_run = dry_run
		self.verbose = verbose
		self.timeout = timeout

	#============================
	def set_dry_run(self, dry_run: bool) -> None:
		self.dry_run = dry_run

	#============================
	def set_verbose(self, verbose: bool) -> None:
		self.verbose = verbose

	#============================
	def set_timeout(self, timeout: float) -> None:
		self.timeout = timeout

	#============================
	def set_ffmpeg_path(self, path: str) -> None:
		self.ffmpeg_path = path

	#============================
	def build_args(self, command) -> list:
		# always overwrite the output file without asking
		return ['-y'] + command.to_args()

	#============================
	def execute(self, command, cancel_event: threading.Event = None) -> None:
		"""
		Run ffmpeg for a finalized command.

		Args:
			command: Command with at least one output.
			cancel_event: optional event; setting it stops the child process.
		"""
		if command is None:
			raise InvalidInput("command cannot be None")
		if len(command.outputs) == 0:
			raise RenderPrecondition("command has no outputs; configure output first")
		args = self.build_args(command)
		if (self.verbose or self.dry_run) and not utils.is_quiet_mode():
			print(f"Executing: {shlex.join([self.ffmpeg_path] + args)}")
		if self.dry_run:
			return
		if cancel_event is not None and cancel_event.is_set():
			raise RenderCancelled("render cancelled before ffmpeg started")
		try:
			proc = subprocess.Popen([self.ffmpeg_path] + args,
				stdin=subprocess.DEVNULL, stdout=subprocess.PIPE,
				stderr=subprocess.PIPE, text=True, errors='replace')
		except OSError as error:
			raise ExecutionError(f"failed to start ffmpeg: {error}") from error
		stderr_tail = collections.deque(maxlen=STDERR_TAIL_LINES)
		readers = [
			threading.Thread(target=self._handle_output,
				args=('stdout', proc.stdout, None), daemon=True),
			threading.Thread(target=self._handle_output,
				args=('stderr', proc.stderr, stderr_tail), daemon=True),
		]
		for reader in readers:
			reader.start()
		try:
			returncode = self._wait(proc, cancel_event)
		finally:
			for reader in readers:
				reader.join()
		if returncode != 0:
			detail = '\n'.join(stderr_tail)
			raise ExecutionError(
				f"ffmpeg execution failed with exit code {returncode}\n{detail}".rstrip()
			)

	#============================
	def _wait(self, proc, cancel_event) -> int:
		deadline = None
		if self.timeout is not None and self.timeout > 0:
			deadline = time.monotonic() + self.timeout
		while True:
			try:
				return proc.wait(timeout=POLL_INTERVAL)
			except subprocess.TimeoutExpired:
				pass
			if cancel_event is not None and cancel_event.is_set():
				self._stop(proc)
				raise RenderCancelled("render cancelled")
			if deadline is not None and time.monotonic() >= deadline:
				self._stop(proc)
				raise RenderTimeout(f"ffmpeg exceeded timeout of {self.timeout} seconds")

	#============================
	def _stop(self, proc) -> None:
		proc.terminate()
		try:
			proc.wait(timeout=TERMINATE_GRACE)
		except subprocess.TimeoutExpired:
			proc.kill()
			proc.wait()

	#============================
	def _handle_output(self, name: str, stream, tail) -> None:
		with stream:
			for line in stream:
				line = line.rstrip('\n')
				if tail is not None:
					tail.append(line)
				if self.verbose and not utils.is_quiet_mode():
					print(f"[{name}] {line}")

	#============================
	def check_ffmpeg(self) -> str:
		"""
		Return the first line of `ffmpeg -version`, raising if it fails.
		"""
		try:
			proc = subprocess.run([self.ffmpeg_path, '-version'],
				capture_output=True, text=True, errors='replace', check=True)
		except (OSError, subprocess.CalledProcessError) as error:
			raise ExecutionError(f"ffmpeg not found or not working: {error}") from error
		lines = proc.stdout.splitlines()
		first_line = lines[0] if len(lines) > 0 else ''
		if self.verbose and not utils.is_quiet_mode():
			print(f"Found: {first_line}")
		return first_line
