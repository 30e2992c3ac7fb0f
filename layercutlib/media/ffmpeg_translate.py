#!/usr/bin/env python3

"""
Compile a timeline Project into an ffmpeg filter-graph Command.

Tracks are visited in ascending z order (stable, so ties keep declaration
order). Each source path is opened once; every clip produces a labeled
stream. Visual streams are then stacked with an overlay chain ending at
[final], and audio streams are mixed into [aout].
"""

from layercutlib.core import utils
from layercutlib.core.errors import InvalidInput
from layercutlib.core.errors import InvalidProject
from layercutlib.core.errors import TrackTranslationError
from layercutlib.media.ffmpeg_command import Command

#============================================

BASE_LABEL = '[base]'
FINAL_LABEL = '[final]'
AUDIO_MIX_LABEL = '[aout]'
CANVAS_COLOR = 'black'
# aloop size is counted in samples
AUDIO_LOOP_SIZE = 2147483647

#============================================

class Layer():
	"""
	One visual element waiting to be stacked onto the composite.
	"""
	def __init__(self, kind: str, label: str = None, x: int = 0, y: int = 0,
		start: float = 0.0, end: float = 0.0, params: list = None):
		self.kind = kind
		self.label = label
		self.x = x
		self.y = y
		self.start = start
		self.end = end
		self.params = params

	#============================
	def has_window(self) -> bool:
		return self.end > 0

#============================================

class TranslationState():
	"""
	Per-call accumulator: input dedup map, collected streams, the command.
	"""
	def __init__(self):
		self.command = Command()
		self.input_map = {}
		self.layers = []
		self.audio_labels = []

	#============================
	def input_index(self, path: str, *options) -> int:
		index = self.input_map.get(path)
		if index is None:
			index = self.command.add_input(path, *options)
			self.input_map[path] = index
		return index

#============================================

class Translator():
	def __init__(self, project):
		self.project = project

	#============================
	def translate(self) -> Command:
		if self.project is None:
			raise InvalidProject("project cannot be None")
		state = TranslationState()
		sorted_tracks = sorted(self.project.tracks, key=lambda track: track.z)
		for track_index, track in enumerate(sorted_tracks):
			try:
				self._translate_track(state, track, track_index)
			except TrackTranslationError:
				raise
			except (RuntimeError, ValueError, TypeError, ArithmeticError) as error:
				raise TrackTranslationError(track.kind, track.track_name(),
					error) from error
		terminals = []
		video_label = self._compose_layers(state)
		if video_label is not None:
			terminals.append(video_label)
		audio_label = self._mix_audio(state)
		if audio_label is not None:
			terminals.append(audio_label)
		state.command.mark_complete(terminals)
		return state.command

	#============================
	def _translate_track(self, state: TranslationState, track,
		track_index: int) -> None:
		if track.kind == 'video':
			state.layers.extend(self._translate_video_track(state, track, track_index))
			return
		if track.kind == 'audio':
			state.audio_labels.extend(
				self._translate_audio_track(state, track, track_index)
			)
			return
		if track.kind == 'image':
			state.layers.extend(self._translate_image_track(state, track, track_index))
			return
		if track.kind == 'text':
			state.layers.extend(self._translate_text_track(track))
			return
		raise RuntimeError(f"unsupported track kind {track.kind}")

	#============================
	def _translate_video_track(self, state: TranslationState, track,
		track_index: int) -> list:
		layers = []
		for clip_index, clip in enumerate(track.nodes):
			input_index = state.input_index(clip.path)
			input_label = f"[{input_index}:v]"
			output_label = f"[v{track_index}_{clip_index}]"
			steps = []
			if clip.has_source_window():
				trim_params = [('start', utils.format_seconds(clip.src_start))]
				source_duration = clip.source_duration()
				if source_duration is not None:
					trim_params.append(('duration', utils.format_seconds(source_duration)))
				steps.append(('trim', trim_params))
			if clip.has_source_window() or clip.start > 0:
				steps.append(('setpts', [('', self._pts_expression(clip.start))]))
			if clip.size.is_set():
				steps.append(('scale', [('', clip.size.scale_value())]))
			self._emit_chain(state.command, input_label, output_label, steps, 'null')
			layers.append(Layer('video', output_label, clip.pos.x, clip.pos.y,
				clip.start, clip.end))
		return layers

	#============================
	def _translate_audio_track(self, state: TranslationState, track,
		track_index: int) -> list:
		labels = []
		for clip_index, clip in enumerate(track.nodes):
			input_index = state.input_index(clip.path)
			input_label = f"[{input_index}:a]"
			output_label = f"[a{track_index}_{clip_index}]"
			steps = []
			if clip.has_source_window():
				trim_params = [('start', utils.format_seconds(clip.src_start))]
				source_duration = clip.source_duration()
				if source_duration is not None:
					trim_params.append(('duration', utils.format_seconds(source_duration)))
				steps.append(('atrim', trim_params))
				steps.append(('asetpts', [('', 'PTS-STARTPTS')]))
			placed_duration = clip.end - clip.start
			if clip.loop and placed_duration > 0:
				steps.append(('aloop', [('loop', '-1'), ('size', str(AUDIO_LOOP_SIZE))]))
				steps.append(('atrim', [('duration', utils.format_seconds(placed_duration))]))
			if clip.volume != 1.0:
				steps.append(('volume', [('', utils.format_number(clip.volume))]))
			if clip.start > 0:
				delay_ms = int(round(clip.start * 1000))
				steps.append(('adelay', [('delays', str(delay_ms)), ('all', '1')]))
			self._emit_chain(state.command, input_label, output_label, steps, 'anull')
			labels.append(output_label)
		return labels

	#============================
	def _translate_image_track(self, state: TranslationState, track,
		track_index: int) -> list:
		layers = []
		for clip_index, image in enumerate(track.nodes):
			duration = utils.format_seconds(image.duration())
			input_index = state.input_index(image.path, '-loop', '1', '-t', duration)
			input_label = f"[{input_index}:v]"
			output_label = f"[i{track_index}_{clip_index}]"
			steps = []
			if image.start > 0:
				steps.append(('setpts', [('', self._pts_expression(image.start))]))
			if image.size.is_set():
				steps.append(('scale', [('', image.size.scale_value())]))
			self._emit_chain(state.command, input_label, output_label, steps, 'null')
			layers.append(Layer('image', output_label, image.pos.x, image.pos.y,
				image.start, image.end))
		return layers

	#============================
	def _translate_text_track(self, track) -> list:
		layers = []
		for text_node in track.nodes:
			style = text_node.style
			params = [
				('text', utils.escape_filter_value(text_node.content)),
				('expansion', 'none'),
				('x', self._aligned_x(text_node.pos.x, style.align)),
				('y', str(text_node.pos.y)),
				('fontsize', f"{style.size:.0f}"),
			]
			if style.font != '':
				params.append(('font', utils.escape_filter_value(style.font)))
			if style.color != '':
				params.append(('fontcolor', utils.escape_filter_value(style.color)))
			layer = Layer('text', None, text_node.pos.x, text_node.pos.y,
				text_node.start, text_node.end)
			if layer.has_window():
				params.append(('enable', self._enable_expression(layer)))
			layer.params = params
			layers.append(layer)
		return layers

	#============================
	def _aligned_x(self, x: int, align: str) -> str:
		if align == 'center':
			return f"{x}-text_w/2"
		if align == 'right':
			return f"{x}-text_w"
		return str(x)

	#============================
	def _pts_expression(self, start: float) -> str:
		if start > 0:
			return f"PTS-STARTPTS+{utils.format_seconds(start)}/TB"
		return 'PTS-STARTPTS'

	#============================
	def _enable_expression(self, layer: Layer) -> str:
		start = utils.format_seconds(layer.start)
		end = utils.format_seconds(layer.end)
		return utils.escape_filter_value(f"gte(t,{start})*lt(t,{end})")

	#============================
	def _emit_chain(self, command: Command, input_label: str, output_label: str,
		steps: list, passthrough: str) -> None:
		"""
		Emit steps as single filters linked by intermediate labels.

		An empty step list becomes one pass-through filter so the
		output label is always defined.
		"""
		if len(steps) == 0:
			steps = [(passthrough, None)]
		stem = output_label[1:-1]
		current = input_label
		last_index = len(steps) - 1
		for step_index, (name, params) in enumerate(steps):
			if step_index == last_index:
				next_label = output_label
			else:
				next_label = f"[{stem}_{step_index}]"
			command.add_filter(name, [current], next_label, params)
			current = next_label

	#============================
	def _needs_canvas(self, layers: list) -> bool:
		return layers[0].kind != 'video'

	#============================
	def _compose_layers(self, state: TranslationState):
		"""
		Stack visual layers in z order and return the terminal video label.
		"""
		layers = state.layers
		if len(layers) == 0:
			return None
		has_text = any(layer.kind == 'text' for layer in layers)
		if len(layers) == 1 and not has_text:
			return layers[0].label
		command = state.command
		if self._needs_canvas(layers):
			canvas_params = [
				('c', CANVAS_COLOR),
				('s', f"{self.project.size.width}x{self.project.size.height}"),
				('r', utils.format_fps(self.project.fps)),
			]
			duration = self.project.duration()
			if duration <= 0:
				raise InvalidInput("project has no end time; set end on at least one node")
			canvas_params.append(('d', utils.format_seconds(duration)))
			command.add_filter('color', [], BASE_LABEL, canvas_params)
			current = BASE_LABEL
			pending = list(layers)
		else:
			current = layers[0].label
			pending = list(layers[1:])
		last_index = len(pending) - 1
		for step_index, layer in enumerate(pending):
			if step_index == last_index:
				next_label = FINAL_LABEL
			else:
				next_label = f"[tmp{step_index}]"
			if layer.kind == 'text':
				command.add_filter('drawtext', [current], next_label, layer.params)
			else:
				overlay_params = [('x', str(layer.x)), ('y', str(layer.y))]
				if layer.has_window():
					overlay_params.append(('enable', self._enable_expression(layer)))
				command.add_filter('overlay', [current, layer.label], next_label,
					overlay_params)
			current = next_label
		return current

	#============================
	def _mix_audio(self, state: TranslationState):
		labels = state.audio_labels
		if len(labels) == 0:
			return None
		if len(labels) == 1:
			return labels[0]
		state.command.add_filter('amix', labels, AUDIO_MIX_LABEL, [
			('inputs', str(len(labels))),
			('duration', 'longest'),
		])
		return AUDIO_MIX_LABEL
