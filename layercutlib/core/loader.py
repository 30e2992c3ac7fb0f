#!/usr/bin/env python3

import os
import yaml
from layercutlib.core import timeline
from layercutlib.core import utils
from layercutlib.media import ffmpeg_options

#============================================

SCHEMA_VERSION = 1
MAX_YAML_BYTES = 10 ** 7
TRACK_KINDS = ('video', 'audio', 'image', 'text')

#============================================

class LoadedProject():
	def __init__(self):
		self.yaml_file = None
		self.data = {}
		self.project = None
		self.output = {}

#============================================

class ProjectLoader():
	def __init__(self, yaml_file: str, output_override: str = None):
		self.yaml_file = yaml_file
		self.output_override = output_override

	#============================
	def load(self) -> LoadedProject:
		loaded = LoadedProject()
		loaded.yaml_file = self.yaml_file
		loaded.data = self._load_yaml()
		self._validate_required_keys(loaded.data)
		size, fps = self._parse_profile(loaded.data.get('profile'))
		tracks = self._parse_tracks(loaded.data.get('tracks'))
		loaded.project = timeline.Project(size=size, fps=fps, tracks=tracks)
		loaded.output = self._parse_output(loaded.data.get('output', {}))
		return loaded

	#============================
	def _load_yaml(self) -> dict:
		file_size = os.path.getsize(self.yaml_file)
		if file_size > MAX_YAML_BYTES:
			raise RuntimeError("yaml file is larger than 10MB")
		with open(self.yaml_file, 'r') as data_file:
			data = yaml.safe_load(data_file)
		if not isinstance(data, dict):
			raise RuntimeError("project yaml must be a mapping at the top level")
		return data

	#============================
	def _validate_required_keys(self, data: dict) -> None:
		if data.get('layercut') != SCHEMA_VERSION:
			raise RuntimeError(f"layercut must be set to {SCHEMA_VERSION}")
		for key in ('profile', 'tracks'):
			if key not in data:
				raise RuntimeError(f"missing required key: {key}")

	#============================
	def _parse_profile(self, profile: dict) -> tuple:
		if not isinstance(profile, dict):
			raise RuntimeError("profile must be a mapping")
		fps = utils.parse_fps(profile.get('fps'))
		resolution = profile.get('resolution')
		if resolution is not None:
			if not isinstance(resolution, list) or len(resolution) != 2:
				raise RuntimeError("profile.resolution must be [width, height]")
			width, height = resolution
		else:
			width = profile.get('width')
			height = profile.get('height')
			if width is None or height is None:
				raise RuntimeError("profile requires resolution or width/height")
		return (timeline.Size(width, height), fps)

	#============================
	def _parse_tracks(self, tracks: list) -> list:
		if not isinstance(tracks, list):
			raise RuntimeError("tracks must be a list")
		parsed = []
		for index, entry in enumerate(tracks, start=1):
			if not isinstance(entry, dict) or len(entry.keys()) != 1:
				raise RuntimeError("tracks entries must have one key")
			kind = list(entry.keys())[0]
			data = entry.get(kind)
			if kind not in TRACK_KINDS:
				raise RuntimeError(f"unsupported track kind {kind}")
			if not isinstance(data, dict):
				raise RuntimeError(f"{kind} track must be a mapping")
			if data.get('enabled') is False:
				continue
			parsed.append(self._parse_track(kind, data, index))
		return parsed

	#============================
	def _parse_track(self, kind: str, data: dict, index: int):
		name = str(data.get('name', f"{kind}_{index}"))
		z_value = data.get('z', 0)
		if isinstance(z_value, bool) or not isinstance(z_value, int):
			raise RuntimeError(f"track {name}: z must be an integer")
		nodes_data = data.get('nodes', [])
		if not isinstance(nodes_data, list):
			raise RuntimeError(f"track {name}: nodes must be a list")
		nodes = []
		for node_index, node_data in enumerate(nodes_data, start=1):
			if not isinstance(node_data, dict):
				raise RuntimeError(f"track {name}: nodes entries must be mappings")
			if node_data.get('enabled') is False:
				continue
			node_id = str(node_data.get('id', f"{name}_{node_index}"))
			if kind == 'video':
				nodes.append(self._parse_video_node(node_id, node_data))
			elif kind == 'audio':
				nodes.append(self._parse_audio_node(node_id, node_data))
			elif kind == 'image':
				nodes.append(self._parse_image_node(node_id, node_data))
			else:
				nodes.append(self._parse_text_node(node_id, node_data))
		if kind == 'video':
			return timeline.VideoTrack(name=name, z=z_value, nodes=nodes)
		if kind == 'audio':
			return timeline.AudioTrack(name=name, z=z_value, nodes=nodes)
		if kind == 'image':
			return timeline.ImageTrack(name=name, z=z_value, nodes=nodes)
		return timeline.TextTrack(name=name, z=z_value, nodes=nodes)

	#============================
	def _parse_video_node(self, node_id: str, data: dict) -> timeline.VideoNode:
		return timeline.VideoNode(
			id=node_id,
			path=self._require_file(node_id, data),
			src_start=self._time(data, 'in'),
			src_end=self._time(data, 'out'),
			start=self._time(data, 'start'),
			end=self._time(data, 'end'),
			pos=self._position(node_id, data.get('position')),
			size=self._size(node_id, data.get('size')),
		)

	#============================
	def _parse_audio_node(self, node_id: str, data: dict) -> timeline.AudioNode:
		loop = data.get('loop', False)
		if not isinstance(loop, bool):
			raise RuntimeError(f"node {node_id}: loop must be true or false")
		return timeline.AudioNode(
			id=node_id,
			path=self._require_file(node_id, data),
			src_start=self._time(data, 'in'),
			src_end=self._time(data, 'out'),
			start=self._time(data, 'start'),
			end=self._time(data, 'end'),
			volume=self._number(node_id, data.get('volume', 1.0), 'volume'),
			loop=loop,
		)

	#============================
	def _parse_image_node(self, node_id: str, data: dict) -> timeline.ImageNode:
		return timeline.ImageNode(
			id=node_id,
			path=self._require_file(node_id, data),
			start=self._time(data, 'start'),
			end=self._time(data, 'end'),
			pos=self._position(node_id, data.get('position')),
			size=self._size(node_id, data.get('size')),
		)

	#============================
	def _parse_text_node(self, node_id: str, data: dict) -> timeline.TextNode:
		text = data.get('text')
		if text is None:
			raise RuntimeError(f"node {node_id}: text is required")
		style_data = data.get('style', {})
		if not isinstance(style_data, dict):
			raise RuntimeError(f"node {node_id}: style must be a mapping")
		style = timeline.TextStyle(
			font=str(style_data.get('font', '')),
			size=self._number(node_id, style_data.get('size', 24), 'style.size'),
			color=str(style_data.get('color', '')),
			align=str(style_data.get('align', 'left')),
		)
		return timeline.TextNode(
			id=node_id,
			content=str(text),
			start=self._time(data, 'start'),
			end=self._time(data, 'end'),
			pos=self._position(node_id, data.get('position')),
			style=style,
		)

	#============================
	def _require_file(self, node_id: str, data: dict) -> str:
		filepath = data.get('file')
		if filepath is None:
			raise RuntimeError(f"node {node_id}: file is required")
		return str(filepath)

	#============================
	def _time(self, data: dict, key: str) -> float:
		raw_time = data.get(key)
		if raw_time is None:
			return 0.0
		return float(utils.parse_timecode(raw_time))

	#============================
	def _number(self, node_id: str, raw_value, key: str) -> float:
		if isinstance(raw_value, bool):
			raise RuntimeError(f"node {node_id}: {key} must be a number")
		try:
			return float(raw_value)
		except (TypeError, ValueError) as error:
			raise RuntimeError(f"node {node_id}: {key} must be a number") from error

	#============================
	def _position(self, node_id: str, raw_position) -> timeline.Vec2:
		if raw_position is None:
			return timeline.Vec2()
		if not isinstance(raw_position, list) or len(raw_position) != 2:
			raise RuntimeError(f"node {node_id}: position must be [x, y]")
		x_value = int(self._number(node_id, raw_position[0], 'position'))
		y_value = int(self._number(node_id, raw_position[1], 'position'))
		return timeline.Vec2(x_value, y_value)

	#============================
	def _size(self, node_id: str, raw_size) -> timeline.Size:
		if raw_size is None:
			return timeline.Size()
		if not isinstance(raw_size, list) or len(raw_size) != 2:
			raise RuntimeError(f"node {node_id}: size must be [width, height]")
		return timeline.Size(raw_size[0], raw_size[1])

	#============================
	def _parse_output(self, output: dict) -> dict:
		if output is None:
			output = {}
		if not isinstance(output, dict):
			raise RuntimeError("output must be a mapping")
		output_file = output.get('file', 'output.mp4')
		if self.output_override is not None:
			output_file = self.output_override
		quality = output.get('quality', ffmpeg_options.DEFAULT_QUALITY)
		if quality not in ffmpeg_options.QUALITY_PRESETS:
			raise RuntimeError("output.quality must be high, medium, or low")
		container = output.get('format', ffmpeg_options.DEFAULT_FORMAT)
		if container not in ffmpeg_options.FORMATS:
			raise RuntimeError("output.format must be mp4, avi, or mov")
		return {
			'file': str(output_file),
			'quality': quality,
			'format': container,
		}
