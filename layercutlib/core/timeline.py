#!/usr/bin/env python3

"""
Immutable timeline model: a project canvas plus layered tracks of timed nodes.
"""

from dataclasses import dataclass, field
from fractions import Fraction
from typing import ClassVar, Tuple, Union
from layercutlib.core import utils
from layercutlib.core.errors import InvalidInput

#============================================

TEXT_ALIGNMENTS = ('left', 'center', 'right')

#============================================

def _check_window(owner: str, start: float, end: float) -> None:
	if start < 0:
		raise InvalidInput(f"{owner}: start must be non-negative")
	if end < start:
		raise InvalidInput(f"{owner}: end must be >= start")

#============================================

def _check_source_window(owner: str, src_start: float, src_end: float) -> None:
	if src_start < 0:
		raise InvalidInput(f"{owner}: source start must be non-negative")
	if src_end > 0 and src_end < src_start:
		raise InvalidInput(f"{owner}: source end must be >= source start")

#============================================

@dataclass(frozen=True)
class Vec2():
	x: int = 0
	y: int = 0

	def __post_init__(self):
		if self.x < 0 or self.y < 0:
			raise InvalidInput("position values must be non-negative")

#============================================

@dataclass(frozen=True)
class Size():
	"""
	Width and height kept as strings so tool expressions pass through.
	"""
	width: str = ''
	height: str = ''

	def __post_init__(self):
		object.__setattr__(self, 'width', _size_text(self.width))
		object.__setattr__(self, 'height', _size_text(self.height))
		for value in (self.width, self.height):
			if utils.is_number_text(value) and float(value) < 0:
				raise InvalidInput("size values must be non-negative")

	#============================
	def is_set(self) -> bool:
		return self.width != '' and self.height != ''

	#============================
	def scale_value(self) -> str:
		return f"{self.width}:{self.height}"

#============================================

def _size_text(value) -> str:
	if value is None:
		return ''
	if isinstance(value, float) and value.is_integer():
		return str(int(value))
	return str(value).strip()

#============================================

@dataclass(frozen=True)
class VideoNode():
	id: str
	path: str
	src_start: float = 0.0
	src_end: float = 0.0
	start: float = 0.0
	end: float = 0.0
	pos: Vec2 = field(default_factory=Vec2)
	size: Size = field(default_factory=Size)

	def __post_init__(self):
		_check_source_window(f"video node {self.id}", self.src_start, self.src_end)
		_check_window(f"video node {self.id}", self.start, self.end)

	#============================
	def has_source_window(self) -> bool:
		return self.src_start > 0 or self.src_end > 0

	#============================
	def source_duration(self):
		if self.src_end > 0:
			return self.src_end - self.src_start
		return None

#============================================

@dataclass(frozen=True)
class ImageNode():
	# stills ignore the source window
	id: str
	path: str
	start: float = 0.0
	end: float = 0.0
	pos: Vec2 = field(default_factory=Vec2)
	size: Size = field(default_factory=Size)
	src_start: float = 0.0
	src_end: float = 0.0

	def __post_init__(self):
		_check_source_window(f"image node {self.id}", self.src_start, self.src_end)
		_check_window(f"image node {self.id}", self.start, self.end)
		if self.end <= self.start:
			raise InvalidInput(f"image node {self.id}: end must be after start")

	#============================
	def duration(self) -> float:
		return self.end - self.start

#============================================

@dataclass(frozen=True)
class AudioNode():
	id: str
	path: str
	src_start: float = 0.0
	src_end: float = 0.0
	start: float = 0.0
	end: float = 0.0
	volume: float = 1.0
	loop: bool = False

	def __post_init__(self):
		_check_source_window(f"audio node {self.id}", self.src_start, self.src_end)
		_check_window(f"audio node {self.id}", self.start, self.end)
		if self.volume < 0:
			raise InvalidInput(f"audio node {self.id}: volume must be non-negative")

	#============================
	def has_source_window(self) -> bool:
		return self.src_start > 0 or self.src_end > 0

	#============================
	def source_duration(self):
		if self.src_end > 0:
			return self.src_end - self.src_start
		return None

#============================================

@dataclass(frozen=True)
class TextStyle():
	font: str = ''
	size: float = 24.0
	color: str = ''
	align: str = 'left'

	def __post_init__(self):
		if self.size <= 0:
			raise InvalidInput("text style size must be positive")
		if self.align not in TEXT_ALIGNMENTS:
			raise InvalidInput("text style align must be left, center, or right")

#============================================

@dataclass(frozen=True)
class TextNode():
	id: str
	content: str
	start: float = 0.0
	end: float = 0.0
	pos: Vec2 = field(default_factory=Vec2)
	style: TextStyle = field(default_factory=TextStyle)

	def __post_init__(self):
		_check_window(f"text node {self.id}", self.start, self.end)

#============================================

class _TrackBase():
	kind: ClassVar[str] = ''
	node_type: ClassVar[type] = object

	def __post_init__(self):
		if not self.name:
			raise InvalidInput(f"{self.kind} track requires a name")
		if isinstance(self.z, bool) or not isinstance(self.z, int):
			raise InvalidInput(f"{self.kind} track {self.name}: z must be an integer")
		nodes = tuple(self.nodes)
		for node in nodes:
			if not isinstance(node, self.node_type):
				raise InvalidInput(
					f"{self.kind} track {self.name} only holds {self.node_type.__name__}"
				)
		object.__setattr__(self, 'nodes', nodes)

	#============================
	def track_name(self) -> str:
		return self.name

#============================================

@dataclass(frozen=True)
class VideoTrack(_TrackBase):
	kind: ClassVar[str] = 'video'
	node_type: ClassVar[type] = VideoNode
	name: str
	z: int = 0
	nodes: Tuple[VideoNode, ...] = ()

#============================================

@dataclass(frozen=True)
class AudioTrack(_TrackBase):
	kind: ClassVar[str] = 'audio'
	node_type: ClassVar[type] = AudioNode
	name: str
	z: int = 0
	nodes: Tuple[AudioNode, ...] = ()

#============================================

@dataclass(frozen=True)
class ImageTrack(_TrackBase):
	kind: ClassVar[str] = 'image'
	node_type: ClassVar[type] = ImageNode
	name: str
	z: int = 0
	nodes: Tuple[ImageNode, ...] = ()

#============================================

@dataclass(frozen=True)
class TextTrack(_TrackBase):
	kind: ClassVar[str] = 'text'
	node_type: ClassVar[type] = TextNode
	name: str
	z: int = 0
	nodes: Tuple[TextNode, ...] = ()

#============================================

Track = Union[VideoTrack, AudioTrack, ImageTrack, TextTrack]
TRACK_TYPES = (VideoTrack, AudioTrack, ImageTrack, TextTrack)

#============================================

@dataclass(frozen=True)
class Project():
	size: Size
	fps: Fraction
	tracks: Tuple[Track, ...] = ()

	def __post_init__(self):
		if not isinstance(self.size, Size) or not self.size.is_set():
			raise InvalidInput("project canvas requires width and height")
		for value in (self.size.width, self.size.height):
			if utils.is_number_text(value) and float(value) <= 0:
				raise InvalidInput("project canvas dimensions must be positive")
		fps = utils.parse_fps(self.fps)
		if fps <= 0:
			raise InvalidInput("project fps must be positive")
		object.__setattr__(self, 'fps', fps)
		tracks = tuple(self.tracks)
		for track in tracks:
			if not isinstance(track, TRACK_TYPES):
				raise InvalidInput(f"unsupported track type {type(track).__name__}")
		object.__setattr__(self, 'tracks', tracks)

	#============================
	def duration(self) -> float:
		"""
		Latest destination end across every node, 0.0 for an empty timeline.
		"""
		latest = 0.0
		for track in self.tracks:
			for node in track.nodes:
				latest = max(latest, node.end)
		return latest
