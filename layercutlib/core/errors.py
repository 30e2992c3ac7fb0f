#!/usr/bin/env python3

"""
Error types raised while building and rendering layercut projects.
"""

#============================================

class LayercutError(RuntimeError):
	pass

#============================================

class InvalidInput(LayercutError):
	pass

#============================================

class InvalidProject(InvalidInput):
	pass

#============================================

class TrackTranslationError(LayercutError):
	def __init__(self, track_kind: str, track_name: str, cause: Exception):
		self.track_kind = track_kind
		self.track_name = track_name
		self.cause = cause
		message = f"failed to translate {track_kind} track {track_name}: {cause}"
		super().__init__(message)

#============================================

class RenderPrecondition(LayercutError):
	pass

#============================================

class ExecutionError(LayercutError):
	pass

#============================================

class RenderTimeout(ExecutionError):
	pass

#============================================

class RenderCancelled(ExecutionError):
	pass
