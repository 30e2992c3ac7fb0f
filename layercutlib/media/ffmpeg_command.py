#!/usr/bin/env python3

"""
Tool-agnostic command model: inputs, labeled filters, outputs.
"""

import shlex

#============================================

class Input():
	def __init__(self, path: str, options: list = None):
		self.path = path
		self.options = list(options or [])

	#============================
	def to_args(self) -> list:
		return [*self.options, '-i', self.path]

#============================================

class Filter():
	def __init__(self, name: str, inputs: list = None, output: str = '',
		params=None):
		self.name = name
		self.inputs = list(inputs or [])
		self.output = output
		self.params = _normalize_params(params)

	#============================
	def render(self) -> str:
		text = ''.join(self.inputs)
		text += self.name
		rendered_params = []
		for key, value in self.params:
			if key == '':
				rendered_params.append(value)
			elif value == '':
				rendered_params.append(key)
			else:
				rendered_params.append(f"{key}={value}")
		if len(rendered_params) > 0:
			text += '=' + ':'.join(rendered_params)
		if self.output:
			text += self.output
		return text

	#============================
	def param(self, key: str):
		for param_key, value in self.params:
			if param_key == key:
				return value
		return None

#============================================

def _normalize_params(params) -> list:
	"""
	Return params as an ordered list of (key, value) string pairs.

	Accepts None, a mapping (insertion order kept) or a sequence of pairs.
	"""
	if params is None:
		return []
	if isinstance(params, dict):
		pairs = params.items()
	else:
		pairs = params
	normalized = []
	for key, value in pairs:
		normalized.append((str(key), str(value)))
	return normalized

#============================================

class Output():
	def __init__(self, path: str, options: list = None):
		self.path = path
		self.options = list(options or [])

	#============================
	def to_args(self) -> list:
		return [*self.options, self.path]

#============================================

class Command():
	def __init__(self):
		self.inputs = []
		self.filters = []
		self.outputs = []
		# labels the final output should map, set by the translator
		self.terminals = []
		self.complete = False

	#============================
	def add_input(self, path: str, *options) -> int:
		self.inputs.append(Input(path, list(options)))
		return len(self.inputs) - 1

	#============================
	def add_filter(self, name: str, inputs: list, output: str,
		params=None) -> Filter:
		new_filter = Filter(name, inputs, output, params)
		self.filters.append(new_filter)
		return new_filter

	#============================
	def add_output(self, path: str, *options) -> None:
		self.outputs.append(Output(path, list(options)))

	#============================
	def clear_outputs(self) -> None:
		self.outputs = []

	#============================
	def mark_complete(self, terminals: list) -> None:
		self.terminals = list(terminals)
		self.complete = True

	#============================
	def filter_graph(self) -> str:
		rendered = [item.render() for item in self.filters]
		return ';'.join(text for text in rendered if text != '')

	#============================
	def to_args(self) -> list:
		args = []
		for item in self.inputs:
			args.extend(item.to_args())
		graph = self.filter_graph()
		if graph != '':
			args.extend(['-filter_complex', graph])
		for item in self.outputs:
			args.extend(item.to_args())
		return args

	#============================
	def render(self, program: str = 'ffmpeg') -> str:
		"""
		Serialize to a single shell-quoted command line.
		"""
		return shlex.join([program] + self.to_args())

	#============================
	def __str__(self) -> str:
		return self.render()

	#============================
	def to_dict(self) -> dict:
		return {
			'inputs': [
				{'path': item.path, 'options': list(item.options)}
				for item in self.inputs
			],
			'filters': [
				{
					'name': item.name,
					'inputs': list(item.inputs),
					'output': item.output,
					'params': [list(pair) for pair in item.params],
					'text': item.render(),
				}
				for item in self.filters
			],
			'outputs': [
				{'path': item.path, 'options': list(item.options)}
				for item in self.outputs
			],
			'terminals': list(self.terminals),
		}
