#!/usr/bin/env python3

import argparse
import yaml
from layercutlib.core import utils
from layercutlib.core.project import LayercutProject

#============================================

def parse_args(argv: list = None):
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(description="Layered timeline renderer for ffmpeg")
	parser.add_argument('-y', '--yaml', dest='yamlfile', required=True,
		help='project yaml file describing the tracks to render')
	parser.add_argument('-o', '--output', dest='output_file',
		help='override output file from yaml')
	parser.add_argument('-n', '--dry-run', dest='dry_run', action='store_true',
		help='print the ffmpeg command, do not run it')
	parser.add_argument('-v', '--verbose', dest='verbose', action='store_true',
		help='echo the command and ffmpeg output')
	parser.add_argument('-q', '--quiet', dest='quiet', action='store_true',
		help='suppress console output')
	parser.add_argument('-Q', '--quality', dest='quality',
		choices=('high', 'medium', 'low'), help='override output quality preset')
	parser.add_argument('-f', '--format', dest='format',
		choices=('mp4', 'avi', 'mov'), help='override output container format')
	parser.add_argument('-t', '--timeout', dest='timeout', type=float,
		help='seconds before ffmpeg is stopped')
	parser.add_argument('-F', '--ffmpeg', dest='ffmpeg_path',
		help='ffmpeg executable to run instead of the one on PATH')
	parser.add_argument('-p', '--dump-plan', dest='dump_plan', action='store_true',
		help='print the compiled command model as yaml')
	parser.add_argument('-P', '--print-command', dest='print_command',
		action='store_true', help='print the ffmpeg command line and exit')
	args = parser.parse_args(argv)
	return args

#============================================

def main(argv: list = None) -> None:
	args = parse_args(argv)
	utils.set_quiet_mode(args.quiet)
	project = LayercutProject(args.yamlfile, output_override=args.output_file,
		dry_run=args.dry_run, verbose=args.verbose, quality=args.quality,
		format=args.format, timeout=args.timeout, ffmpeg_path=args.ffmpeg_path)
	if args.dump_plan:
		print(yaml.safe_dump(project.plan(), sort_keys=False))
		return
	if args.print_command:
		print(project.command_string())
		return
	project.run()


if __name__ == '__main__':
	main()
