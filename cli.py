"""
jcompress: re-encode a JPEG at a lower quality, optionally with a WebP copy

Install (with uv):
  uv tool install .

Usage examples:
  jcompress photo.jpg                      # -> ./compressed/photo.jpg at quality 50
  jcompress -q 80 -w photo.jpg ./out       # -> ./out/photo.jpg and ./out/photo.webp
  jcompress -m file photo.jpg              # -> photo_compressed.jpg next to the source
  jcompress -m file -q 30 photo.jpg small.jpg
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from errors import (
	ConfigError,
	HelpRequested,
	JCompressError,
	UsageError,
	ValidationError,
	WebPUnsupported,
)
from models import ConversionRequest, ConversionResult
from paths import ensure_parent_dir, resolve_output_location, webp_output_path
from settings import Settings, configure_logging, load_settings

logger = logging.getLogger("jcompress.cli")


class ArgumentParser(argparse.ArgumentParser):
	"""argparse that raises UsageError instead of exiting with status 2."""

	def error(self, message):
		raise UsageError(message)


def build_parser(settings: Optional[Settings] = None) -> ArgumentParser:
	settings = settings or Settings()
	parser = ArgumentParser(
		prog="jcompress",
		description="Recompress a JPEG image at a lower quality",
		epilog=(
			"In dir mode the output location is a directory (default: ./%s) and the file keeps its name. "
			"In file mode it is the output file (default: <input>_compressed.jpg)." % settings.output_dir
		),
		add_help=False,
	)
	parser.add_argument("paths", nargs="*", metavar="PATH", help="Input JPEG, then an optional output location")
	parser.add_argument("-h", "--help", action="store_true", help="Show this help message and exit")
	parser.add_argument(
		"-q",
		"--quality",
		type=int,
		default=settings.quality,
		help="JPEG quality 1-100 (default: %(default)s)",
	)
	parser.add_argument("-w", "--webp", action="store_true", help="Also write a WebP copy next to the JPEG")
	parser.add_argument(
		"-m",
		"--mode",
		choices=["dir", "file"],
		default=settings.output_mode,
		help="Treat the output location as a directory or as a file (default: %(default)s)",
	)
	parser.add_argument(
		"--no-mkdir",
		action="store_true",
		default=not settings.create_dirs,
		help="Fail instead of creating a missing output directory",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Log each step to stderr")
	return parser


HELP_FLAGS = ("-h", "--help")


def _wants_help(argv: list[str]) -> bool:
	for token in argv:
		if token == "--":
			return False
		if token in HELP_FLAGS:
			return True
	return False


def parse_args(argv: list[str] | None, parser: ArgumentParser) -> argparse.Namespace:
	if argv is None:
		argv = sys.argv[1:]
	# help wins even when other arguments would not parse
	if _wants_help(argv):
		parser.print_help()
		raise HelpRequested()
	# options may follow the positionals: jcompress photo.jpg -q 80 out
	args = parser.parse_intermixed_args(argv)
	args.paths = args.paths or []
	if len(args.paths) < 1:
		raise UsageError("input path required")
	if len(args.paths) > 2:
		raise UsageError("too many arguments")
	return args


def request_from_args(args: argparse.Namespace, settings: Optional[Settings] = None) -> ConversionRequest:
	settings = settings or Settings()
	input_path = args.paths[0]
	output = args.paths[1] if len(args.paths) == 2 else None
	if output is None and args.mode == "dir":
		output = settings.output_dir
	return ConversionRequest(
		input_path=input_path,
		output=output,
		quality=args.quality,
		webp=args.webp,
		mode=args.mode,
		create_dirs=not args.no_mkdir,
	)


def parse_request(argv: list[str] | None, settings: Optional[Settings] = None) -> ConversionRequest:
	parser = build_parser(settings)
	return request_from_args(parse_args(argv, parser), settings)


def convert(request: ConversionRequest, compressor=None, webp_encoder=None) -> ConversionResult:
	"""Run one conversion. Failures end up in ``result.error``; outputs already written stay."""
	# Lazy import to avoid requiring Pillow for --help and argument errors
	from compress import Compressor, decode_jpeg
	from webp_encoder import get_webp_encoder

	result = ConversionResult()
	compressor = compressor or Compressor(request.quality)
	try:
		jpeg_path = resolve_output_location(request.input_path, request.output, request.mode)
		webp_path = webp_output_path(jpeg_path) if request.webp else None
		if webp_path and os.path.splitext(jpeg_path)[1].lower() == ".webp":
			# the WebP copy would land on the JPEG output itself
			raise ValidationError(f"JPEG output {jpeg_path} ends in .webp; pick another name to use --webp")
		ensure_parent_dir(jpeg_path, create=request.create_dirs)
		image = decode_jpeg(request.input_path)
		result.written_paths.append(compressor.save(image, jpeg_path))
		logger.info("Compressed %s -> %s (quality %d)", request.input_path, jpeg_path, compressor.quality)

		if request.webp:
			webp_encoder = webp_encoder or get_webp_encoder()
			result.written_paths.append(webp_encoder.encode(image, webp_path, request.quality))
			logger.info("Created WebP %s -> %s (quality %d)", request.input_path, webp_path, request.quality)
	except JCompressError as e:
		result.error = e
	return result


def main(argv: list[str] | None = None) -> int:
	try:
		settings = load_settings()
	except ConfigError as e:
		print(f"Error: {e}", file=sys.stderr)
		return 1

	parser = build_parser(settings)
	try:
		args = parse_args(argv, parser)
	except HelpRequested:
		return 0
	except UsageError as e:
		print(parser.format_usage().rstrip(), file=sys.stderr)
		print(f"Error: {e}", file=sys.stderr)
		return 1

	configure_logging("DEBUG" if args.verbose else settings.log_level)

	try:
		request = request_from_args(args, settings)
	except ValidationError as e:
		print(f"Error: {e}", file=sys.stderr)
		return 1

	webp_encoder = None
	if request.webp:
		from webp_encoder import get_webp_encoder

		try:
			webp_encoder = get_webp_encoder(settings.webp, method=settings.webp_method, atomic=settings.atomic_writes)
		except WebPUnsupported as e:
			print(f"WebP not supported: {e}", file=sys.stderr)
			return 1

	from compress import Compressor

	compressor = Compressor(request.quality, atomic=settings.atomic_writes)
	result = convert(request, compressor=compressor, webp_encoder=webp_encoder)

	labels = ["Successfully compressed", "Successfully created WebP"]
	for label, path in zip(labels, result.written_paths):
		print(f"{label} {request.input_path} -> {path} (quality: {request.quality})")

	if result.error is None:
		return 0
	if isinstance(result.error, WebPUnsupported):
		print(f"WebP not supported: {result.error}", file=sys.stderr)
	elif result.written_paths:
		print(f"Error creating WebP: {result.error}", file=sys.stderr)
	else:
		print(f"Error compressing image: {result.error}", file=sys.stderr)
	return 1


if __name__ == "__main__":
	raise SystemExit(main())
