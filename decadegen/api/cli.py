"""
Command-line entrypoint for decadegen.

Interface responsibilities:
- `serve`: run the FastAPI adapter under uvicorn.
- `generate`: encode a local image as a data URL, call the generation service
  through the client requester, and write the returned image to disk.

Request lifecycle (`generate`):
1. Read the input image and guess its mime type from the file name.
2. Build the prompt from `--prompt` or `--decade`.
3. Call `generate_decade_image` once (the server owns retries).
4. Decode the returned data URL and write it to `--out`.

Error handling strategy:
- Input problems (unreadable file, non-image type, unknown decade) and
  generation failures print a message to stderr and exit with status 1.
"""

import argparse
import logging
import mimetypes
import sys
from pathlib import Path

from decadegen.api.client import GenerationRequestError, generate_decade_image
from decadegen.image.data_url import InvalidDataURL, encode_data_url, parse_data_url
from decadegen.image.provider_config import server_bind
from decadegen.prompting.decade_prompts import DECADES, build_decade_prompt

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="decadegen")
    p.add_argument("--log-level", default="INFO", help="Logging level")
    sub = p.add_subparsers(dest="cmd", required=True)

    serve = sub.add_parser("serve", help="Run the generation HTTP service")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    generate = sub.add_parser("generate", help="Generate an image through the service")
    generate.add_argument("--image", required=True, help="Path to the source image")
    generate.add_argument("--out", required=True, help="Path for the generated image")
    prompt_group = generate.add_mutually_exclusive_group(required=True)
    prompt_group.add_argument("--prompt", help="Free-form prompt")
    prompt_group.add_argument("--decade", help=f"One of: {', '.join(DECADES)}")
    generate.add_argument("--server", default=None, help="Service base URL")
    return p


def image_file_to_data_url(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith("image/"):
        raise ValueError(f"Not an image file: {path}")
    return encode_data_url(mime_type, path.read_bytes())


def run_serve(args) -> int:
    import uvicorn

    host, port = server_bind()
    uvicorn.run(
        "decadegen.api.http_api:app",
        host=args.host or host,
        port=args.port or port,
        log_level=args.log_level.lower(),
    )
    return 0


def run_generate(args) -> int:
    try:
        prompt = args.prompt if args.prompt else build_decade_prompt(args.decade)
        image_data_url = image_file_to_data_url(Path(args.image))
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        result_url = generate_decade_image(image_data_url, prompt, base_url=args.server)
        generated = parse_data_url(result_url).decode()
    except (GenerationRequestError, InvalidDataURL) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(generated.data)
    logger.info("Wrote %s (%s, %d bytes)", out, generated.mime_type, len(generated.data))
    print(str(out))
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "serve":
        return run_serve(args)
    return run_generate(args)


if __name__ == "__main__":
    sys.exit(main())
