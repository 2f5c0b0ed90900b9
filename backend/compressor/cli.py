"""
Command-line client: compress one image through the compression service.

Usage: imgcompress photo.png --quality 70 --output-dir out/
"""
import argparse
import logging
import sys

from compressor.config import Config
from compressor.client.presenter import summarize, save_compressed
from compressor.client.service import CompressionClient
from compressor.client.session import CompressionSession
from compressor.client.uploader import ImageUploader


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='imgcompress', description='Compress an image via the compression service.')
    parser.add_argument('path', help='Image file to compress (JPEG, PNG, WebP or GIF)')
    parser.add_argument('--quality', type=int, default=Config.DEFAULT_QUALITY, help='JPEG quality, 1-100')
    parser.add_argument('--base-url', default=Config.COMPRESSION_SERVICE_URL, help='Compression service URL')
    parser.add_argument('--output-dir', default='.', help='Where to write compressed-<name>')
    parser.add_argument('--timeout', type=float, default=Config.REQUEST_TIMEOUT_SECONDS)
    return parser


def print_notification(title: str, description: str, variant: str = 'default') -> None:
    stream = sys.stderr if variant == 'destructive' else sys.stdout
    print(f'{title}: {description}', file=stream)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO))

    client = CompressionClient(args.base_url, timeout=args.timeout)
    session = CompressionSession(client, quality=args.quality, notify=print_notification)
    futures = []

    uploader = ImageUploader(lambda candidate: futures.append(session.upload(candidate)),
                             notify=print_notification)
    try:
        if not uploader.select_file(args.path):
            return 1

        result = futures[0].result()
        if result is None:
            return 1

        stats = summarize(result.original_size, result.compressed_size)
        print(f"Original size:   {stats['original_size']}")
        print(f"Compressed size: {stats['compressed_size']}")
        print(f"Size reduction:  {stats['size_reduction']}")

        path = save_compressed(result.compressed_bytes, session.state.original.filename, args.output_dir)
        print(f'Saved {path}')
        return 0
    finally:
        session.close()


if __name__ == '__main__':
    sys.exit(main())
