#!/usr/bin/env python3
"""
devstrap datauri script
Converts a file into a base64 data URI
"""

import base64
from pathlib import Path
from typing import List

import click

from devstrap.platform.detector import PlatformInfo
from devstrap.scripts.base import dispatch, error, platform_table, run_standalone

DEFAULT_MIME_TYPE = 'application/octet-stream'

MIME_TYPES = {
    # Images
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
    '.svg': 'image/svg+xml',
    '.ico': 'image/x-icon',
    '.bmp': 'image/bmp',
    '.tiff': 'image/tiff',
    '.tif': 'image/tiff',
    '.avif': 'image/avif',
    # Audio
    '.mp3': 'audio/mpeg',
    '.wav': 'audio/wav',
    '.ogg': 'audio/ogg',
    '.m4a': 'audio/mp4',
    '.flac': 'audio/flac',
    '.aac': 'audio/aac',
    '.weba': 'audio/webm',
    # Video
    '.mp4': 'video/mp4',
    '.webm': 'video/webm',
    '.ogv': 'video/ogg',
    '.avi': 'video/x-msvideo',
    '.mov': 'video/quicktime',
    '.mkv': 'video/x-matroska',
    # Fonts
    '.woff': 'font/woff',
    '.woff2': 'font/woff2',
    '.ttf': 'font/ttf',
    '.otf': 'font/otf',
    '.eot': 'application/vnd.ms-fontobject',
    # Text and code
    '.html': 'text/html',
    '.htm': 'text/html',
    '.css': 'text/css',
    '.js': 'text/javascript',
    '.mjs': 'text/javascript',
    '.jsx': 'text/javascript',
    '.ts': 'text/typescript',
    '.tsx': 'text/typescript',
    '.json': 'application/json',
    '.xml': 'application/xml',
    '.txt': 'text/plain',
    '.md': 'text/markdown',
    '.csv': 'text/csv',
    '.yaml': 'text/yaml',
    '.yml': 'text/yaml',
    # Documents
    '.pdf': 'application/pdf',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.xls': 'application/vnd.ms-excel',
    '.xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    '.ppt': 'application/vnd.ms-powerpoint',
    '.pptx': 'application/vnd.openxmlformats-officedocument.presentationml.presentation',
    # Archives
    '.zip': 'application/zip',
    '.tar': 'application/x-tar',
    '.gz': 'application/gzip',
    '.rar': 'application/vnd.rar',
    '.7z': 'application/x-7z-compressed',
    # Other
    '.wasm': 'application/wasm',
    '.bin': 'application/octet-stream',
}

# Non text/* types that still carry text
TEXT_APPLICATION_TYPES = frozenset({
    'application/json',
    'application/xml',
    'application/javascript',
})


def mime_type_for(path: Path) -> str:
    return MIME_TYPES.get(path.suffix.lower(), DEFAULT_MIME_TYPE)


def is_text_type(mime_type: str) -> bool:
    return mime_type.startswith('text/') or mime_type in TEXT_APPLICATION_TYPES


def build_data_uri(data: bytes, mime_type: str) -> str:
    """
    Build a data URI

    Args:
        data: Raw file content
        mime_type: MIME type of the content

    Returns:
        data:<mime>[;charset=utf-8];base64,<payload>
    """
    charset = ';charset=utf-8' if is_text_type(mime_type) else ''
    payload = base64.b64encode(data).decode('ascii')
    return f'data:{mime_type}{charset};base64,{payload}'


def do_datauri(args: List[str]) -> int:
    if not args:
        error("Usage: datauri <file>")
        return 1

    path = Path(args[0]).resolve()
    if not path.exists():
        error(f"File not found: {path}")
        return 1
    if path.is_dir():
        error(f"Path is a directory, not a file: {path}")
        return 1

    try:
        data = path.read_bytes()
    except OSError as e:
        error(f"Cannot read file: {path} ({e.strerror or e})")
        return 1

    click.echo(build_data_uri(data, mime_type_for(path)), nl=False)
    return 0


HANDLERS = platform_table(do_datauri)


def main(args: List[str], platform_info: PlatformInfo) -> int:
    return dispatch('datauri', HANDLERS, args, platform_info, fallback=do_datauri)


def cli():
    run_standalone(main)
