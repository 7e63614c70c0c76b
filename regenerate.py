#!/usr/bin/env python3
"""
Regenerate one miniature or preview and persist it.
- video-frame: extract a frame from a stored video file (audio-only files get the default background).
- video-url / playlist-url: download from a URL, skipping unchanged remote thumbnails.
- video-file / playlist-file: resize a local image.
The record is committed to the SQLite store; a superseded file is removed after the commit.
Each invocation runs a single generation; concurrent invocations for the same entity are not serialized.
"""

import argparse
import asyncio
import logging
import os
import sys

from db.thumbnails import ThumbnailStore
from engine.paths import build_storage_paths, ensure_dir
from media.ffprobe import get_video_resolution
from thumbnails.builder import (
    create_playlist_miniature_from_existing,
    create_playlist_miniature_from_url,
    create_video_miniature_from_existing,
    create_video_miniature_from_url,
    generate_video_miniature,
)
from thumbnails.entities import Playlist, Video, VideoFile
from thumbnails.errors import MediaProcessingError, ThumbnailError
from thumbnails.types import USE_DEFAULT, ImageSize, ThumbnailOptions, ThumbnailType

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

_TYPES = {
    "miniature": ThumbnailType.MINIATURE,
    "preview": ThumbnailType.PREVIEW,
}


def _setup_logging(log_dir, verbose=False):
    ensure_dir(log_dir)
    root = logging.getLogger("")
    level = logging.DEBUG if verbose else logging.INFO
    root.setLevel(level)
    log_path = os.path.join(log_dir, "thumbnails.log")
    has_file = False
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler):
            if os.path.abspath(getattr(handler, "baseFilename", "")) == os.path.abspath(log_path):
                has_file = True
                break
    if not has_file:
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        file_handler.setLevel(level)
        root.addHandler(file_handler)
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(_LOG_FORMAT))
    console.setLevel(level)
    root.addHandler(console)


def _parse_size(value):
    try:
        width, height = (int(part) for part in value.lower().split("x", 1))
        return ImageSize(width=width, height=height)
    except (TypeError, ValueError) as exc:
        raise argparse.ArgumentTypeError(f"invalid size {value!r}, expected WIDTHxHEIGHT") from exc


def build_parser():
    parser = argparse.ArgumentParser(description="Regenerate a video or playlist thumbnail.")
    parser.add_argument("--root", help="Storage root (defaults to THUMBNAILER_* environment paths).")
    parser.add_argument("--verbose", action="store_true")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--uuid", required=True, help="Video or playlist uuid.")
    common.add_argument("--remote", action="store_true", help="Entity is federated from another origin.")
    common.add_argument("--size", type=_parse_size, help="Target size as WIDTHxHEIGHT.")
    common.add_argument("--unique-filename", action="store_true", help="Write to a fresh filename.")

    typed = argparse.ArgumentParser(add_help=False)
    typed.add_argument("--type", choices=sorted(_TYPES), default="miniature")

    sub = parser.add_subparsers(dest="command", required=True)

    frame = sub.add_parser("video-frame", parents=[common, typed])
    frame.add_argument("--file", required=True, help="Video filename under the videos directory.")
    frame.add_argument("--resolution", type=int, help="0 for audio-only files; probed with ffprobe when omitted.")

    video_url = sub.add_parser("video-url", parents=[common, typed])
    video_url.add_argument("--url", required=True)

    video_file = sub.add_parser("video-file", parents=[common, typed])
    video_file.add_argument("--input", required=True)
    video_file.add_argument("--keep-original", action="store_true")

    playlist_url = sub.add_parser("playlist-url", parents=[common])
    playlist_url.add_argument("--url", required=True)

    playlist_file = sub.add_parser("playlist-file", parents=[common])
    playlist_file.add_argument("--input", required=True)
    playlist_file.add_argument("--keep-original", action="store_true")

    return parser


def _detect_resolution(args, video, paths):
    if args.resolution is not None:
        return args.resolution
    file_path = video.get_video_file_path(VideoFile(filename=args.file, resolution=0), paths)
    try:
        return get_video_resolution(file_path)
    except (RuntimeError, ValueError) as exc:
        raise MediaProcessingError(str(exc)) from exc


async def run(args, store, paths):
    options = ThumbnailOptions(
        size=args.size or USE_DEFAULT,
        keep_original=getattr(args, "keep_original", False),
        automatically_generated=False,
        unique_filename=args.unique_filename,
    )

    if args.command.startswith("playlist-"):
        playlist = Playlist(uuid=args.uuid, remote=args.remote, thumbnail=store.load_for_playlist(args.uuid))
        if args.command == "playlist-url":
            thumbnail = await create_playlist_miniature_from_url(args.url, playlist, options, paths)
        else:
            thumbnail = await create_playlist_miniature_from_existing(args.input, playlist, options, paths)
        playlist.attach_thumbnail(thumbnail)
        return store.save(thumbnail)

    thumbnail_type = _TYPES[args.type]
    video = Video(uuid=args.uuid, remote=args.remote, thumbnails=store.load_for_video(args.uuid))
    if args.command == "video-frame":
        video_file = VideoFile(filename=args.file, resolution=_detect_resolution(args, video, paths))
        video.files.append(video_file)
        thumbnail = await generate_video_miniature(video, video_file, thumbnail_type, options, paths)
    elif args.command == "video-url":
        thumbnail = await create_video_miniature_from_url(args.url, video, thumbnail_type, options, paths)
    else:
        thumbnail = await create_video_miniature_from_existing(args.input, video, thumbnail_type, options, paths)
    video.attach_thumbnail(thumbnail)
    return store.save(thumbnail)


def main(argv=None):
    args = build_parser().parse_args(argv)
    paths = build_storage_paths(args.root)
    _setup_logging(paths.log_dir, verbose=args.verbose)
    store = ThumbnailStore(paths.db_path, paths)

    try:
        thumbnail = asyncio.run(run(args, store, paths))
    except ThumbnailError as exc:
        logging.error("Thumbnail generation failed for %s: %s", args.uuid, exc)
        return 1

    logging.info(
        "Saved %s %s (%sx%s) for %s",
        thumbnail.type.name.lower(),
        thumbnail.filename,
        thumbnail.width,
        thumbnail.height,
        args.uuid,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
