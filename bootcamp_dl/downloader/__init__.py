"""Downloader module — resumable-by-presence package download."""

from .downloader import ConsoleProgress, DownloadResult, StagedDownloader, format_percent

__all__ = ["ConsoleProgress", "DownloadResult", "StagedDownloader", "format_percent"]
