"""
Package archive download with retry logic and checksum verification.

- HTTP/HTTPS downloads through a shared requests.Session
- Progress reporting (bytes, percentage, speed)
- Retry with exponential backoff
- SHA256 verification while streaming
- Cooperative cancellation between chunks
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from solutionkit.core.cancellation import CancellationToken, ensure_token
from solutionkit.core.exceptions import PackageInstallError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second

    def __str__(self) -> str:
        return format_progress(self)


class DownloadError(PackageInstallError):
    """Exception raised when download fails."""

    pass


class ChecksumError(PackageInstallError):
    """Exception raised when checksum verification fails."""

    pass


def download_file(
    url: str,
    destination: Path,
    expected_sha256: Optional[str] = None,
    session: Optional[requests.Session] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    cancel_token: Optional[CancellationToken] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download file from URL to destination with retries and checksum verification.

    Args:
        url: URL to download from
        destination: Local path to save file
        expected_sha256: Expected SHA256 hash (verified during download)
        session: requests session to use (a new one if None)
        progress_callback: Optional callback for progress updates
        cancel_token: Token checked between chunks and before retries
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If download fails after retries
        ChecksumError: If checksum doesn't match expected value
        OperationCancelled: If the token fires
        ValueError: If URL is empty
    """
    if not url:
        raise ValueError("URL cannot be empty")

    token = ensure_token(cancel_token)
    session = session or requests.Session()
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    if destination.exists() and expected_sha256:
        if verify_checksum(destination, expected_sha256):
            logger.info(f"Archive already downloaded and verified: {destination}")
            return destination
        logger.warning("Checksum mismatch on existing archive, re-downloading")
        destination.unlink()

    attempts = max(1, max_retries)
    for attempt in range(attempts):
        token.raise_if_cancelled("Download")
        try:
            return _download_once(
                url,
                destination,
                expected_sha256,
                session,
                progress_callback,
                token,
                timeout,
            )
        except RequestException as e:
            if destination.exists():
                destination.unlink()
            if attempt == attempts - 1:
                raise DownloadError(f"Download failed after {attempts} attempts: {e}") from e

            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            token.wait(backoff_seconds)

    raise DownloadError("Download failed for unknown reason")


def _download_once(
    url: str,
    destination: Path,
    expected_sha256: Optional[str],
    session: requests.Session,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
    token: CancellationToken,
    timeout: int,
) -> Path:
    logger.info(f"Downloading from {url}")

    response = session.get(url, stream=True, timeout=timeout, allow_redirects=True)
    response.raise_for_status()

    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    hasher = hashlib.sha256() if expected_sha256 else None
    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    try:
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                token.raise_if_cancelled("Download")
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)
                if hasher:
                    hasher.update(chunk)

                current_time = time.time()
                if progress_callback and (
                    current_time - last_progress_time >= 0.5 or downloaded == total_size
                ):
                    elapsed = current_time - start_time
                    progress_callback(
                        DownloadProgress(
                            bytes_downloaded=downloaded,
                            total_bytes=total_size if total_size > 0 else downloaded,
                            percentage=(downloaded / total_size * 100) if total_size > 0 else 0,
                            speed_bps=downloaded / elapsed if elapsed > 0 else 0,
                        )
                    )
                    last_progress_time = current_time
    except Exception:
        if destination.exists():
            destination.unlink()
        raise
    finally:
        response.close()

    if hasher and hasher.hexdigest().lower() != expected_sha256.lower():
        actual_hash = hasher.hexdigest()
        destination.unlink()
        raise ChecksumError(
            f"Checksum mismatch for {destination.name}: "
            f"expected {expected_sha256}, got {actual_hash}"
        )

    logger.info(f"Download complete: {destination}")
    return destination


def verify_checksum(file_path: Path, expected_sha256: str) -> bool:
    """
    Verify file SHA256 checksum.

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    hasher = hashlib.sha256()
    with open(file_path, "rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            hasher.update(chunk)

    return hasher.hexdigest().lower() == expected_sha256.lower()


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> print(format_progress(DownloadProgress(52428800, 104857600, 50.0, 1048576)))
        50.0/100.0 MB (50.0%) at 1.0 MB/s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0 and progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s"
        )
    return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"


__all__ = [
    "DownloadProgress",
    "DownloadError",
    "ChecksumError",
    "download_file",
    "verify_checksum",
    "format_progress",
]
