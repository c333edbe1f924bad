"""Kindle device detection utilities.

A Kindle mounted as USB storage keeps its clippings at
``documents/My Clippings.txt``. Detection looks for that file under the usual
mount locations of macOS, Linux and Windows.
"""

import logging
import os
import platform
import string
from pathlib import Path

logger = logging.getLogger(__name__)

KINDLE_IDENTIFIERS = ("kindle", "amazon kindle")

CLIPPINGS_RELATIVE_PATH = Path("documents") / "My Clippings.txt"


def _looks_like_kindle(name: str) -> bool:
    return any(identifier in name.lower() for identifier in KINDLE_IDENTIFIERS)


def _candidate_volumes(system: str) -> list[Path]:
    """List directories that may be the root of a mounted e-reader."""
    if system == "Darwin":
        roots = [Path("/Volumes")]
    elif system == "Linux":
        user = os.getenv("USER", "")
        roots = [Path("/media"), Path("/mnt"), Path(f"/media/{user}"), Path(f"/run/media/{user}")]
    elif system == "Windows":
        return [Path(f"{letter}:/") for letter in string.ascii_uppercase if Path(f"{letter}:/").exists()]
    else:
        logger.warning("Unsupported operating system for Kindle detection: %s", system)
        return []

    volumes = []
    for root in roots:
        if not root.is_dir():
            continue
        try:
            volumes.extend(path for path in root.iterdir() if path.is_dir())
        except PermissionError:
            logger.debug("No permission to list %s", root)
    return volumes


def detect_kindle_devices() -> list[tuple[str, Path]]:
    """Detect connected Kindle devices.

    Returns:
        List of tuples containing (device_name, clippings_path), Kindle-named
        volumes first
    """
    system = platform.system()
    logger.debug("Detecting Kindle devices on %s platform", system)

    devices = []
    for volume in _candidate_volumes(system):
        clippings_path = volume / CLIPPINGS_RELATIVE_PATH
        if clippings_path.exists():
            device_name = volume.name or str(volume)
            logger.info("Found Kindle device: %s with clippings at %s", device_name, clippings_path)
            devices.append((device_name, clippings_path))

    devices.sort(key=lambda device: not _looks_like_kindle(device[0]))
    return devices


def find_kindle_clippings() -> Path | None:
    """Find the My Clippings.txt file of the first connected Kindle, if any."""
    devices = detect_kindle_devices()
    if not devices:
        logger.debug("No Kindle devices detected")
        return None

    device_name, clippings_path = devices[0]
    logger.info("Using Kindle clippings from %s: %s", device_name, clippings_path)
    return clippings_path


def format_device_list(devices: list[tuple[str, Path]]) -> str:
    """Format the list of detected devices for display."""
    if not devices:
        return (
            "No Kindle devices detected.\n"
            "Connect your Kindle over USB, or copy 'documents/My Clippings.txt' from it and run:\n"
            "  kindle2notion export /path/to/My\\ Clippings.txt"
        )

    lines = [f"Detected {len(devices)} Kindle device(s):", "------------------------------------"]
    for i, (device_name, clippings_path) in enumerate(devices, 1):
        lines.append(f"{i}. {device_name}")
        lines.append(f"   Clippings file: {clippings_path}")
        lines.append("")

    lines.append("To export from a specific device, run:")
    lines.append("  kindle2notion export CLIPPINGS_PATH")
    return "\n".join(lines)
