"""
Desktop notification when a run finishes.
"""

import shutil
import subprocess
import sys

APP_NAME = "parmove"


def build_notification_command(title: str, body: str, platform: str | None = None) -> list[str] | None:
    """Command line that shows a notification on this platform, or None."""
    platform = platform or sys.platform

    if platform == "darwin":
        if not shutil.which("osascript"):
            return None
        script = f'display notification "{body}" with title "{title}"'
        return ["osascript", "-e", script]

    if platform.startswith("linux") or "bsd" in platform:
        if not shutil.which("notify-send"):
            return None
        return ["notify-send", "--app-name", APP_NAME, "--expire-time", "1000", title, body]

    return None


def send_finished_notification(operation: str, log) -> bool:
    """
    Tell the desktop that the run is over.

    Failures are reported as warnings; a missing notifier never fails the run.

    Returns:
        True if the notification was handed to the desktop.
    """
    title = f"Finished {operation}"
    body = f"`{APP_NAME}` has finished {operation} the directory"

    cmd = build_notification_command(title, body.replace('"', "'"))
    if cmd is None:
        log.warning(f"Failed to display notification: no notifier available on {sys.platform}")
        return False

    try:
        subprocess.run(cmd, check=True, capture_output=True, timeout=10)
    except (OSError, subprocess.SubprocessError) as e:
        log.warning(f"Failed to display notification: {e}")
        return False

    return True
