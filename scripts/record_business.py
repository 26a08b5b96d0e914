#!/usr/bin/env python3
"""
CraftConnect command-line recorder

Records a craft story from the local microphone, uploads it to the
backend for analysis and prints the result. Optionally asks for a
WhatsApp Business message afterwards.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path for ``src`` imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.config import get_settings  # noqa: E402
from src.core.exceptions import MicrophoneUnavailableError, RecordingTooShortError  # noqa: E402
from src.core.models import AudioRecording  # noqa: E402
from src.services.audio import AudioCapture  # noqa: E402
from src.ui.api_client import APIClient, APIError  # noqa: E402


def record(min_seconds: float) -> AudioRecording | None:
    """Capture until the user presses Enter past the minimum duration."""
    with AudioCapture(min_duration=min_seconds) as capture:
        try:
            capture.start()
        except MicrophoneUnavailableError as exc:
            print(f"Error: {exc.error}")
            if exc.detail:
                print(f"  ({exc.detail})")
            return None

        print(f"Recording... speak for at least {min_seconds:g} seconds.")
        while True:
            try:
                input("Press Enter to stop (Ctrl+C to cancel). ")
            except (KeyboardInterrupt, EOFError):
                print("\nCancelled.")
                return None
            try:
                return capture.stop()
            except RecordingTooShortError as exc:
                remaining = exc.minimum - exc.duration
                print(f"Too short: please continue for {remaining:.0f} more seconds.")


def main() -> int:
    """Entry point with CLI argument parsing."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Record and analyze a craft business story")
    parser.add_argument(
        "--api-url",
        default=settings.api_base_url,
        help=f"Backend API base URL (default: {settings.api_base_url})",
    )
    parser.add_argument(
        "--min-seconds",
        type=float,
        default=settings.min_recording_seconds,
        help="Minimum recording duration in seconds",
    )
    parser.add_argument(
        "--whatsapp",
        action="store_true",
        help="Also generate a WhatsApp Business message",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    recording = record(args.min_seconds)
    if recording is None:
        return 1
    print(f"Captured {recording.duration:.1f}s ({recording.mime_type}). Analyzing...")

    client = APIClient(base_url=args.api_url, min_recording_seconds=args.min_seconds)
    try:
        result = client.submit_recording(recording)
        print("\nTranscript:")
        print(result.transcript)
        print("\nAnalysis:")
        print(json.dumps(result.analysis.model_dump(by_alias=True, mode="json"), indent=2))

        if args.whatsapp:
            message = client.generate_whatsapp_message(
                business_type=result.analysis.business_type,
                detected_focus=result.analysis.detected_focus,
                transcript=result.transcript,
            )
            print("\nWhatsApp message:")
            print(message)
    except APIError as exc:
        print(f"Error ({exc.category}): {exc.message}")
        return 1
    finally:
        client.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
