#!/usr/bin/env python3
"""
Basic ConvertHub SDK usage.

Converts a local file, waits for the job and downloads the result.
Set CONVERTHUB_API_KEY before running.
"""

import signal
import sys
import threading
from pathlib import Path

from converthub import (
    ApiError,
    ConvertHubClient,
    ConvertHubError,
    JobTimeoutError,
    ValidationError,
    WaitCancelledError,
)

DIRECT_UPLOAD_LIMIT = 50 * 1024 * 1024


def convert_local_file(client: ConvertHubClient, source: Path, target_format: str):
    """Convert a file, picking direct or chunked upload by size."""
    print(f"=== Converting {source.name} to {target_format} ===")

    options = client.conversions.options().set_output_filename(
        f"{source.stem}.{target_format}"
    )

    if source.stat().st_size > DIRECT_UPLOAD_LIMIT:
        job = client.chunked_upload.upload_large_file(
            source,
            target_format,
            options=options,
            progress_callback=lambda done, total, pct: print(
                f"  chunk {done}/{total} ({pct:.1f}%)"
            ),
        )
    else:
        job = client.conversions.convert(source, target_format, options)

    print(f"✓ Job {job.job_id} is {job.status.value}")
    return job


def wait_and_download(client: ConvertHubClient, job_id: str, output_dir: Path):
    """Wait for the job and save the converted file.

    Ctrl+C stops waiting and cancels the job on the server.
    """
    cancel = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())

    try:
        job = client.jobs.wait_for_completion(
            job_id, polling_interval=2, max_wait=300, cancel_event=cancel
        )
    except JobTimeoutError as e:
        print(f"❌ Gave up after {e.waited:.0f}s; cancelling job")
        client.jobs.cancel(job_id)
        return None
    except WaitCancelledError:
        print("⚠️  Interrupted; cancelling job")
        client.jobs.cancel(job_id)
        return None
    finally:
        signal.signal(signal.SIGINT, previous)

    if job.is_failed:
        print(f"❌ Conversion failed: {job.error_message} ({job.error_code})")
        return None

    info = client.jobs.get_download_url(job_id)
    destination = info.download_to(output_dir / (info.filename or f"{job_id}.bin"))
    print(f"✓ Saved {info.file_size_formatted} to {destination}")
    return destination


def show_supported_targets(client: ConvertHubClient, source_format: str):
    print(f"\n=== Targets for {source_format} ===")

    if not client.formats.is_supported(source_format):
        print(f"⚠️  {source_format} is not a supported source format")
        return

    conversions = client.formats.get_conversions(source_format)
    for target in conversions.get("available_conversions", []):
        print(f"  - {target}")


def main():
    if len(sys.argv) < 3:
        print("usage: basic_conversion.py <file> <target-format>")
        return 2

    source = Path(sys.argv[1])
    target_format = sys.argv[2]

    try:
        with ConvertHubClient.from_env() as client:
            show_supported_targets(client, source.suffix.lstrip(".").lower())
            job = convert_local_file(client, source, target_format)
            wait_and_download(client, job.job_id, Path.cwd())
    except ValidationError as e:
        print(f"❌ Invalid input: {e} [{e.error_code}]")
        return 1
    except ApiError as e:
        print(f"❌ API error {e.status_code}: {e} [{e.error_code}]")
        return 1
    except ConvertHubError as e:
        print(f"❌ {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
