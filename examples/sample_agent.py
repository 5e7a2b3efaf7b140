"""
Sample agent wiring for file-retention.

A few worker threads write documents and register them with the tracker,
while a scheduler thread sweeps on a fixed cadence.
Run with: python sample_agent.py [config.yaml]
"""

import random
import sys
import threading
import time
from datetime import datetime
from pathlib import Path

from file_retention import FileCleaner, FileTracker, load_components


class DocumentHandler:
    """Stand-in for a content-producing handler (word processor, browser download)."""

    def __init__(self, tracker: FileTracker, output_dir: Path, name: str):
        self._tracker = tracker
        self._output_dir = output_dir
        self._name = name

    def create_document(self) -> Path:
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        path = self._output_dir / f"{self._name}-{stamp}.txt"
        path.write_text(f"Generated by {self._name} at {stamp}\n", encoding="utf-8")
        self._tracker.add(path)
        return path


def run_handler(handler: DocumentHandler, stop: threading.Event) -> None:
    while not stop.is_set():
        handler.create_document()
        stop.wait(random.uniform(0.1, 0.5))


def run_scheduler(cleaner: FileCleaner, interval: float, stop: threading.Event) -> None:
    while not stop.wait(interval):
        outcome = cleaner.flush()
        print(outcome)


def main() -> None:
    config_path = sys.argv[1] if len(sys.argv) > 1 else None
    components = load_components(config_path)

    output_dir = Path("agent-output")
    output_dir.mkdir(exist_ok=True)

    stop = threading.Event()
    threads = [
        threading.Thread(
            target=run_handler,
            args=(DocumentHandler(components.tracker, output_dir, f"writer{i}"), stop),
        )
        for i in range(3)
    ]
    threads.append(threading.Thread(target=run_scheduler, args=(components.cleaner, 2.0, stop)))

    for t in threads:
        t.start()

    try:
        time.sleep(10)
    finally:
        stop.set()
        for t in threads:
            t.join()


if __name__ == "__main__":
    main()
