#!/usr/bin/env python3
"""Example worker that consumes jobs signalled through a named semaphore.

Run the worker, then post jobs from any other process:

    python worker.py /jobs
    namedsem post /jobs --count 3

Each post releases one iteration of the worker loop. The worker
acknowledges each job on ``<name>_done`` so a producer can wait for it.

Usage:
    python worker.py <sem_name>
"""

from __future__ import annotations

import errno
import os
import sys

# Add parent src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from namedsem import AccessMode, NamedSemaphore, OpenOptions, SemaphoreOSError

RW = OpenOptions.CREATE | OpenOptions.READ | OpenOptions.WRITE
MODE = AccessMode.R_USR | AccessMode.W_USR | AccessMode.R_GRP | AccessMode.W_GRP


def main() -> int:
    """Run the worker loop."""
    if len(sys.argv) < 2:
        print(f"Usage: {sys.argv[0]} <sem_name>", file=sys.stderr)
        return 1

    name = sys.argv[1]
    jobs = NamedSemaphore.open(name, RW, MODE, 0)
    done = NamedSemaphore.open(f"{name}_done", RW, MODE, 0)

    print(f"[worker {os.getpid()}] Waiting for jobs on {name}")
    handled = 0
    try:
        while True:
            try:
                jobs.wait()
            except SemaphoreOSError as e:
                # Interrupted waits are not retried by namedsem
                if e.errno == errno.EINTR:
                    continue
                raise
            handled += 1
            print(f"[worker {os.getpid()}] Job {handled}")
            done.post()
    except KeyboardInterrupt:
        print(f"[worker {os.getpid()}] Interrupted")
    finally:
        jobs.close()
        done.close()
        print(f"[worker {os.getpid()}] Handled {handled} jobs")

    return 0


if __name__ == "__main__":
    sys.exit(main())
