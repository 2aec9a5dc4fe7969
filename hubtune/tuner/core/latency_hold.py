#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Process-lifetime hold on /dev/cpu_dma_latency.

The kernel only honours a CPU latency request while the file descriptor that
wrote it stays open, so the hold is a small detached interpreter that writes a
zero and sleeps forever. A marker file records the holder's PID so repeated
runs (including concurrent ones) start at most one holder.
"""

import fcntl
import os
import sys
import threading
from typing import Dict, Optional, Tuple

from hubtune.hubtune_constants import CPU_DMA_LATENCY_DEVICE, LATENCY_HOLDER_STARTUP_SEC, LATENCY_MARKER_DEFAULT
from hubtune.tuner.configs.constants.enums import StepOutcome
from hubtune.tuner.platforms.base import BaseTuner
from hubtune.tuner.utils.exceptions import CapabilityUnavailableError
from hubtune.tuner.utils.logger_utils import TunerLogger

HOLDER_SCRIPT = """\
import os, struct, time
fd = os.open({device!r}, os.O_WRONLY)
os.write(fd, struct.pack("i", 0))
while True:
    time.sleep(3600)
"""


class LatencyHold:
    def __init__(self, marker_path: str = LATENCY_MARKER_DEFAULT, device_path: str = CPU_DMA_LATENCY_DEVICE):
        self.marker_path = marker_path
        self.device_path = device_path
        self._lock = threading.Lock()

    def holder_pid(self) -> Optional[int]:
        """PID recorded in the marker, or None if the marker is absent, empty or unreadable."""
        try:
            with open(self.marker_path, "r") as f:
                content = f.read().strip()
        except OSError:
            return None
        return int(content) if content.isdigit() else None

    def is_held(self, tuner: BaseTuner) -> bool:
        if not os.path.exists(self.marker_path):
            return False
        pid = self.holder_pid()
        # an empty marker means another invocation is between creating it and recording its PID
        return pid is None or tuner.pid_alive(pid)

    @property
    def lock_path(self) -> str:
        return f"{self.marker_path}.lock"

    def _remove_marker(self):
        try:
            os.unlink(self.marker_path)
        except FileNotFoundError:
            pass

    def acquire(self, tuner: BaseTuner) -> Tuple[StepOutcome, str]:
        with self._lock:
            if not tuner.kernel_file_exists(self.device_path):
                return StepOutcome.SKIPPED, f"{self.device_path} is not present"

            # the sidecar lock serializes the stale check, removal and creation across processes;
            # it is never removed, so every invocation locks the same inode
            lock_fd = os.open(self.lock_path, os.O_RDONLY | os.O_CREAT, 0o644)
            try:
                try:
                    fcntl.flock(lock_fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                except BlockingIOError:
                    return StepOutcome.APPLIED, "latency hold is being acquired by another invocation"
                return self._acquire_locked(tuner)
            finally:
                os.close(lock_fd)

    def _acquire_locked(self, tuner: BaseTuner) -> Tuple[StepOutcome, str]:
        if os.path.exists(self.marker_path):
            if self.is_held(tuner):
                pid = self.holder_pid()
                return StepOutcome.APPLIED, f"latency hold already active{f' (pid {pid})' if pid else ''}"
            TunerLogger.warning(f"Removing stale latency marker {self.marker_path} (pid {self.holder_pid()})")
            self._remove_marker()

        tuner.require_privilege(f"hold {self.device_path}")
        try:
            fd = os.open(self.marker_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            return StepOutcome.APPLIED, "latency hold acquired concurrently by another invocation"

        try:
            pid = tuner.spawn_detached([sys.executable, "-c", HOLDER_SCRIPT.format(device=self.device_path)])
        except Exception:
            os.close(fd)
            self._remove_marker()
            raise

        with os.fdopen(fd, "w") as f:
            f.write(f"{pid}\n")

        if not tuner.pid_survives(pid, LATENCY_HOLDER_STARTUP_SEC):
            self._remove_marker()
            raise CapabilityUnavailableError(
                "CPU latency hold", f"holder (pid {pid}) exited before holding {self.device_path}"
            )
        return StepOutcome.APPLIED, f"latency hold started (pid {pid})"


_holds: Dict[Tuple[str, str], LatencyHold] = {}
_holds_lock = threading.Lock()


def get_latency_hold(marker_path: str = LATENCY_MARKER_DEFAULT, device_path: str = CPU_DMA_LATENCY_DEVICE) -> LatencyHold:
    """Return the single LatencyHold for a marker/device pair."""
    with _holds_lock:
        key = (marker_path, device_path)
        if key not in _holds:
            _holds[key] = LatencyHold(marker_path, device_path)
        return _holds[key]
