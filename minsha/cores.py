# Copyright (c) 2024 iiPython

# Modules
import os

# Affinity
def get_core_ids() -> list[int]:
    """Return the CPU ids this process may run on, in ascending order."""
    try:
        return sorted(os.sched_getaffinity(0))

    except AttributeError:
        return list(range(os.cpu_count() or 1))  # No affinity support (macOS, Windows)

def pin(core: int) -> bool:
    """Bind the calling thread to `core`, returning False if the platform refuses."""
    try:
        os.sched_setaffinity(0, {core})
        return True

    except (AttributeError, OSError, ValueError):
        return False
