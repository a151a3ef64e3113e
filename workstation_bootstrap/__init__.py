"""Workstation bootstrap (idempotent, list-file driven).

Core design goals:
- One ordered pipeline of small, independently testable steps
- Every step safe to repeat; re-running is the recovery path
- Absent input skips a step, a failing command aborts the run
- Centralized logging
"""

__all__ = []
