from __future__ import annotations

"""
tierdrop.version: semantic version string with optional git-describe suffix.

Rules:
- BASE_VERSION is the semver for this package.
- If TIERDROP_VERSION is set in the environment, that wins.
- If we're inside a git repo, append a PEP440-compatible local suffix derived
  from `git describe --tags --dirty --always --abbrev=7`, e.g.:
    0.1.0+v0.1.0.3.gabc1234          (3 commits after tag, clean)
    0.1.0+gabc1234.dirty             (no tag, dirty tree)
- If git is unavailable, fall back to BASE_VERSION.
"""


import os
import re
import subprocess
from typing import Optional

# Bump this on intentional releases.
BASE_VERSION = "0.1.0"


def _git_describe() -> Optional[str]:
    try:
        out = subprocess.check_output(
            ["git", "describe", "--tags", "--dirty", "--always", "--abbrev=7"],
            stderr=subprocess.DEVNULL,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode("utf-8", "replace").strip() or None


_PEP440_LOCAL_CLEAN = re.compile(r"[^a-zA-Z0-9.]+")


def _pep440_local_from_describe(desc: str) -> str:
    s = desc.replace("-", ".").replace("+", ".")
    if s.startswith("v") and len(s) > 1 and s[1].isdigit():
        s = s[1:]
    s = _PEP440_LOCAL_CLEAN.sub(".", s)
    s = re.sub(r"\.{2,}", ".", s).strip(".")
    if not s.lower().startswith(("git.", "g")):
        s = f"git.{s}"
    return s


def build_version() -> str:
    v = os.getenv("TIERDROP_VERSION")
    if v:
        return v
    desc = _git_describe()
    if not desc:
        return BASE_VERSION
    return f"{BASE_VERSION}+{_pep440_local_from_describe(desc)}"


__version__ = build_version()


__all__ = ["__version__", "BASE_VERSION", "build_version"]
