# pm_core/common/spectacular_hooks.py
from __future__ import annotations


def preprocess_exclude_legacy_api(endpoints):
    """
    ROOT_URLCONF mounts the API twice: /api/v1/ (primary) and /api/ (alias).
    Drop the alias from the schema so operation ids don't collide.
    """
    filtered = []
    for path, path_regex, method, callback in endpoints:
        if path.startswith("/api/") and not path.startswith("/api/v1/"):
            continue
        filtered.append((path, path_regex, method, callback))
    return filtered
