"""Coarse project archetype detection from a path listing."""

from repo_edit_bot.models import ProjectType


def detect_project_type(paths: list[str]) -> ProjectType:
    """Classify a repository from its marker files.

    Checked in order: a Next.js config, a Vite config alongside ``src/``,
    a package manifest alongside ``src/``, a root ``index.html``.
    """
    path_set = set(paths)
    has_src = any(p.startswith("src/") for p in paths)

    if any("next.config" in p for p in paths):
        return ProjectType.NEXTJS
    if any("vite.config" in p for p in paths) and has_src:
        return ProjectType.VITE_REACT
    if "package.json" in path_set and has_src:
        return ProjectType.REACT
    if "index.html" in path_set:
        return ProjectType.STATIC_HTML
    return ProjectType.GENERIC
