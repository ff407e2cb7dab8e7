from .gradle import GradleRunner
from .init_script import render_init_script
from .types import BuildError, BuildFailedError, GradleNotFoundError

__all__ = [
    "GradleRunner",
    "render_init_script",
    "BuildError",
    "BuildFailedError",
    "GradleNotFoundError",
]
