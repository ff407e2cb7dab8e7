import logging
import os
import shutil
import subprocess
import sys
import time
from pathlib import Path
from typing import Mapping, Sequence

from relocheck.outcome import BuildResult, OutcomeParseError, parse_task_lines

from .types import BuildError, BuildFailedError, GradleNotFoundError

logger = logging.getLogger(__name__)

PLAIN_CONSOLE = "--console=plain"


def _script_name(name: str) -> str:
    return f"{name}.bat" if os.name == "nt" else name


class GradleRunner:
    """Runs Gradle in one project directory and collects task outcomes."""

    def __init__(
        self,
        project_dir: str | Path,
        *,
        installation: str | Path | None = None,
        env: Mapping[str, str] | None = None,
        forward_output: bool = True,
    ):
        self.project_dir = Path(project_dir)
        self.installation = Path(installation) if installation else None
        self.env = dict(env or {})
        self.forward_output = forward_output

    def executable(self) -> str:
        if self.installation is not None:
            gradle = self.installation / "bin" / _script_name("gradle")
            if not gradle.is_file():
                raise GradleNotFoundError(f"No Gradle executable in installation: {gradle}")
            logger.info("> Running with Gradle installation in %s", self.installation)
            return str(gradle)

        wrapper = self.project_dir / _script_name("gradlew")
        if wrapper.is_file():
            logger.info("> Running with Gradle wrapper in %s", self.project_dir)
            return str(wrapper)

        found = shutil.which("gradle")
        if found is None:
            raise GradleNotFoundError(
                f"No Gradle installation configured, no wrapper in {self.project_dir} "
                "and no 'gradle' on PATH"
            )
        logger.info("> Running with Gradle from PATH: %s", found)
        return found

    def run(self, args: Sequence[str]) -> BuildResult:
        cmd = [self.executable(), *args, PLAIN_CONSOLE]
        logger.debug("Invoking %s in %s", cmd, self.project_dir)

        lines: list[str] = []
        start = time.monotonic()
        # stderr is folded into stdout so forwarded output keeps Gradle's ordering.
        with subprocess.Popen(
            cmd,
            cwd=self.project_dir,
            env={**os.environ, **self.env},
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        ) as proc:
            for line in proc.stdout:
                lines.append(line)
                if self.forward_output:
                    sys.stdout.write(line)
                    sys.stdout.flush()
            returncode = proc.wait()
        duration = time.monotonic() - start

        output = "".join(lines)
        try:
            tasks = parse_task_lines(output)
        except OutcomeParseError as exc:
            raise BuildError(
                f"Can't read task outcomes of {' '.join(args)} in {self.project_dir}: {exc}"
            ) from exc

        build = BuildResult(
            args=tuple(args),
            returncode=returncode,
            output=output,
            tasks=tasks,
            duration_s=duration,
        )
        logger.info(
            "Gradle %s in %s finished with exit code %d after %.1fs (%d tasks)",
            " ".join(args),
            self.project_dir,
            build.returncode,
            build.duration_s,
            len(build.tasks),
        )
        return build

    def build(self, args: Sequence[str]) -> BuildResult:
        result = self.run(args)
        if not result.success:
            raise BuildFailedError(str(self.project_dir), result)
        return result
