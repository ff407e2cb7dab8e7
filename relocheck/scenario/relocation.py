import logging
import shutil
from pathlib import Path

from relocheck.config import RelocationConfig
from relocheck.outcome import BuildResult
from relocheck.runner import GradleRunner, render_init_script

from .verify import ExpectedResults, VerificationReport

logger = logging.getLogger(__name__)

PLUGIN_MIRROR_PROPERTY = "org.gradle.internal.plugins.portal.url.override"


def prepare(
    init_script: Path,
    cache_dir: Path,
    kotlin_version: str,
    scan_url: str | None = None,
    plugin_mirror_url: str | None = None,
    mirror_init_script: Path | None = None,
) -> list[str]:
    """Write the init script and return the arguments shared by every build."""
    init_script.write_text(
        render_init_script(cache_dir, kotlin_version, scan_url), encoding="utf-8"
    )

    args = [
        "--build-cache",
        "--scan",
        "--init-script",
        str(init_script.resolve()),
        "--stacktrace",
    ]

    if mirror_init_script is not None:
        args += ["--init-script", str(mirror_init_script)]

    if plugin_mirror_url:
        args += [f"-D{PLUGIN_MIRROR_PROPERTY}={plugin_mirror_url}"]

    return args


class RelocationScenario:
    """Builds the original then the relocated checkout against one build cache."""

    def __init__(
        self,
        config: RelocationConfig,
        expected: ExpectedResults,
        work_dir: str | Path,
        *,
        forward_output: bool = True,
    ):
        self.config = config
        self.expected = expected
        self.work_dir = Path(work_dir)
        self.cache_dir = self.work_dir / "build-cache"
        self.forward_output = forward_output

    def prepare(self) -> list[str]:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        return prepare(
            self.work_dir / "init.gradle",
            self.cache_dir,
            self.config.kotlin_version,
            scan_url=self.config.scan_url,
            plugin_mirror_url=self.config.plugin_mirror_url,
            mirror_init_script=self.config.mirror_init_script,
        )

    def clean_checkout(self, project_dir: Path, args: list[str]) -> None:
        self._runner(project_dir).build(["clean", *args, "--no-build-cache", "--no-scan"])
        state_dir = project_dir / ".gradle"
        if state_dir.exists():
            shutil.rmtree(state_dir)

    def run_original(self, project_dir: Path, args: list[str]) -> BuildResult:
        return self._runner(project_dir).build([*self.config.tasks, *args])

    def run_relocated(self, project_dir: Path, args: list[str]) -> BuildResult:
        return self._runner(project_dir).build([*self.config.tasks, *args])

    def verify(self, result: BuildResult) -> bool:
        return self.expected.verify(result)

    def run(self) -> VerificationReport:
        logger.info("> Using Kotlin plugin %s", self.config.kotlin_version)
        args = self.prepare()
        logger.info(
            "> Cache directory: %s (files: %d)",
            self.cache_dir,
            sum(1 for _ in self.cache_dir.iterdir()),
        )

        self.clean_checkout(self.config.original_dir, args)
        self.clean_checkout(self.config.relocated_dir, args)

        self.run_original(self.config.original_dir, args)
        relocated = self.run_relocated(self.config.relocated_dir, args)

        return self.expected.check(relocated)

    def _runner(self, project_dir: Path) -> GradleRunner:
        return GradleRunner(
            project_dir,
            installation=self.config.gradle_installation,
            forward_output=self.forward_output,
        )
