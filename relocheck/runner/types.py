from relocheck.outcome import BuildResult


class BuildError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class GradleNotFoundError(BuildError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class BuildFailedError(BuildError):
    def __init__(self, project_dir: str, result: BuildResult):
        tail = "\n".join(result.output.strip().splitlines()[-20:])
        message = (
            f"Build in {project_dir} failed with exit code {result.returncode}: "
            + " ".join(result.args)
        )
        if tail:
            message += "\n" + tail
        super().__init__(message)
        self.project_dir = project_dir
        self.result = result
