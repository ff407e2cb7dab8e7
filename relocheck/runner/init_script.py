from pathlib import Path
from string import Template

KOTLIN_EAP_REPOSITORY = 'maven { url "https://dl.bintray.com/kotlin/kotlin-eap" }'

_SCAN_CONFIGURATION = Template(
    """
    plugins.matching({ it.class.name == "com.gradle.scan.plugin.BuildScanPlugin" }).all {
        buildScan {
            server = "$scan_url"
        }
    }
"""
)

_INIT_SCRIPT = Template(
    """rootProject { root ->
    buildscript {
        repositories {
            $eap_repository
        }
        dependencies {
            classpath ('org.jetbrains.kotlin:kotlin-gradle-plugin:$kotlin_version') { force = true }
        }
    }
$scan_configuration
    allprojects {
        repositories {
            jcenter()
            $eap_repository
        }
    }
}

settingsEvaluated { settings ->
    settings.buildCache {
        local(DirectoryBuildCache) {
            directory = "$cache_uri"
        }
    }
    settings.pluginManagement {
        repositories {
            gradlePluginPortal()
            $eap_repository
        }
    }
}
"""
)


def render_init_script(
    cache_dir: str | Path, kotlin_version: str, scan_url: str | None = None
) -> str:
    """Init script pinning the Kotlin plugin and pointing the local build cache at `cache_dir`."""
    scan_configuration = ""
    if scan_url:
        scan_configuration = _SCAN_CONFIGURATION.substitute(scan_url=scan_url)

    return _INIT_SCRIPT.substitute(
        eap_repository=KOTLIN_EAP_REPOSITORY,
        kotlin_version=kotlin_version,
        scan_configuration=scan_configuration,
        cache_uri=Path(cache_dir).resolve().as_uri(),
    )
