"""Manifest parsers — auto-registered on import."""

from stackscan.engines.dependency_scanner.parsers import (
    csproj,  # noqa: F401
    docker_compose,  # noqa: F401
    dockerfile,  # noqa: F401
    gemfile,  # noqa: F401
    gemfile_lock,  # noqa: F401
    global_json,  # noqa: F401
    go_mod,  # noqa: F401
    go_sum,  # noqa: F401
    gradle_build,  # noqa: F401
    maven_pom,  # noqa: F401
    npm_package_json,  # noqa: F401
    pip_requirements,  # noqa: F401
    pyproject_toml,  # noqa: F401
)
