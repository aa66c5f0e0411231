"""Build the environment that preloads the enabled tweaks into the target."""

import os
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .tweaks import TweakDescriptor, enabled_libraries

if sys.platform == "darwin":
    INJECTION_VARIABLE = "DYLD_INSERT_LIBRARIES"
else:
    INJECTION_VARIABLE = "LD_PRELOAD"

PATH_LIST_SEPARATOR = os.pathsep


@dataclass(frozen=True)
class LaunchSpec:
    """Everything needed to start one target process."""

    executable_path: str
    injected_libraries: tuple[str, ...] = ()
    environment: dict[str, str] = field(default_factory=dict)


def build_environment(
    library_paths: Iterable[str],
    base_environment: Mapping[str, str] | None = None,
    *,
    variable: str = INJECTION_VARIABLE,
) -> dict[str, str]:
    """Return a copy of ``base_environment`` with the injection variable set.

    The variable is removed, never set to an empty string, when there is
    nothing to inject.
    """
    if base_environment is None:
        base_environment = os.environ
    env = dict(base_environment)
    env.pop(variable, None)

    paths = list(library_paths)
    if paths:
        env[variable] = PATH_LIST_SEPARATOR.join(paths)
    return env


def prepare_launch(
    executable_path: str,
    tweaks: Iterable[TweakDescriptor],
    base_environment: Mapping[str, str] | None = None,
) -> LaunchSpec:
    """Assemble a LaunchSpec from the catalog's enabled tweaks."""
    libraries = tuple(enabled_libraries(tweaks))
    return LaunchSpec(
        executable_path=executable_path,
        injected_libraries=libraries,
        environment=build_environment(libraries, base_environment),
    )
