"""Environment policies for starting the goma compiler proxy.

When no build configuration is given we are running in CI. In that
case we infer cache-only mode from the absence of RAW_GOMA_AUTH, since
CI jobs without raw credentials cannot authenticate and must fall back
to local compilation rather than failing the build.
"""

from __future__ import annotations

from ..config import BuildConfig, GomaMode
from ..env import Environment


def is_cache_only(config: BuildConfig | None, env: Environment) -> bool:
    """
    Return whether goma runs in cache-only mode.

    With a config, this is exactly `config.goma == GomaMode.CACHE_ONLY`.
    Without one, we assume CI and use cache-only unless RAW_GOMA_AUTH
    is set.
    """
    if config is None:
        return not env.raw_goma_auth
    return config.goma == GomaMode.CACHE_ONLY


def auth_failure_env(config: BuildConfig | None, env: Environment) -> dict[str, str]:
    """Tell goma to fall back to local builds on auth failure in cache-only mode."""
    if is_cache_only(config, env):
        return {"GOMA_FALLBACK_ON_AUTH_FAILURE": "true"}
    return {}


def ci_env(config: BuildConfig | None, env: Environment) -> dict[str, str]:
    """Tell goma to restart a dead compiler proxy when running in CI."""
    if config is None and env.ci:
        return {"GOMA_START_COMPILER_PROXY": "true"}
    return {}


def composed_env(config: BuildConfig | None, env: Environment) -> dict[str, str]:
    """Return the environment to use when starting goma."""
    return {
        **auth_failure_env(config, env),
        **ci_env(config, env),
    }
