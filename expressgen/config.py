"""expressgen engine settings.

Typed settings for the command flows (where projects are written, and which
post-generation steps run).  Settings are a Pydantic v2 model so they can be
validated at construction time and built from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip().lower() in _TRUTHY


class Settings(BaseModel):
    """Global expressgen settings.

    Instances are created once by the CLI entry point and passed to the
    command flows.
    """

    output_dir: Path = Field(
        default_factory=Path.cwd,
        description="Directory new projects are created in",
    )
    skip_install: bool = Field(
        default=False, description="Do not run the package manager after create"
    )
    skip_git: bool = Field(
        default=False, description="Never initialise git, whatever the project says"
    )
    non_interactive: bool = Field(
        default=False, description="Answer every question with its default"
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            EXPRESSGEN_OUTPUT_DIR, EXPRESSGEN_SKIP_INSTALL,
            EXPRESSGEN_SKIP_GIT, EXPRESSGEN_NON_INTERACTIVE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("EXPRESSGEN_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["EXPRESSGEN_OUTPUT_DIR"])
        for field_name, env_name in (
            ("skip_install", "EXPRESSGEN_SKIP_INSTALL"),
            ("skip_git", "EXPRESSGEN_SKIP_GIT"),
            ("non_interactive", "EXPRESSGEN_NON_INTERACTIVE"),
        ):
            value = _env_flag(env_name)
            if value is not None:
                kwargs[field_name] = value
        return cls(**kwargs)
