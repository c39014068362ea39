"""layoutgen configuration.

Typed settings shared by the CLI and the generation engine.  Uses a Pydantic
v2 model so values are validated at construction time and can be sourced from
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_SPEC_FILENAME = "layout.yml"


class Config(BaseModel):
    """Global layoutgen configuration.

    Instances are typically created once by the CLI entry point and then
    passed to the components that need them.
    """

    spec_filename: str = Field(default=DEFAULT_SPEC_FILENAME, min_length=1)
    base_dir: Path = Field(default=Path("."))
    git_executable: str = Field(default="git", min_length=1)
    clone_timeout: int = Field(default=300, ge=1, description="Per-clone timeout in seconds")
    verbose: bool = Field(default=False)

    @property
    def spec_path(self) -> Path:
        """Location of the specification document."""
        return self.base_dir / self.spec_filename

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            LAYOUTGEN_SPEC, LAYOUTGEN_BASE_DIR, LAYOUTGEN_GIT,
            LAYOUTGEN_CLONE_TIMEOUT, LAYOUTGEN_VERBOSE.

        Keyword overrides win over the environment; ``None`` values are
        ignored so that unset CLI flags fall through.
        """
        values: dict[str, Any] = {}
        if os.environ.get("LAYOUTGEN_SPEC"):
            values["spec_filename"] = os.environ["LAYOUTGEN_SPEC"]
        if os.environ.get("LAYOUTGEN_BASE_DIR"):
            values["base_dir"] = Path(os.environ["LAYOUTGEN_BASE_DIR"])
        if os.environ.get("LAYOUTGEN_GIT"):
            values["git_executable"] = os.environ["LAYOUTGEN_GIT"]
        if os.environ.get("LAYOUTGEN_CLONE_TIMEOUT"):
            values["clone_timeout"] = int(os.environ["LAYOUTGEN_CLONE_TIMEOUT"])
        if os.environ.get("LAYOUTGEN_VERBOSE"):
            values["verbose"] = os.environ["LAYOUTGEN_VERBOSE"].lower() in {"1", "true", "yes"}

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
