"""Pydantic v2 models for the layout specification.

Defines the typed representation of a parsed ``layout.yml``: projects, the
recursive module tree, and the code files each module owns.  The YAML keys
(``lang``, ``root``, ``file``, ``tree``, ``from``, ``pub``) map onto the
fields below through aliases.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Language(str, Enum):
    """Closed set of supported project languages."""
    RUST = "rust"
    GO = "go"
    PYTHON = "python"
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    ANY = "any"
    BASH = "bash"
    LUA = "lua"

    @classmethod
    def lookup(cls, tag: str) -> Optional["Language"]:
        """Return the enum member for *tag*, or ``None`` if unsupported."""
        try:
            return cls(tag)
        except ValueError:
            return None


class Visibility(str, Enum):
    """Module visibility hint, only meaningful for rust."""
    YES = "yes"
    NO = "no"
    CRATE = "crate"
    SUPER = "super"


# Default extension appended to bare file names.  Keyed by the raw tag so
# that names in documents with an unsupported language still resolve.
DEFAULT_EXTENSIONS: dict[str, str] = {
    "rust": "rs",
    "go": "go",
    "python": "py",
    "javascript": "js",
    "typescript": "ts",
    "bash": "sh",
    "lua": "lua",
    "markdown": "md",
}
FALLBACK_EXTENSION = "txt"


def default_extension(language: str) -> Optional[str]:
    """Extension appended to bare names for *language* (``None`` for ``any``)."""
    if language == Language.ANY.value:
        return None
    return DEFAULT_EXTENSIONS.get(language, FALLBACK_EXTENSION)


def repo_name_from_url(url: str) -> str:
    """Derive a directory name from a git URL.

    Supports both HTTPS (``https://host/org/repo.git``) and SSH
    (``git@host:org/repo.git``) forms.
    """
    trimmed = url.strip().rstrip("/")
    if trimmed.endswith(".git"):
        trimmed = trimmed[: -len(".git")]
    last = trimmed.rsplit("/", 1)[-1]
    if ":" in last and "/" not in trimmed:
        last = last.rsplit(":", 1)[-1]
    return last


def _coerce_visibility(value: Any) -> Any:
    # YAML 1.1 reads bare yes/no as booleans.
    if value is True:
        return Visibility.YES.value
    if value is False:
        return Visibility.NO.value
    return value


def _coerce_name(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Tree models
# ---------------------------------------------------------------------------

class CodeFile(BaseModel):
    """A leaf file declared inside a module or at project top level."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., description="File name, with or without extension")
    visibility: Optional[Visibility] = Field(
        default=None, alias="pub", description="Visibility hint for module declarations"
    )

    @field_validator("visibility", mode="before")
    @classmethod
    def _bool_visibility(cls, value: Any) -> Any:
        return _coerce_visibility(value)

    @field_validator("name", mode="before")
    @classmethod
    def _scalar_name(cls, value: Any) -> Any:
        return _coerce_name(value)

    @property
    def has_extension(self) -> bool:
        return "." in self.name

    @property
    def stem(self) -> str:
        """Name without its final extension."""
        if self.has_extension:
            return self.name.rsplit(".", 1)[0]
        return self.name

    def filename(self, language: str) -> str:
        """Final on-disk file name for a project written in *language*."""
        if self.has_extension:
            return self.name
        extension = default_extension(language)
        if extension is None:
            return self.name
        return f"{self.name}.{extension}"


class Module(BaseModel):
    """A directory node in the specification tree, or a clone target."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    explicit_name: Optional[str] = Field(default=None, alias="name")
    source_url: Optional[str] = Field(
        default=None, alias="from", description="Git URL cloned into this directory"
    )
    visibility: Optional[Visibility] = Field(default=None, alias="pub")
    files: list[CodeFile] = Field(default_factory=list, alias="file")
    tree: list[Module] = Field(default_factory=list)

    @field_validator("visibility", mode="before")
    @classmethod
    def _bool_visibility(cls, value: Any) -> Any:
        return _coerce_visibility(value)

    @field_validator("explicit_name", mode="before")
    @classmethod
    def _scalar_name(cls, value: Any) -> Any:
        return _coerce_name(value)

    @field_validator("files", "tree", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def name(self) -> str:
        """Resolved module name (explicit, or derived from ``source_url``)."""
        if self.explicit_name is not None:
            return self.explicit_name
        if self.source_url is not None:
            return repo_name_from_url(self.source_url)
        return ""

    @property
    def is_clone_target(self) -> bool:
        return self.source_url is not None

    def find_file(self, filename: str, language: str) -> Optional[CodeFile]:
        """Return the code file whose resolved name is *filename*."""
        for codefile in self.files:
            if codefile.filename(language) == filename:
                return codefile
        return None


class Project(BaseModel):
    """Top-level unit with a single language and its own output root."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(default="")
    is_root: bool = Field(default=False, alias="root")
    lang: str = Field(default="", description="Raw language tag as written")
    files: list[CodeFile] = Field(default_factory=list, alias="file")
    tree: list[Module] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _scalar_name(cls, value: Any) -> Any:
        return "" if value is None else _coerce_name(value)

    @field_validator("files", "tree", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("is_root", mode="before")
    @classmethod
    def _none_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("lang", mode="before")
    @classmethod
    def _none_is_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def language(self) -> Optional[Language]:
        """The closed language tag, or ``None`` when unsupported."""
        return Language.lookup(self.lang)

    def find_module(self, name: str) -> Optional[Module]:
        for module in self.tree:
            if module.name == name:
                return module
        return None


class LayoutSpec(BaseModel):
    """Root of a parsed specification document."""

    projects: list[Project] = Field(default_factory=list)

    def root_project(self) -> Optional[Project]:
        """The project marked ``root: true``, if any."""
        for project in self.projects:
            if project.is_root:
                return project
        return None

    def sub_projects(self) -> list[Project]:
        """Projects materialised into their own subdirectory."""
        return [project for project in self.projects if not project.is_root]

    def is_single_project(self) -> bool:
        return self.root_project() is not None


Module.model_rebuild()
