"""layoutgen scaffolder -- materialises a specification on disk.

Quick usage::

    from layoutgen.scaffolder import ProjectGenerator
    from layoutgen.spec import parse_file

    spec = parse_file("layout.yml")
    report = ProjectGenerator(spec).generate(".")
    print(report.summary())
"""

from layoutgen.scaffolder.clone import CloneFailure, GitCloner
from layoutgen.scaffolder.generator import (
    GenerationError,
    GenerationReport,
    ProjectGenerator,
    generate,
)
from layoutgen.scaffolder.templates import TemplateRenderer

__all__ = [
    "CloneFailure",
    "GenerationError",
    "GenerationReport",
    "GitCloner",
    "ProjectGenerator",
    "TemplateRenderer",
    "generate",
]
