"""Structured TypeScript source emitter.

Generated code is built as a list of declaration blocks and rendered by a
single pretty-printer, so whitespace and ordering are the same on every run:

- a module is a sequence of sections separated by one blank line,
- a section is a sequence of declarations rendered on consecutive lines,
- interface fields are indented by two spaces and each one is preceded by a
  blank line and its own doc block.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

INDENT = "  "


def _escape_doc_line(line: str) -> str:
    # A literal "*/" would terminate the comment early
    return line.replace("*/", "*\\/")


@dataclass
class DocBlock:
    """A ``/** ... */`` documentation comment."""
    lines: List[str] = field(default_factory=list)

    def add(self, text: str) -> "DocBlock":
        """Append text, one doc line per line of input."""
        for line in str(text).splitlines() or [""]:
            self.lines.append(_escape_doc_line(line.rstrip()))
        return self

    def render(self, indent: str = "") -> List[str]:
        out = [f"{indent}/**"]
        for line in self.lines:
            out.append(f"{indent} * {line}" if line else f"{indent} *")
        out.append(f"{indent} */")
        return out


class Declaration(ABC):
    """A top-level declaration in a TypeScript module."""

    @abstractmethod
    def render(self) -> List[str]:
        """Render the declaration as a list of lines."""
        pass


@dataclass
class LineComment(Declaration):
    text: str

    def render(self) -> List[str]:
        return [f"// {line}" for line in self.text.splitlines()]


@dataclass
class ImportDecl(Declaration):
    names: List[str]
    module: str

    def render(self) -> List[str]:
        return [f"import {{ {', '.join(self.names)} }} from '{self.module}';"]


@dataclass
class TypeAlias(Declaration):
    name: str
    target: str
    doc: Optional[DocBlock] = None

    def render(self) -> List[str]:
        lines = self.doc.render() if self.doc else []
        lines.append(f"export type {self.name} = {self.target};")
        return lines


@dataclass
class FieldDecl:
    """A property of an interface."""
    name: str
    type_expr: str
    doc: Optional[DocBlock] = None

    def render(self, indent: str = INDENT) -> List[str]:
        lines = [""]
        if self.doc:
            lines.extend(self.doc.render(indent))
        lines.append(f"{indent}{self.name}: {self.type_expr};")
        return lines


@dataclass
class InterfaceDecl(Declaration):
    name: str
    fields: List[FieldDecl] = field(default_factory=list)
    doc: Optional[DocBlock] = None
    extends: Optional[str] = None

    def render(self) -> List[str]:
        lines = self.doc.render() if self.doc else []
        heritage = f" extends {self.extends}" if self.extends else ""
        lines.append(f"export interface {self.name}{heritage} {{")
        for f in self.fields:
            lines.extend(f.render())
        lines.append("}")
        return lines


@dataclass
class Section:
    """Declarations rendered on consecutive lines."""
    declarations: List[Declaration] = field(default_factory=list)

    def render(self) -> List[str]:
        lines = []
        for declaration in self.declarations:
            lines.extend(declaration.render())
        return lines


@dataclass
class Module:
    """A TypeScript source file."""
    sections: List[Section] = field(default_factory=list)

    def add(self, *declarations: Declaration) -> "Module":
        """Append a new section holding ``declarations``."""
        self.sections.append(Section(list(declarations)))
        return self

    def render(self) -> str:
        blocks = ["\n".join(section.render()) for section in self.sections]
        return "\n\n".join(blocks) + "\n"
