#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgast/ast/outline.py
"""Section tree mirroring headline nesting.

The outline is built while headlines are parsed: each new section is added
below the most recently opened one, or handed up the ancestor chain until it
reaches a section whose headline level is lower than its own. The root is a
synthetic section without a headline.

Examples
--------
    >>> doc = OrgParser().parse("* A\\n** B\\n* C\\n")
    >>> [s.headline.index for s in doc.outline.root.children]
    [1, 3]

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from orgast.ast.nodes import Headline, Table


@dataclass(eq=False)
class Section:
    """One node of the outline.

    Parameters
    ----------
    headline : Headline or None
        The section's headline; None for the root
    parent : Section or None
        Enclosing section
    children : list of Section
        Nested sections in document order
    tables : list of Table
        Tables parsed directly inside this section (targets for ``#+TBLFM:``)

    """

    headline: Optional[Headline] = None
    parent: Optional[Section] = field(default=None, repr=False)
    children: list[Section] = field(default_factory=list)
    tables: list[Table] = field(default_factory=list)

    @property
    def level(self) -> int:
        """Headline level, 0 for the root."""
        return self.headline.level if self.headline is not None else 0

    def add(self, section: Section) -> None:
        """Attach ``section`` here or to the nearest ancestor with a lower level."""
        if self.headline is None or self.level < section.level:
            self.children.append(section)
            section.parent = self
        elif self.parent is not None:
            self.parent.add(section)

    def walk(self) -> Iterator[Section]:
        """Yield the nested sections depth first (excluding self)."""
        for child in self.children:
            yield child
            yield from child.walk()


@dataclass(eq=False)
class Outline:
    """The outline of one document.

    Parameters
    ----------
    root : Section
        Synthetic level-0 section
    last : Section
        Most recently added section (the outline cursor)
    count : int
        Number of headlines added so far

    """

    root: Section = field(default_factory=Section)
    last: Optional[Section] = field(default=None, repr=False)
    count: int = 0

    def __post_init__(self) -> None:
        """Point the cursor at the root."""
        if self.last is None:
            self.last = self.root

    @property
    def children(self) -> list[Section]:
        """Top-level sections."""
        return self.root.children

    @property
    def current(self) -> Section:
        """The section receiving content right now."""
        return self.last if self.last is not None else self.root

    def add(self, headline: Headline) -> Section:
        """Register a headline, returning its new section.

        The headline's ``index`` is set to its 1-based document order.
        """
        self.count += 1
        headline.index = self.count
        section = Section(headline=headline)
        self.current.add(section)
        self.last = section
        return section

    def iter_sections(self) -> Iterator[Section]:
        """Yield every section depth first."""
        return self.root.walk()

    def find(self, predicate: Callable[[Section], bool]) -> Optional[Section]:
        """Return the first section matching ``predicate``."""
        return next((section for section in self.iter_sections() if predicate(section)), None)
