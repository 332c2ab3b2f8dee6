"""
Doc tree builder for agdex.

Groups a flat list of relative doc paths into sections, subsections and
sub-subsections. The tree is at most three levels deep: anything nested
further is listed under its third-level directory.
"""

from collections.abc import Iterable

from agdex.docs.models import DocFile, DocSection

ROOT_SECTION = "."


def _child(parent: DocSection, name: str) -> DocSection:
    for section in parent.subsections:
        if section.name == name:
            return section
    section = DocSection(name=name)
    parent.subsections.append(section)
    return section


def _sort_section(section: DocSection) -> None:
    section.files.sort(key=lambda f: f.relative_path)
    section.subsections.sort(key=lambda s: s.name)
    for subsection in section.subsections:
        _sort_section(subsection)


def build_doc_tree(files: Iterable[DocFile | str]) -> list[DocSection]:
    """Build a section tree from relative doc paths.

    Path segments decide placement:

    - ``a.md`` goes to the "." section
    - ``s/a.md`` goes to section ``s``
    - ``s/sub/a.md`` goes to subsection ``sub`` of ``s``
    - ``s/sub/subsub/.../a.md`` goes to sub-subsection ``subsub``

    Sections and subsections are sorted by name, files by relative path, so
    the result does not depend on input order.

    Args:
        files: Doc files or their relative paths.

    Returns:
        Sorted list of top-level sections.
    """
    sections: dict[str, DocSection] = {}

    for item in files:
        doc = DocFile(relative_path=item) if isinstance(item, str) else item
        parts = doc.relative_path.split("/")

        if len(parts) == 1:
            section = sections.setdefault(ROOT_SECTION, DocSection(name=ROOT_SECTION))
            section.files.append(doc)
            continue

        section = sections.setdefault(parts[0], DocSection(name=parts[0]))

        if len(parts) == 2:
            section.files.append(doc)
            continue

        subsection = _child(section, parts[1])
        if len(parts) == 3:
            subsection.files.append(doc)
        else:
            _child(subsection, parts[2]).files.append(doc)

    tree = sorted(sections.values(), key=lambda s: s.name)
    for section in tree:
        _sort_section(section)

    return tree


def flatten_doc_tree(sections: Iterable[DocSection]) -> list[str]:
    """List every relative path in the tree, depth first.

    Each section contributes its own files before those of its subsections.
    """
    paths: list[str] = []
    for section in sections:
        paths.extend(f.relative_path for f in section.files)
        paths.extend(flatten_doc_tree(section.subsections))
    return paths
