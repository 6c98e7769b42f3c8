"""Rule-file corpus access: file tree, header parsing and analysis."""

from .analyzer import AnalysisResult, CorpusAnalyzer, DirectoryHierarchy, InstructionPattern
from .frontmatter import Frontmatter, parse_frontmatter, render_frontmatter
from .tree import FileTree, LocalFileTree, TreeEntry

__all__ = [
    "AnalysisResult",
    "CorpusAnalyzer",
    "DirectoryHierarchy",
    "FileTree",
    "Frontmatter",
    "InstructionPattern",
    "LocalFileTree",
    "TreeEntry",
    "parse_frontmatter",
    "render_frontmatter",
]
