"""Custom exception hierarchy for crossword grid construction.

Everything deriving from :class:`CrosswordError` is an expected outcome of the
randomized search and is safe to catch and move on from. :class:`GridInvariantError`
signals a defect in the engine itself and is intentionally kept outside that tree.
"""


class CrosswordError(Exception):
    """Base exception for recoverable failures."""


class PlacementError(CrosswordError):
    """Raised when a word cannot be placed without breaking grid rules."""


class WordAlreadyPlacedError(PlacementError):
    """Raised when placing a word that already has a placement."""


class WordDirectionNotAllowedError(PlacementError):
    """Raised when the requested direction conflicts with the word's forced direction."""


class CellError(PlacementError):
    """Raised when a single cell refuses a letter."""


class CellLetterMismatchError(CellError):
    """Raised when a cell already holds a different letter."""


class CellWordIdMismatchError(CellError):
    """Raised when a cell already belongs to another word of the same direction."""


class CellIsBoundaryError(CellError):
    """Raised when a letter would land on a boundary (black) cell."""


class NonEmptyWordBoundaryError(PlacementError):
    """Raised when the cell before the start or after the end of a word holds a letter."""


class AdjacentCellsNoLinkWordError(PlacementError):
    """Raised when two adjacent letters are not joined by a word in that direction."""


class AdjacentCellsMismatchedLinkWordError(PlacementError):
    """Raised when two adjacent letters belong to different words in that direction."""


class CellNotFoundError(PlacementError):
    """Raised when a location lies outside the grid's cell map."""


class WordNotFoundError(PlacementError):
    """Raised when a word id is unknown to the grid."""


class GraphError(CrosswordError):
    """Base exception for word graph failures."""


class NodeNotFoundError(GraphError):
    """Raised when a node id is not registered in the graph."""


class InvalidEdgeReferenceError(GraphError):
    """Raised when an edge points at a node missing from the node map."""


class WordListError(CrosswordError):
    """Raised when a seed word list entry cannot be used."""


class GridInvariantError(AssertionError):
    """Raised when a grid invariant that the engine guarantees has been broken."""
