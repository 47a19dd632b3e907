import os

# Fall back to permissive parsing (annotation glyphs stripped, long algebraic
# accepted) when strict SAN parsing rejects a move.
PERMISSIVE_MOVES = os.getenv("PGNTREE_PERMISSIVE_MOVES", "true").lower() == "true"

# Result marker for documents that end without one, and for new variations.
DEFAULT_RESULT = os.getenv("PGNTREE_DEFAULT_RESULT", "*")

# Invalid moves are always recorded on the index; this only silences the log.
LOG_INVALID_MOVES = os.getenv("PGNTREE_LOG_INVALID_MOVES", "true").lower() == "true"

RESULT_TOKENS = ("1-0", "0-1", "1/2-1/2", "*")
