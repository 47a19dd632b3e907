class PgnError(Exception):
    pass


class EmptyGame(PgnError):
    def __init__(self, message="No moves in game"):
        super().__init__(message)


class NotFound(PgnError, LookupError):
    pass


class InvalidMove(PgnError, ValueError):
    pass


class ParseError(PgnError, ValueError):
    pass
