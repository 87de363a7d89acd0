"""Typed domain exceptions for the scoring and settlement engine.

The engine encodes unusual but well-formed input as degenerate output
(zero vectors, empty settlement lists). These exceptions cover
precondition violations the engine can detect cheaply; they propagate to
the caller boundary (the CLI).
"""


class LedgerError(Exception):
    """Base exception for all ledger domain errors."""


class ScoringError(LedgerError):
    """Round or session input violates a scoring precondition."""


class UmaTableTooShortError(ScoringError):
    """The uma table has fewer entries than the round has active seats.

    Attributes:
        active_seats: Number of seats that played the round.
        uma_length: Number of entries in the supplied uma table.

    """

    def __init__(self, *, active_seats: int, uma_length: int) -> None:
        self.active_seats = active_seats
        self.uma_length = uma_length
        super().__init__(f"uma table has {uma_length} entries but round has {active_seats} active seats")


class RoundShapeError(ScoringError):
    """A round's score list is not as wide as the rest of the session.

    Attributes:
        round_index: Position of the offending round in the session.
        expected: Width taken from the first round.
        actual: Width of the offending round.

    """

    def __init__(self, *, round_index: int, expected: int, actual: int) -> None:
        self.round_index = round_index
        self.expected = expected
        self.actual = actual
        super().__init__(f"round {round_index} has {actual} seats, expected {expected}")


class UnsupportedSettingsError(LedgerError):
    """Session settings contain values that cannot be scored."""
