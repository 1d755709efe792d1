from __future__ import annotations


class MatchError(RuntimeError):
    """Base class for rejected match operations.

    `kind` is a stable tag callers can switch on without importing every
    subclass.
    """

    kind = "match_error"


class NotFoundError(MatchError):
    kind = "not_found"


class InvalidStateError(MatchError):
    kind = "invalid_state"


class NotYourTurnError(MatchError):
    kind = "not_your_turn"


class CardNotInHandError(MatchError):
    kind = "card_not_in_hand"


class EmptyTheaterError(MatchError):
    kind = "empty_theater"


class NotTopOfStackError(MatchError):
    kind = "not_top_of_stack"


class DeckEmptyError(MatchError):
    kind = "deck_empty"


class InvalidActionError(MatchError):
    kind = "invalid_action"


class MatchOverError(MatchError):
    kind = "match_over"
