from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Theater = Literal["air", "land", "sea"]
Phase = Literal["waiting", "playing", "scoring", "game_over"]
ManipulateKind = Literal["flip", "destroy", "return"]

THEATERS: tuple[Theater, ...] = ("air", "land", "sea")
MANIPULATE_KINDS: tuple[ManipulateKind, ...] = ("flip", "destroy", "return")


@dataclass(frozen=True)
class Card:
    id: int
    theater: Theater
    strength: int
    name: str


@dataclass
class PlayedCard:
    card: Card
    face_up: bool
    owner_id: str


@dataclass
class TheaterZone:
    type: Theater
    cards: list[PlayedCard]

    def top(self) -> PlayedCard | None:
        return self.cards[-1] if self.cards else None


@dataclass
class TheaterScore:
    """Totals reported by each seat for one theater.

    Seat 0 is player 1, seat 1 is player 2. A total only counts once its
    seat has submitted, so a reported 0 is distinguishable from "not yet".
    """

    player1_total: int = 0
    player2_total: int = 0
    player1_submitted: bool = False
    player2_submitted: bool = False

    def record(self, seat: int, total: int) -> None:
        if seat == 0:
            self.player1_total = total
            self.player1_submitted = True
        else:
            self.player2_total = total
            self.player2_submitted = True

    def is_complete(self) -> bool:
        return self.player1_submitted and self.player2_submitted

    def winner_seat(self) -> int | None:
        if self.player1_total > self.player2_total:
            return 0
        if self.player2_total > self.player1_total:
            return 1
        return None
