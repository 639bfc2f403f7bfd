"""Word guessing game: word lists, guess checking and board rendering."""

from __future__ import annotations

import bisect
import enum
import io
import random
import re
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

MATCH_COLOR = (125, 166, 108)
EXIST_COLOR = (199, 183, 96)
NOT_EXIST_COLOR = (123, 123, 123)
UNDONE_COLOR = (219, 219, 219)
WHITE = (255, 255, 255)

CLASS_LENGTHS = {"": 5, "五阶": 5, "六阶": 6, "七阶": 7}
WORD_LENGTHS = (5, 6, 7)

_SIDE = 20
_SPACE = 10
_COMMAND = re.compile(r"^(个人|团队)(五阶|六阶|七阶)?猜单词$")


class WordleError(Exception):
    """Base error of the word guessing game."""


class LengthMismatchError(WordleError):
    """The guess does not have the length of the target word."""


class UnknownWordError(WordleError):
    """The guess is not in the dictionary."""


class GameMode(enum.Enum):
    """Who may answer: only the player who started, or the whole group."""

    PERSONAL = "个人"
    TEAM = "团队"


@dataclass
class WordList:
    """Words of one length: the dictionary of accepted guesses and the targets."""

    dictionary: list[str] = field(default_factory=list)
    targets: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.dictionary = sorted(self.dictionary)
        self.targets = sorted(self.targets)

    def knows(self, word: str) -> bool:
        """Whether the word is an accepted guess."""
        i = bisect.bisect_left(self.dictionary, word)
        return i < len(self.dictionary) and self.dictionary[i] == word

    def pick_target(self, rng: random.Random) -> str:
        """Choose a target word at random."""
        if not self.targets:
            raise WordleError("no target words")
        return rng.choice(self.targets)


def _read_words(path: Path) -> list[str]:
    text = path.read_text(encoding="utf-8")
    return [line.strip() for line in text.split("\n") if line.strip()]


def load_word_bank(folder) -> dict[int, WordList]:
    """Load cet-4_N.txt and dict_N.txt for every word length from a folder."""
    folder = Path(folder)
    bank: dict[int, WordList] = {}
    errors = 0
    for length in WORD_LENGTHS:
        try:
            targets = _read_words(folder / f"cet-4_{length}.txt")
        except OSError:
            errors += 1
            targets = []
        try:
            dictionary = _read_words(folder / f"dict_{length}.txt")
        except OSError:
            errors += 1
            dictionary = []
        bank[length] = WordList(dictionary=dictionary, targets=targets)
    if errors:
        raise WordleError(f"{errors} errors while loading the dictionaries")
    return bank


def parse_command(text: str) -> tuple[GameMode, int] | None:
    """Parse a start command into its mode and word length, or None."""
    m = _COMMAND.match(text)
    if m is None:
        return None
    return GameMode(m.group(1)), CLASS_LENGTHS[m.group(2) or ""]


def answer_pattern(length: int) -> re.Pattern[str]:
    """The pattern that a message must match to count as a guess."""
    return re.compile(rf"^([A-Z]|[a-z]){{{length}}}$")


def render_board(target: str, records) -> bytes:
    """Draw the board of guesses so far as PNG bytes."""
    length = len(target)
    step = _SIDE + 4
    width = step * length + _SPACE * 2 - 4
    height = step * (length + 1) + _SPACE * 2 - 4
    image = Image.new("RGB", (width, height), WHITE)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()
    records = list(records)
    for row in range(length + 1):
        for col in range(length):
            if row < len(records):
                letter = records[row][col]
                x0 = _SPACE + col * step
                y0 = _SPACE + row * step
                if letter == target[col]:
                    color = MATCH_COLOR
                elif letter in target:
                    color = EXIST_COLOR
                else:
                    color = NOT_EXIST_COLOR
                draw.rectangle((x0, y0, x0 + _SIDE - 1, y0 + _SIDE - 1), fill=color)
                baseline = 10 + row * step + 15
                draw.text(
                    (10 + col * step + 7, baseline - 11),
                    letter.upper(),
                    fill=WHITE,
                    font=font,
                )
            else:
                x0 = 10 + col * step + 1
                y0 = 10 + row * step + 1
                draw.rectangle(
                    (x0, y0, x0 + _SIDE - 2, y0 + _SIDE - 2),
                    outline=UNDONE_COLOR,
                    width=1,
                )
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@dataclass(frozen=True)
class GuessResult:
    """Outcome of one guess: whether it won, whether the game is over, and the board."""

    win: bool
    over: bool
    image: bytes


class WordleGame:
    """One round: a target word and the guesses made at it."""

    def __init__(self, target: str, words: WordList) -> None:
        self.target = target.lower()
        self.words = words
        self.records: list[str] = []

    @property
    def max_attempts(self) -> int:
        return len(self.target) + 1

    @property
    def finished(self) -> bool:
        return (
            bool(self.records) and self.records[-1] == self.target
        ) or len(self.records) >= self.max_attempts

    def guess(self, word: str) -> GuessResult:
        """Check a guess, record it and return the new board."""
        if self.finished:
            raise WordleError("the game is over")
        word = word.lower()
        win = word == self.target
        if not win:
            if len(word) != len(self.target):
                raise LengthMismatchError("length not enough")
            if not self.words.knows(word):
                raise UnknownWordError("unknown word")
        self.records.append(word)
        over = win or len(self.records) >= self.max_attempts
        return GuessResult(win=win, over=over, image=self.render())

    def render(self) -> bytes:
        """Draw the current board as PNG bytes."""
        return render_board(self.target, self.records)