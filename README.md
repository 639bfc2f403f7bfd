# plugkit

Building blocks for chat-bot plugins. The package has four modules:

- `plugkit.wordle`: a word-guessing game that draws its board as a PNG image.
- `plugkit.wtf`: a catalogue of online "fun test" generators. The results are fetched over HTTP.
- `plugkit.ymgal_db`: a local SQLite archive of galgame CG and sticker picture sets.
- `plugkit.ymgal_scraper`: a scraper that fills the archive, plus parsers for the chat commands that query it.

## Install

```
pip install plugkit
```

To run the tests:

```
pip install "plugkit[test]"
pytest
```

## Wordle

```python
import random
from plugkit.wordle import (
    load_word_bank, parse_command, WordleGame,
    LengthMismatchError, UnknownWordError,
)

bank = load_word_bank("data/Wordle")   # reads cet-4_N.txt and dict_N.txt for N = 5, 6, 7
mode, length = parse_command("团队六阶猜单词")
words = bank[length]
game = WordleGame(words.pick_target(random.Random()), words)

png = game.render()                    # empty board
try:
    result = game.guess("planet")
except LengthMismatchError:
    ...                                # wrong number of letters
except UnknownWordError:
    ...                                # not in the dictionary
```

- `load_word_bank` returns a `WordList` for each length. The `cet-4_N.txt` files hold the possible targets and the `dict_N.txt` files hold the accepted guesses. If any file cannot be read, it raises `WordleError` and reports how many files failed.
- `parse_command` reads a start command such as `个人猜单词` or `团队七阶猜单词`. It returns a `(GameMode, length)` pair, or `None` if the text is not a start command. Without a length word the game uses 5 letters.
- `answer_pattern(length)` returns the regular expression that a message must match to count as a guess.
- `WordleGame.guess` lower-cases the guess and records it. It returns a `GuessResult` with `win`, `over` and `image`, where `image` holds the PNG bytes of the board. A player gets one more try than the length of the word. Guessing after the game is over raises `WordleError`.
- `render_board(target, records)` draws a board directly. Green means the right letter in the right place, yellow means the letter is in the word, and grey means it is not.

## Fun tests

```python
from plugkit.wtf import list_text, parse_query, get_wtf

print(list_text())                     # "00. ...\n01. ...\n..."
index = parse_query("查询鬼东西3")       # 3; None if the text is not a query
generator = get_wtf(index)             # None if the index is out of range
text = generator.predict("Alice", "Bob")
```

- `parse_query` raises `WtfError` when the command has no number.
- `Wtf.url` builds the request address from the names.
- `Wtf.predict` returns the generator's name and its text. It raises `WtfError` on a non-200 response, on a reply that is not JSON, or when the service reports a failure.

## Galgame pictures

```python
from plugkit.ymgal_db import YmgalDB
from plugkit.ymgal_scraper import YmgalScraper, parse_random_command, build_messages

with YmgalDB("ymgal.db") as db:
    added = YmgalScraper(db).update()  # number of picture sets newly stored
    picture_type = parse_random_command("随机galCG")
    entry = db.random(picture_type)
    messages = build_messages(entry, "bot")
```

### The archive

`YmgalDB` creates the file and its table if they do not exist.

- `upsert` inserts an entry or overwrites the entry with the same id.
- `get_by_id` returns a stored entry, or `None`.
- `random(picture_type)` picks a random entry of that type, or returns `None`.
- `search(picture_type, key)` picks a random entry of that type whose title or description contains `key`, or returns `None`.
- `Ymgal.pictures()` splits the stored picture list into addresses.

### The scraper

`YmgalScraper` takes an optional `requests.Session` and a delay between requests, 0.5 s by default.

`update` reads the page counts, collects the set ids from every search page, and then stores sets, oldest first. It stops at the first set already stored with pictures. It does this for CG sets (`CG_TYPE`) and then for sticker sets (`EMOTICON_TYPE`).

The page parsers can also be used on HTML you already have:

- `parse_max_page`
- `parse_picset_ids`
- `parse_picset`

### Commands and replies

- `parse_random_command` reads `随机galCG` and `随机gal表情包`.
- `parse_search_command` reads `galCG<key>` and `gal表情包<key>` and returns the picture type and the key.
- `build_messages` returns `("text" | "image", content)` pairs: the title, then the description if there is one, then one image per picture. For a missing or empty entry it returns a single text saying that there is no such picture.

## What this package does not do

The package contains no bot framework and no command-line program. It does not connect to a chat service, receive or send messages, enforce rate limits or one game per group, or time out a Wordle round. It does not translate the answer word, and it does not download the word-list files; `load_word_bank` reads them from a folder you provide.

Your bot reads the incoming messages, calls these functions, and sends back the text or images they return.