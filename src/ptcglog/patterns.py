"""Regex patterns for Pokemon TCG Live game log lines.

Patterns are anchored at the start of the line so card names containing
keywords ("Switch", "Energy Search") are not mistaken for actions. Several
patterns accept the Unicode right single quotation mark (U+2019) as well as
the ASCII apostrophe, since exported logs mix both.
"""

import re

# Apostrophe: ASCII or U+2019
APOS = "['’]"

# Setup phase
COIN_FLIP_CHOICE = re.compile(r"^(\w+) chose (heads|tails) for the opening coin flip")
COIN_FLIP_WINNER = re.compile(r"^(\w+) won the coin toss")
GO_FIRST = re.compile(r"^(\w+) decided to go (first|second)")
OPENING_HAND = re.compile(r"^(\w+) drew (\d+) cards for the opening hand")
MULLIGAN = re.compile(r"^(\w+) took a mulligan")
MULLIGAN_DRAW = re.compile(
    r"^(\w+) drew (\d+) more cards? because (\w+) took at least 1 mulligan"
)

# Section markers
SETUP_HEADER = "Setup"
TURN_START = re.compile(rf"^\[playerName\]{APOS}s Turn$")

# Draws. A named draw must start with a capital so "drew a card" falls
# through to the counted-draw pattern.
DREW_CARD = re.compile(r"^(\w+) drew ([A-Z].+?)\.?$")
DREW_CARDS = re.compile(r"^(\w+) drew (a|\d+) cards?\b")

# Pokemon
PLAYED_POKEMON = re.compile(r"^(\w+) played ([A-Z].+?) to the (Active Spot|Bench)")
EVOLVED = re.compile(
    r"^(\w+) evolved (.+?) to (.+?)(?: (in the Active Spot|on the Bench))?\.?$"
)
SWITCHED_IN = re.compile(rf"^(\w+){APOS}s (.+?) is now in the Active Spot")

# Energy and tool attachment
ATTACHED_ENERGY = re.compile(
    r"^(\w+) attached (.+?) to (.+?)(?: in the Active Spot| on the Bench)?\.?$"
)
# Used by the deck reconstructor on event descriptions
ATTACHED_NAME = re.compile(r"attached (.+?) to")

# Trainers
PLAYED_STADIUM = re.compile(r"^(\w+) played (.+?) to the Stadium spot")
PLAYED_TRAINER = re.compile(r"^(\w+) played (.+?)\.?$")

# Abilities and combat
USED_ABILITY = re.compile(rf"^(\w+){APOS}s (.+?) used (.+?)\.?$")
ATTACK = re.compile(
    rf"^(\w+){APOS}s (.+?) used (.+?) on (\w+){APOS}s (.+?) for (\d+) damage"
)
DAMAGE_COUNTERS = re.compile(
    rf"^(?:- )?(\w+) put (\d+) damage counters? on (\w+){APOS}s (.+?)\.?$"
)
KNOCKOUT = re.compile(rf"^(\w+){APOS}s (.+?) was Knocked Out")
PRIZE_TAKEN = re.compile(r"^(\w+) took (a|\d+) Prize cards?")

# Coin flips
COIN_FLIP = re.compile(r"flipped (\d+) coins?, and (\d+) landed on heads")
SINGLE_COIN_FLIP = re.compile(r"^(\w+) flipped a coin,? and it landed on (heads|tails)")

# Win conditions
DECK_OUT = re.compile(rf"^Opponent{APOS}s deck ran out of cards\. (\w+) wins")
PRIZE_WIN = re.compile(r"^(\w+) took all Prize cards")
NO_POKEMON = re.compile(r"^(\w+) has no Pok[eé]mon in play\. (\w+) wins")

# Concessions, resolved by the orchestrator. Order matters: the named
# variants must be tried before the bare "X conceded".
YOU_CONCEDED = re.compile(r"^You conceded\. (\w+) wins")
OPPONENT_CONCEDED = re.compile(r"^Opponent conceded\. (\w+) wins")
PLAYER_CONCEDED = re.compile(r"^(\w+) conceded")

# Damage breakdown annotation
DAMAGE_BREAKDOWN = re.compile(r"^-? ?Damage breakdown:")

# Bullet list of revealed card names following a draw
CARD_LIST = re.compile(r"^[ ]{3}• (.+)$")
CARD_LIST_PREFIX = "   •"

# Lines that carry no event of their own
SKIP_PATTERNS = [
    re.compile(r"^- \d+ drawn cards"),
    re.compile(r"^- Cards revealed from Mulligan"),
    re.compile(r"^- .+ drew a card\.$"),
    re.compile(r"^- .+ drew .+ and played"),
    re.compile(rf"^A card was added to .+{APOS}s hand"),
    re.compile(r"^- .+ shuffled"),
    re.compile(r"^- .+ put \d+ cards"),
    re.compile(r"^- .+ moved .+ cards to"),
    re.compile(r"^- .+ discarded"),
    re.compile(r"^- \d+ cards were discarded"),
    re.compile(r"^[ ]{3}•"),
    re.compile(r"^Damage breakdown:"),
    re.compile(r"^- Damage breakdown:"),
    re.compile(r"^\s*$"),
]
