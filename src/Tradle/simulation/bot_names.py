"""Seeded display names for leaderboard bots.

Names imitate what real players type: mostly casual handles and word mashups,
occasionally a real-looking full name. Each style has a fixed share of the
field (cumulative cutoffs in ``NAME_STYLES``) and draws its parts from the
same ``SeededRandom`` as the rest of the bot, so a day's names are
reproducible.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Final

from Tradle.simulation.seeded import SeededRandom

# ---------------------------------------------------------------------------
# Word lists
# ---------------------------------------------------------------------------

FIRST_NAMES: Final[tuple[str, ...]] = (
    "Alex", "Jordan", "Morgan", "Casey", "Taylor", "Riley", "Jamie", "Dakota",
    "Avery", "Quinn", "Blake", "Cameron", "Skyler", "Reese", "Peyton", "Parker",
    "Drew", "Kai", "River", "Sage", "Charlie", "Sam", "Phoenix", "Rory", "Emerson",
    "Finley", "Hayden", "Logan", "Bailey", "Rowan", "Elliott", "Spencer", "Kendall",
    "Addison", "Aubrey", "Reagan", "Harper", "Sawyer", "Tanner", "Devon", "Max",
    "Madison", "Dylan", "Kennedy", "Tatum", "Justice", "Marlowe", "Landry", "Shiloh",
    "Sutton", "Bellamy", "Ridley", "Ellis", "Hollis", "Jules", "Lennon", "Mercer",
    "Monroe", "Oakley", "Palmer", "Presley", "Quincy", "Reilly", "Sasha", "Shay",
    "Sloan", "Sterling", "Tate", "Teagan", "Wren", "Arden", "Aspen", "Blair",
    "Brooke", "Campbell", "Carter", "Chase", "Colby", "Dani", "Eden", "Greer",
    "Marcus", "Nina", "Leo", "Zara", "Ethan", "Mia", "Lucas", "Emma", "Oliver",
    "Sophia", "Noah", "Ava", "Liam", "Isabella", "Mason", "Charlotte", "James",
    "Amelia", "Benjamin", "Evelyn", "Henry", "Abigail", "Jack", "Emily", "Sebastian",
    "Elizabeth", "Michael", "Sofia", "Daniel", "Matthew", "Ella", "David", "Scarlett",
    "Joseph", "Grace", "Samuel", "Chloe", "Ryan", "Victoria", "Nathan", "Isaac",
    "Aria", "Gabriel", "Lily", "Anthony", "Zoey", "Andrew", "Penelope", "Josiah",
    "Lillian", "Christopher", "Nora", "Joshua", "Hannah", "Caleb", "Mila", "Owen",
    "Lucy",
)  # fmt: skip

LAST_NAMES: Final[tuple[str, ...]] = (
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Martinez", "Lee", "Chen", "Patel", "Kumar", "Wong", "Singh", "Kim", "Nguyen",
    "Cohen", "Lopez", "Wilson", "Anderson", "Taylor", "Thomas", "Moore", "Jackson",
    "Martin", "Thompson", "White", "Harris", "Clark", "Lewis", "Walker", "Hall",
    "Allen", "Young", "King", "Wright", "Scott", "Green", "Baker", "Adams",
    "Nelson", "Carter", "Mitchell", "Roberts", "Turner", "Phillips", "Campbell",
    "Parker", "Evans", "Edwards", "Collins", "Stewart", "Morris", "Rogers", "Reed",
    "Cook", "Morgan", "Bell", "Murphy", "Bailey", "Rivera", "Cooper", "Richardson",
    "Cox", "Howard", "Ward", "Torres", "Peterson", "Gray", "Ramirez", "James",
    "Watson", "Brooks", "Kelly", "Sanders", "Price", "Bennett", "Wood", "Barnes",
    "Ross", "Henderson", "Coleman", "Jenkins", "Perry", "Powell", "Long", "Patterson",
    "Hughes", "Flores", "Washington", "Butler", "Simmons", "Foster", "Gonzales", "Bryant",
    "Alexander", "Russell", "Griffin", "Diaz", "Hayes", "Myers", "Ford", "Hamilton",
    "Graham", "Sullivan", "Wallace", "Woods", "Cole", "West", "Jordan", "Owens",
    "Reynolds", "Fisher", "Ellis", "Harrison", "Gibson", "McDonald", "Cruz", "Marshall",
    "Ortiz", "Gomez", "Murray", "Freeman", "Wells", "Webb", "Simpson", "Stevens",
    "Tucker", "Porter", "Hunter", "Hicks", "Crawford", "Henry", "Boyd", "Mason",
    "Morales", "Kennedy", "Warren", "Dixon", "Ramos", "Reyes", "Burns", "Gordon",
    "Shaw", "Holmes", "Rice", "Robertson", "Hunt", "Black", "Daniels", "Palmer",
)  # fmt: skip

USERNAME_WORDS: Final[tuple[str, ...]] = (
    "shadow", "dark", "silent", "thunder", "lightning", "fire", "ice", "storm",
    "night", "moon", "star", "sun", "sky", "cloud", "rain", "snow",
    "wolf", "lion", "tiger", "bear", "fox", "eagle", "hawk", "dragon",
    "ninja", "warrior", "knight", "ghost", "phantom", "cyber", "cosmic", "mystic",
    "pixel", "neon", "retro", "cool", "epic", "mega", "ultra", "super",
    "legend", "hero", "ace", "pro", "master", "chief", "king", "queen",
    "blue", "red", "green", "gold", "silver", "crimson", "azure", "violet",
    "lucky", "happy", "wild", "crazy", "chill", "zen", "fierce", "swift",
)  # fmt: skip

GAMING_WORDS: Final[tuple[str, ...]] = (
    "gamer", "player", "noob", "veteran", "legend", "champion", "winner", "beast",
    "killer", "sniper", "tank", "warrior", "mage", "ranger", "rogue", "hunter",
    "slayer", "crusher", "destroyer", "warlord", "overlord", "supreme", "elite", "alpha",
)  # fmt: skip

CASUAL_NAMES: Final[tuple[str, ...]] = (
    "mike", "sarah", "john", "lisa", "dave", "emma", "tom", "kate",
    "brian", "anna", "chris", "julia", "matt", "amy", "rob", "jen",
    "steve", "laura", "paul", "maria", "dan", "nina", "mark", "sophie",
    "eric", "grace", "ryan", "olivia", "kevin", "hannah", "jake", "zoe",
    "brad", "claire", "adam", "lily", "ben", "rose", "sean", "maya",
    "nick", "isla", "luke", "ella", "kyle", "ruby", "tyler", "ivy",
    "connor", "iris", "shane", "jade", "derek", "dawn", "brett", "autumn",
    "travis", "summer", "blake", "winter", "reed", "misty", "quinn", "rain",
    "parker", "sky", "hunter", "sierra", "chase", "sage", "cooper", "willow",
    "alex", "jordan", "casey", "riley", "drew", "max", "sam", "jay",
    "vic", "pat", "ash", "corey", "morgan", "avery", "reese",
)  # fmt: skip

RANDOM_NOUNS: Final[tuple[str, ...]] = (
    "potato", "banana", "pickle", "waffle", "taco", "burrito", "pizza", "cookie",
    "panda", "koala", "penguin", "octopus", "narwhal", "unicorn", "llama", "dino",
    "wizard", "robot", "pirate", "zombie", "alien", "astronaut", "samurai", "viking",
)  # fmt: skip

ADJECTIVES: Final[tuple[str, ...]] = (
    "cool", "epic", "mega", "super", "hyper", "turbo", "ultra", "max",
    "mini", "tiny", "big", "giant", "quick", "fast", "slow", "lazy",
    "happy", "sad", "angry", "calm", "wild", "tame", "hot", "cold",
    "smart", "clever", "wise", "silly", "goofy", "random", "weird", "odd",
)  # fmt: skip

CASUAL_SUFFIXES: Final[tuple[str, ...]] = (
    "pa", "la", "ma", "da", "ra", "ka", "ta", "na", "sa", "wa",
)  # fmt: skip

ALL_WORDS: Final[tuple[str, ...]] = USERNAME_WORDS + RANDOM_NOUNS + GAMING_WORDS


def _pick(rng: SeededRandom, words: Sequence[str]) -> str:
    return words[rng.next_int(0, len(words) - 1)]


# ---------------------------------------------------------------------------
# Name styles
# ---------------------------------------------------------------------------


def full_name(rng: SeededRandom) -> str:
    """``Riley Chen``"""
    return f"{_pick(rng, FIRST_NAMES)} {_pick(rng, LAST_NAMES)}"


def first_name_and_initial(rng: SeededRandom) -> str:
    """``Riley C.``"""
    return f"{_pick(rng, FIRST_NAMES)} {_pick(rng, LAST_NAMES)[0]}."


def casual_handle(rng: SeededRandom) -> str:
    """``mike23``, ``sarah_k``, ``brianpa``, ``kate94``, ``kate07`` or plain ``kate``."""
    base = _pick(rng, CASUAL_NAMES)
    form = rng.next()
    if form < 0.30:
        return f"{base}{rng.next_int(1, 99)}"
    if form < 0.35:
        return f"{base}_{chr(ord('a') + rng.next_int(0, 25))}"
    if form < 0.60:
        return f"{base}{_pick(rng, CASUAL_SUFFIXES)}"
    if form < 0.85:
        # Birth years 1985-2009 as two digits
        year = rng.next_int(85, 109)
        return f"{base}{year % 100:02d}"
    return base


def word_pair(rng: SeededRandom) -> str:
    """``shadowwolf``, ``shadowwolf42`` or ``shadow_wolf``."""
    first = _pick(rng, USERNAME_WORDS)
    second = _pick(rng, USERNAME_WORDS)
    form = rng.next()
    if form < 0.75:
        return f"{first}{second}"
    if form < 0.85:
        return f"{first}{second}{rng.next_int(1, 99)}"
    return f"{first}_{second}"


def adjective_noun(rng: SeededRandom) -> str:
    """``lazypotato``, ``lazypotato311`` or ``lazy_potato``."""
    adjective = _pick(rng, ADJECTIVES)
    noun = _pick(rng, RANDOM_NOUNS)
    form = rng.next()
    if form < 0.70:
        return f"{adjective}{noun}"
    if form < 0.85:
        return f"{adjective}{noun}{rng.next_int(1, 999)}"
    return f"{adjective}_{noun}"


def gamer_tag(rng: SeededRandom) -> str:
    """``xXsniperXx``, ``sniper420``, ``Prosniper`` or ``sniperrogue``."""
    word = _pick(rng, GAMING_WORDS)
    form = rng.next()
    if form < 0.35:
        return f"xX{word}Xx"
    if form < 0.70:
        return f"{word}{rng.next_int(1, 999)}"
    if form < 0.90:
        prefix = "Pro" if rng.next() < 0.5 else "The"
        return f"{prefix}{word}"
    return f"{word}{_pick(rng, GAMING_WORDS)}"


def name_and_word(rng: SeededRandom) -> str:
    """``sarahstorm`` or ``sarah_storm``."""
    name = _pick(rng, CASUAL_NAMES)
    word = _pick(rng, USERNAME_WORDS)
    if rng.next() < 0.85:
        return f"{name}{word}"
    return f"{name}_{word}"


def single_word(rng: SeededRandom) -> str:
    """``pickle`` or ``pickle8812``."""
    word = _pick(rng, ALL_WORDS)
    if rng.next() < 0.35:
        return word
    return f"{word}{rng.next_int(1, 9999)}"


# Cumulative cutoffs: 4% full names, 3% initials, 28% casual, 15% word pairs,
# 12% adjective+noun, 8% gamer tags, 7% name+word; the rest single words
NAME_STYLES: Final[tuple[tuple[float, Callable[[SeededRandom], str]], ...]] = (
    (0.04, full_name),
    (0.07, first_name_and_initial),
    (0.35, casual_handle),
    (0.50, word_pair),
    (0.62, adjective_noun),
    (0.70, gamer_tag),
    (0.77, name_and_word),
)


def display_name(rng: SeededRandom) -> str:
    """A plausible player handle drawn from the weighted name styles."""
    roll = rng.next()
    for cutoff, style in NAME_STYLES:
        if roll < cutoff:
            return style(rng)
    return single_word(rng)
