"""Trainer card categorisation for Pokemon TCG Live logs.

Logs never state a trainer's category, so it is looked up in a table of
known cards and otherwise guessed from the card name.
"""

import re
from typing import Optional

from ptcglog.models import TrainerCategory

SUPPORTER = TrainerCategory.SUPPORTER
ITEM = TrainerCategory.ITEM
TOOL = TrainerCategory.TOOL
STADIUM = TrainerCategory.STADIUM

TRAINER_CATEGORIES: dict[str, TrainerCategory] = {
    # Supporters
    "Arven": SUPPORTER,
    "Hilda": SUPPORTER,
    "Iono": SUPPORTER,
    "Boss's Orders": SUPPORTER,
    "Professor's Research": SUPPORTER,
    "Lillie's Determination": SUPPORTER,
    "Dawn": SUPPORTER,
    "Xerosic's Machinations": SUPPORTER,
    "Cynthia": SUPPORTER,
    "Marnie": SUPPORTER,
    "Professor Sada's Vitality": SUPPORTER,
    "Professor Turo's Scenario": SUPPORTER,
    "Jacq": SUPPORTER,
    "Judge": SUPPORTER,
    "Penny": SUPPORTER,
    "Tulip": SUPPORTER,
    "Worker": SUPPORTER,
    # Items
    "Nest Ball": ITEM,
    "Ultra Ball": ITEM,
    "Rare Candy": ITEM,
    "Counter Catcher": ITEM,
    "Buddy-Buddy Poffin": ITEM,
    "Precious Trolley": ITEM,
    "Redeemable Ticket": ITEM,
    "Sacred Ash": ITEM,
    "Switch": ITEM,
    "Escape Rope": ITEM,
    "Super Rod": ITEM,
    "Level Ball": ITEM,
    "Quick Ball": ITEM,
    "Great Ball": ITEM,
    "Pokégear 3.0": ITEM,
    "Energy Search": ITEM,
    "Energy Retrieval": ITEM,
    "Earthen Vessel": ITEM,
    "Battle VIP Pass": ITEM,
    "Capturing Aroma": ITEM,
    "Pal Pad": ITEM,
    "Hisuian Heavy Ball": ITEM,
    "Lost Vacuum": ITEM,
    "Canceling Cologne": ITEM,
    "Defiance Band": ITEM,
    "Choice Belt": ITEM,
    "Exp. Share": ITEM,
    "Forest Seal Stone": ITEM,
    "Technical Machine: Evolution": ITEM,
    "Technical Machine: Devolution": ITEM,
    "Prime Catcher": ITEM,
    "Night Stretcher": ITEM,
    "Pokémon Catcher": ITEM,
    "Max Potion": ITEM,
    "Potion": ITEM,
    "Super Potion": ITEM,
    "Tool Scrapper": ITEM,  # removes tools, is not one
    # Tools
    "Gravity Gemstone": TOOL,
    "Air Balloon": TOOL,
    "Cape of Toughness": TOOL,
    "Big Charm": TOOL,
    "Rescue Scarf": TOOL,
    "Tool Jammer": TOOL,
    "Hero's Cape": TOOL,
    "Bravery Charm": TOOL,
    "Rocky Helmet": TOOL,
    "Leftovers": TOOL,
    # Stadiums
    "Artazon": STADIUM,
    "Surfing Beach": STADIUM,
    "Path to the Peak": STADIUM,
    "Temple of Sinnoh": STADIUM,
    "Collapsed Stadium": STADIUM,
    "Beach Court": STADIUM,
    "Magenta Plaza": STADIUM,
    "Mesagoza": STADIUM,
    "Lost City": STADIUM,
    "Tower of Waters": STADIUM,
    "Tower of Darkness": STADIUM,
    "Training Court": STADIUM,
    "Jubilife Village": STADIUM,
    "Pokémon League Headquarters": STADIUM,
}

# Effect text that suggests a supporter was played
SUPPORTER_EFFECT_PATTERNS = [
    re.compile(r"drew \d+ cards", re.IGNORECASE),
    re.compile(r"shuffled.*deck", re.IGNORECASE),
    re.compile(r"search.*deck", re.IGNORECASE),
    re.compile(r"opponent.*shuffle", re.IGNORECASE),
]

ITEM_NAME_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (r"ball$", r"catcher$", r"^switch$", r"rope$", r"rod$", r"ash$",
              r"ticket$", r"trolley$", r"poffin$", r"candy$")
]

TOOL_NAME_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (r"gemstone$", r"balloon$", r"charm$", r"cape$", r"scarf$",
              r"belt$", r"helmet$", r"stone$")
]

# Supporters are usually named after characters: "Arven", "Boss's Orders"
CHARACTER_NAME = re.compile(r"^[A-Z][a-z]+('s)?(\s+[A-Z][a-z]+)*$")


def get_trainer_category(trainer_name: str) -> TrainerCategory:
    """Get the category for a trainer card.

    Checks the known table first, then infers from the name: tool
    suffixes, item suffixes, then character-like names as supporters.
    Unknown trainers default to item.
    """
    known = TRAINER_CATEGORIES.get(trainer_name)
    if known is not None:
        return known

    for pattern in TOOL_NAME_PATTERNS:
        if pattern.search(trainer_name):
            return TOOL

    for pattern in ITEM_NAME_PATTERNS:
        if pattern.search(trainer_name):
            return ITEM

    if CHARACTER_NAME.match(trainer_name):
        return SUPPORTER

    return ITEM


def infer_category_from_effect(effect_line: str) -> Optional[TrainerCategory]:
    """Infer a trainer category from the effect text that followed it.

    Returns None when the line gives no hint.
    """
    for pattern in SUPPORTER_EFFECT_PATTERNS:
        if pattern.search(effect_line):
            return SUPPORTER

    if re.search(r"stadium spot", effect_line, re.IGNORECASE):
        return STADIUM

    if re.search(r"attached.*to", effect_line, re.IGNORECASE):
        return TOOL

    return None


def is_known_trainer(trainer_name: str) -> bool:
    """Check if a card name is in the known trainer table."""
    return trainer_name in TRAINER_CATEGORIES


def get_trainers_by_category(category: TrainerCategory) -> list[str]:
    """Get all known trainers of a category, in table order."""
    return [name for name, cat in TRAINER_CATEGORIES.items() if cat == category]
