"""Closed enumerations shared by the damage model and the roster."""

from enum import Enum


class DamageType(str, Enum):
    FIRE = "fire"
    PHYSICAL = "physical"
    ICE = "ice"
    LIGHT = "light"
    PIERCE = "pierce"
    VOID = "void"


class CategoryTag(str, Enum):
    SWARM = "swarm"
    BEAST = "beast"
    ARMORED = "armored"
    UNDEAD = "undead"
    DEMON = "demon"
    ELEMENTAL = "elemental"
    FLYING = "flying"
    TANK = "tank"
    BOSS = "boss"
    DRAGON = "dragon"
    AQUATIC = "aquatic"
    HUMANOID = "humanoid"
    CONSTRUCT = "construct"
