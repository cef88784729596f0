import io

import pytest

from ghostgame.battle.models import (
    BaseStats, GhostSpecies, GhostType, Item, ItemCategory, LearnableMove, Move,
    OwnedGhost, OwnedMove, StatModifiers,
)
from ghostgame.core.errors import ValidationError
from ghostgame.core.logging import Logger
from ghostgame.core.types import (
    colorize_type_text, rich_type_markup, strip_ansi, type_abbreviation,
)


def _ghost(**kw):
    base = dict(id="g", species_id="fireling", level=10, experience=1000, current_hp=20,
                max_hp=30, stats=BaseStats(30, 17, 13, 19), moves=[OwnedMove("tackle", 35, 35)])
    base.update(kw)
    return OwnedGhost(**base)


def test_valid_records_pass():
    assert _ghost().validate()
    Move("m", "M", GhostType.FIRE, 0, 0, 1).validate()
    Item("i", "I", ItemCategory.OTHER, 0).validate()
    StatModifiers(6, -6, 0).validate()


@pytest.mark.parametrize("kw", [
    {"level": 0}, {"level": 101}, {"experience": -1}, {"current_hp": 31}, {"current_hp": -1},
    {"max_hp": 0, "current_hp": 0}, {"moves": [OwnedMove("a", 1, 1)] * 5},
    {"moves": [OwnedMove("tackle", 36, 35)]}, {"stats": BaseStats(30, 0, 13, 19)},
])
def test_owned_ghost_rejects(kw):
    with pytest.raises(ValidationError):
        _ghost(**kw).validate()


def test_high_level_stats_allowed_on_owned_ghost():
    _ghost(level=100, stats=BaseStats(300, 300, 300, 300), current_hp=300, max_hp=300).validate()


@pytest.mark.parametrize("record", [
    Move("m", "M", GhostType.FIRE, 251, 100, 10),
    Move("m", "M", GhostType.FIRE, 40, 101, 10),
    Move("m", "M", GhostType.FIRE, 40, 100, 41),
    Move("m", "", GhostType.FIRE, 40, 100, 10),
    Item("i", "I", ItemCategory.HEALING, -1),
    StatModifiers(attack=7),
    GhostSpecies("s", "S", GhostType.FIRE, BaseStats(256, 1, 1, 1)),
    GhostSpecies("s", "S", GhostType.FIRE, BaseStats(1, 1, 1, 1), (LearnableMove(0, "x"),)),
    GhostSpecies("s", "S", GhostType.FIRE, BaseStats(1, 1, 1, 1), rarity="mythic"),
])
def test_master_data_rejects(record):
    with pytest.raises(ValidationError):
        record.validate()


def test_validation_error_fields():
    with pytest.raises(ValidationError) as ei:
        OwnedMove("x", 5, 3).validate()
    assert ei.value.model == "OwnedMove" and ei.value.field == "current_pp"


def test_display_name_falls_back_to_species():
    assert _ghost().display_name == "fireling"
    assert _ghost(nickname="Ash").display_name == "Ash"


def test_type_helpers():
    assert type_abbreviation("fire") == "FIR"
    assert type_abbreviation(GhostType.GHOST) == "GHO"
    assert rich_type_markup(GhostType.GHOST, "x") == "[#735797]x[/#735797]"
    assert rich_type_markup("plasma", "x") == "x"
    assert strip_ansi(colorize_type_text("fire", "Ember")) == "Ember"


def test_logger_levels_and_extras():
    buf = io.StringIO()
    log = Logger("INFO", stream=buf)
    log.debug("Hidden")
    log.info("BattleStart", player="fireling", level=5)
    out = strip_ansi(buf.getvalue())
    assert "Hidden" not in out
    assert "[INFO] BattleStart player=fireling level=5" in out
    log.set_level("ERROR")
    log.warn("Nope")
    assert "Nope" not in buf.getvalue()
