"""Tests for sheet field edits."""

from __future__ import annotations

import pytest

from dh_sheet.core.exceptions import ValidationError
from dh_sheet.engine import editing
from dh_sheet.models import CharacterDocument


class TestClamp:
    """Tests for clamp and track clicks."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(-50, -10), (-10, -10), (0, 0), (30, 30), (99, 30)],
    )
    def test_clamp(self, value: int, expected: int) -> None:
        assert editing.clamp(value, -10, 30) == expected

    @pytest.mark.parametrize(
        ("current", "index", "expected"),
        [(0, 0, 1), (3, 5, 6), (3, 2, 2), (3, 0, 1), (1, 0, 0)],
    )
    def test_track_click(self, current: int, index: int, expected: int) -> None:
        assert editing.track_click(current, index) == expected


class TestIdentityAndTraits:
    """Tests for meta and trait edits."""

    def test_set_name(self, rogue_sheet: CharacterDocument) -> None:
        doc = editing.set_meta(rogue_sheet, "name", "Vex")

        assert doc.meta.name == "Vex"
        assert rogue_sheet.meta.name == ""

    @pytest.mark.parametrize(("value", "expected"), [(0, 1), (5, 5), (12, 10)])
    def test_level_clamped(self, rogue_sheet: CharacterDocument, value: int, expected: int) -> None:
        assert editing.set_meta(rogue_sheet, "level", value).meta.level == expected

    def test_unknown_meta_field(self, rogue_sheet: CharacterDocument) -> None:
        with pytest.raises(ValidationError):
            editing.set_meta(rogue_sheet, "alignment", "chaotic")

    @pytest.mark.parametrize(("value", "expected"), [(-20, -10), (3, 3), (40, 30)])
    def test_trait_clamped(self, rogue_sheet: CharacterDocument, value: int, expected: int) -> None:
        assert editing.set_trait(rogue_sheet, "agility", value).traits.agility == expected

    def test_unknown_trait(self, rogue_sheet: CharacterDocument) -> None:
        with pytest.raises(ValidationError):
            editing.set_trait(rogue_sheet, "charisma", 2)


class TestDefense:
    """Tests for evasion, armor and thresholds."""

    def test_evasion_and_armor(self, rogue_sheet: CharacterDocument) -> None:
        assert editing.set_evasion(rogue_sheet, 150).evasion == 99
        assert editing.set_evasion(rogue_sheet, -1).evasion == 0
        assert editing.set_armor(rogue_sheet, 11).armor == 10

    def test_threshold(self, rogue_sheet: CharacterDocument) -> None:
        doc = editing.set_threshold(rogue_sheet, "major", 0)

        assert doc.damage_thresholds.major == 1
        assert doc.damage_thresholds.minor == 6

    def test_unknown_threshold(self, rogue_sheet: CharacterDocument) -> None:
        with pytest.raises(ValidationError):
            editing.set_threshold(rogue_sheet, "critical", 20)


class TestVitals:
    """Tests for the HP and Stress track invariants."""

    def test_hp_current_bounded_by_max(self, rogue_sheet: CharacterDocument) -> None:
        assert editing.set_hp_current(rogue_sheet, 9).hp.current == 6
        assert editing.set_hp_current(rogue_sheet, -2).hp.current == 0

    def test_hp_max_pulls_current_down(self, rogue_sheet: CharacterDocument) -> None:
        doc = editing.set_hp_max(rogue_sheet, 4)

        assert (doc.hp.current, doc.hp.max) == (4, 4)

    def test_hp_max_lifts_zero_current(self, rogue_sheet: CharacterDocument) -> None:
        """Test that changing max HP keeps at least one current HP."""
        doc = editing.set_hp_current(rogue_sheet, 0)

        doc = editing.set_hp_max(doc, 8)

        assert (doc.hp.current, doc.hp.max) == (1, 8)

    def test_hp_max_bounds(self, rogue_sheet: CharacterDocument) -> None:
        assert editing.set_hp_max(rogue_sheet, 0).hp.max == 1
        assert editing.set_hp_max(rogue_sheet, 40).hp.max == 30

    def test_stress(self, rogue_sheet: CharacterDocument) -> None:
        doc = editing.set_stress_current(rogue_sheet, 4)
        assert doc.stress.current == 4

        doc = editing.set_stress_max(doc, 2)
        assert (doc.stress.current, doc.stress.max) == (2, 2)

        doc = editing.set_stress_current(doc, 9)
        assert doc.stress.current == 2

    def test_stress_max_keeps_zero(self, rogue_sheet: CharacterDocument) -> None:
        doc = editing.set_stress_max(rogue_sheet, 10)

        assert (doc.stress.current, doc.stress.max) == (0, 10)

    def test_hope_and_xp(self, rogue_sheet: CharacterDocument) -> None:
        assert editing.set_hope(rogue_sheet, 12).hope == 9
        assert editing.set_hope(rogue_sheet, -1).hope == 0
        assert editing.set_experience_points(rogue_sheet, 1500).experience_points == 999


class TestEquipment:
    """Tests for weapons, armor and free text."""

    def test_set_weapon(self, rogue_sheet: CharacterDocument) -> None:
        doc = editing.set_weapon(rogue_sheet, "primary", name="Dagger", damage="d8+1")

        assert doc.weapons.primary.name == "Dagger"
        assert doc.weapons.primary.damage == "d8+1"
        assert doc.weapons.secondary.name == ""

    def test_unknown_weapon_slot(self, rogue_sheet: CharacterDocument) -> None:
        with pytest.raises(ValidationError):
            editing.set_weapon(rogue_sheet, "tertiary", name="Sling")

    def test_unknown_weapon_field(self, rogue_sheet: CharacterDocument) -> None:
        with pytest.raises(ValidationError):
            editing.set_weapon(rogue_sheet, "primary", weight="2lb")

    def test_set_armor_block(self, rogue_sheet: CharacterDocument) -> None:
        doc = editing.set_armor_block(rogue_sheet, name="Leather", thresholds="6/13")

        assert doc.armor_block.name == "Leather"
        assert doc.armor_block.thresholds == "6/13"

    def test_free_text(self, rogue_sheet: CharacterDocument) -> None:
        doc = editing.set_notes(editing.set_inventory(rogue_sheet, "rope"), "owes the guild")

        assert (doc.inventory, doc.notes) == ("rope", "owes the guild")


class TestExperiences:
    """Tests for experience list edits."""

    def test_add(self, rogue_sheet: CharacterDocument) -> None:
        doc = editing.add_experience(rogue_sheet, "Street Rat", 3)

        assert len(doc.experiences) == 3
        added = doc.experiences[-1]
        assert (added.text, added.bonus, added.active) == ("Street Rat", 3, False)
        assert len({exp.id for exp in doc.experiences}) == 3

    def test_update_clamps_bonus(self, rogue_sheet: CharacterDocument) -> None:
        exp_id = rogue_sheet.experiences[0].id

        doc = editing.update_experience(rogue_sheet, exp_id, text="Sailor", bonus=15)

        assert doc.experiences[0].text == "Sailor"
        assert doc.experiences[0].bonus == 10
        assert doc.experiences[1] == rogue_sheet.experiences[1]

    def test_update_unknown(self, rogue_sheet: CharacterDocument) -> None:
        with pytest.raises(ValidationError):
            editing.update_experience(rogue_sheet, "missing", text="x")

    def test_toggle(self, rogue_sheet: CharacterDocument) -> None:
        exp_id = rogue_sheet.experiences[1].id

        doc = editing.toggle_experience(rogue_sheet, exp_id)
        assert doc.experiences[1].active is True

        doc = editing.toggle_experience(doc, exp_id)
        assert doc.experiences[1].active is False

    def test_remove(self, rogue_sheet: CharacterDocument) -> None:
        first, second = rogue_sheet.experiences

        doc = editing.remove_experience(rogue_sheet, first.id)

        assert doc.experiences == [second]
        assert editing.remove_experience(doc, "missing").experiences == [second]
