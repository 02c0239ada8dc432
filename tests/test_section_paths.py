"""Tests for dot-path section addressing."""

import copy

import pytest

from marketplan.services.section_paths import SECTION_KEYS, get_path, is_section_key, set_path


def test_section_keys_cover_the_nine_sections():
    assert len(SECTION_KEYS) == 9
    assert SECTION_KEYS[0] == "avant.marcheCible"
    assert "pendant.nurturing" in SECTION_KEYS
    assert "apres.recommandation" in SECTION_KEYS
    assert is_section_key("avant.messageMarketing")
    assert not is_section_key("avant.nonexistent")
    assert not is_section_key("avant")


class TestGetPath:
    def test_reads_nested_value(self, full_plan):
        assert get_path(full_plan, "pendant.nurturing.relances") == ["Relance J7"]

    def test_missing_segment_returns_none(self, full_plan):
        assert get_path(full_plan, "avant.nonexistent") is None
        assert get_path(full_plan, "nulle.part.ici") is None

    def test_never_raises_on_non_dict_intermediate(self, full_plan):
        assert get_path(full_plan, "avant.marcheCible.persona.length") is None
        assert get_path({}, "") is None


class TestSetPath:
    def test_round_trip_leaves_other_sections_untouched(self, full_plan):
        doc = copy.deepcopy(full_plan)
        value = {"sequenceEmails": ["Nouveau"], "contenusEducatifs": [], "relances": []}

        set_path(doc, "pendant.nurturing", value)

        assert get_path(doc, "pendant.nurturing") == value
        for key in SECTION_KEYS:
            if key != "pendant.nurturing":
                assert get_path(doc, key) == get_path(full_plan, key)

    def test_overwrites_instead_of_merging(self, full_plan):
        doc = copy.deepcopy(full_plan)
        set_path(doc, "avant.marcheCible", {"persona": "Seul champ"})
        assert doc["avant"]["marcheCible"] == {"persona": "Seul champ"}

    def test_creates_missing_intermediates(self):
        doc = {"apres": "pas un objet"}
        set_path(doc, "pendant.conversion", {"cta": []})
        set_path(doc, "apres.recommandation", {"parrainage": []})
        assert doc == {
            "pendant": {"conversion": {"cta": []}},
            "apres": {"recommandation": {"parrainage": []}},
        }

    def test_empty_last_segment_is_rejected(self):
        with pytest.raises(ValueError):
            set_path({}, "avant.", {})
