"""Tests for core.data_store – card replacement and checklist merging."""

import random

from conftest import card, checklist
from core.data_store import DataStore, normalize_index
from core.models import CheckItem, CheckState


class TestNormalizeIndex:
    def test_in_range(self):
        assert normalize_index(2, 3) == 2

    def test_past_end_restarts(self):
        assert normalize_index(3, 3) == 0
        assert normalize_index(7, 3) == 0

    def test_negative(self):
        assert normalize_index(-1, 3) == 0

    def test_empty(self):
        assert normalize_index(5, 0) == 0


class TestCards:
    def test_starts_empty(self):
        store = DataStore()
        assert store.cards == ()
        assert store.card_count == 0
        assert store.get_card(0) is None

    def test_replace_is_wholesale(self):
        store = DataStore()
        store.replace_cards([card("1"), card("2")])
        store.replace_cards([card("3")])
        assert [c.id for c in store.cards] == ["3"]

    def test_replace_with_empty(self):
        store = DataStore()
        store.replace_cards([card("1")])
        store.replace_cards([])
        assert store.card_count == 0

    def test_get_card_normalizes(self):
        store = DataStore()
        store.replace_cards([card("1"), card("2")])
        assert store.get_card(1).id == "2"
        assert store.get_card(5).id == "1"

    def test_cards_is_snapshot(self):
        store = DataStore()
        store.replace_cards([card("1")])
        before = store.cards
        store.replace_cards([card("2")])
        assert before[0].id == "1"


class TestChecklists:
    def test_upsert_and_overwrite(self):
        store = DataStore()
        store.upsert_checklist(checklist("c1", name="old"))
        store.upsert_checklist(checklist("c1", name="new"))
        assert store.get_checklist("c1").name == "new"
        assert len(store.checklists) == 1

    def test_pending_until_arrival(self):
        store = DataStore()
        c = card("1", checklist_ids=("c1", "c2"))
        store.replace_cards([c])
        store.upsert_checklist(checklist("c2"))

        slots = store.get_checklists_for_card(c)
        assert [s.checklist_id for s in slots] == ["c1", "c2"]
        assert slots[0].pending
        assert not slots[1].pending
        assert slots[1].checklist.id == "c2"

    def test_checklists_property_is_a_copy(self):
        store = DataStore()
        store.upsert_checklist(checklist("c1"))
        store.checklists.clear()
        assert store.get_checklist("c1") is not None

    def test_last_write_wins_in_any_order(self):
        rng = random.Random(7)
        referenced = ("a", "b", "c")
        c = card("1", checklist_ids=referenced)
        for _ in range(20):
            store = DataStore()
            expected = {}
            for step in range(30):
                if rng.random() < 0.2:
                    store.replace_cards([c])
                    continue
                cid = rng.choice(referenced)
                version = checklist(cid, name=f"v{step}")
                store.upsert_checklist(version)
                expected[cid] = version
            assert store.checklists == expected


class TestPruning:
    def test_unreferenced_checklist_evicted_one_refresh_later(self):
        store = DataStore()
        store.replace_cards([card("1", checklist_ids=("c1",))])
        store.upsert_checklist(checklist("c1"))
        store.replace_cards([card("2")])
        # written since the previous replace: kept once
        assert store.get_checklist("c1") is not None
        store.replace_cards([card("2")])
        assert store.get_checklist("c1") is None

    def test_checklist_before_card_survives(self):
        store = DataStore()
        store.upsert_checklist(checklist("c1"))
        store.replace_cards([card("1", checklist_ids=("c1",))])
        store.replace_cards([card("1", checklist_ids=("c1",))])
        assert store.get_checklist("c1") is not None

    def test_referenced_checklist_never_evicted(self):
        store = DataStore()
        c = card("1", checklist_ids=("c1",))
        store.upsert_checklist(checklist("c1", items=[CheckItem("x", CheckState.COMPLETE)]))
        for _ in range(5):
            store.replace_cards([c])
        assert store.get_checklist("c1").items[0].complete

    def test_prune_disabled_accumulates(self):
        store = DataStore(prune_checklists=False)
        store.upsert_checklist(checklist("c1"))
        for _ in range(3):
            store.replace_cards([card("2")])
        assert store.get_checklist("c1") is not None
