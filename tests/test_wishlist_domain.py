from datetime import datetime, timedelta, timezone

from kushalwear.domain.wishlist import WishlistState, remove_entry, upsert_entry

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_add_twice_keeps_one_entry():
    wl = upsert_entry(WishlistState(user_id="u1"), "P1", now=T0)
    wl = upsert_entry(wl, "P1", now=T0 + timedelta(minutes=5))

    assert len(wl.entries) == 1
    assert wl.entries[0].added_at == T0 + timedelta(minutes=5)


def test_only_supplied_fields_are_overwritten():
    black = {"name": "Black", "hex": "#000000"}
    wl = upsert_entry(WishlistState(user_id="u1"), "P1", size="M", color=black)
    wl = upsert_entry(wl, "P1", size="L")

    entry = wl.entry("P1")
    assert entry.selected_size == "L"
    assert entry.selected_color == black


def test_remove_is_noop_for_missing_product():
    wl = upsert_entry(WishlistState(user_id="u1"), "P1")
    same = remove_entry(wl, "P2")
    assert [e.product_id for e in same.entries] == ["P1"]

    empty = remove_entry(wl, "P1")
    assert not empty.has_product("P1")
    assert wl.has_product("P1")
