"""Unit tests for TokenRegistry."""

from roster import paths


def test_list_tokens_prefers_token_field_over_document_id(store, tokens) -> None:
    store.set(paths.fcm_token("u1", "doc-a"), {"token": "tok-a"})
    store.set(paths.fcm_token("u1", "tok-b"), {})
    store.set(paths.fcm_token("u2", "tok-c"), {"token": "tok-c"})

    assert sorted(tokens.list_tokens("u1")) == ["tok-a", "tok-b"]


def test_list_tokens_empty_for_unknown_user(tokens) -> None:
    assert tokens.list_tokens("nobody") == []


def test_remove_tokens_is_one_batch(store, tokens) -> None:
    for token in ("a", "b", "c"):
        store.set(paths.fcm_token("u1", token), {"token": token})

    assert tokens.remove_tokens("u1", ["a", "c"]) == 2

    assert tokens.list_tokens("u1") == ["b"]
    assert store.batches == [[paths.fcm_token("u1", "a"), paths.fcm_token("u1", "c")]]


def test_remove_no_tokens_skips_batch(store, tokens) -> None:
    assert tokens.remove_tokens("u1", []) == 0
    assert store.batches == []


def test_duplicate_token_values_are_listed_once(store, tokens) -> None:
    store.set(paths.fcm_token("u1", "tok-a"), {"token": "tok-a"})
    store.set(paths.fcm_token("u1", "phone-2"), {"token": "tok-a"})
    store.set(paths.fcm_token("u1", "tok-b"), {"token": "tok-b"})

    assert sorted(tokens.list_tokens("u1")) == ["tok-a", "tok-b"]
    assert tokens.registrations("u1")["tok-a"] == ["phone-2", "tok-a"]


def test_remove_tokens_deletes_by_document_id(store, tokens) -> None:
    store.set(paths.fcm_token("u1", "device-doc-1"), {"token": "tok-dead"})

    assert tokens.remove_tokens("u1", ["device-doc-1"]) == 1

    assert tokens.list_tokens("u1") == []
