# -*- coding: utf-8 -*-
"""
Base storage view and the write journal.

Covers the revert/commit "laws" the transaction scope relies on:
  - checkpoint → writes → revert  ⇒ state equals baseline
  - checkpoint → writes → commit  ⇒ writes visible, base untouched until root commit
  - nested checkpoints behave as a stack (inner revert keeps outer writes)
"""

from __future__ import annotations

import pytest

from sharevault.state import Journal, StorageView

A = b"\x01" * 32
B = b"\x02" * 32


# ------------------------------ StorageView ---------------------------------


def test_journal_checkpoints_open_through_begin_only() -> None:
    j = Journal()
    assert j.begin() == 1
    assert j.depth() == 2
    assert not hasattr(j, "checkpoint")


def test_storage_view_basic_ops() -> None:
    sv = StorageView()
    assert sv.get(A, b"k") is None
    assert sv.get(A, b"k", default=b"d") == b"d"
    sv.set(A, b"k", b"v")
    assert sv.has(A, b"k")
    assert not sv.has(B, b"k")
    assert sv.get(A, b"k") == b"v"
    assert sv.total_keys() == 1


def test_storage_view_empty_value_deletes() -> None:
    sv = StorageView()
    sv.set(A, b"k", b"v")
    sv.set(A, b"k", b"")
    assert not sv.has(A, b"k")
    assert sv.delete(A, b"k") is False


def test_storage_view_items_sorted() -> None:
    sv = StorageView()
    sv.set(A, b"b", b"2")
    sv.set(A, b"a", b"1")
    assert list(sv.items(A)) == [(b"a", b"1"), (b"b", b"2")]


def test_storage_view_key_bounds() -> None:
    sv = StorageView(max_key_len=4)
    with pytest.raises(ValueError):
        sv.set(A, b"", b"v")
    with pytest.raises(ValueError):
        sv.set(A, b"12345", b"v")
    with pytest.raises(TypeError):
        sv.set(A, "k", b"v")  # type: ignore[arg-type]


def test_storage_view_external_backend() -> None:
    backend: dict = {}
    sv = StorageView(backend=backend)
    sv.set(A, b"k", b"v")
    assert backend == {A: {b"k": b"v"}}


# -------------------------------- Journal -----------------------------------


def test_revert_restores_baseline() -> None:
    base = StorageView()
    base.set(A, b"k", b"old")
    j = Journal(base)

    marker = j.begin()
    j.storage_set(A, b"k", b"new")
    j.storage_set(A, b"other", b"x")
    assert j.storage_get(A, b"k") == b"new"
    j.revert_to(marker)

    assert j.storage_get(A, b"k") == b"old"
    assert not j.storage_has(A, b"other")


def test_commit_reaches_base_only_from_root() -> None:
    base = StorageView()
    j = Journal(base)

    j.begin()
    j.storage_set(A, b"k", b"v")
    j.commit()
    # merged into the root overlay, not yet durable
    assert j.storage_get(A, b"k") == b"v"
    assert base.get(A, b"k") is None

    j.commit()
    assert base.get(A, b"k") == b"v"
    assert j.pending_storage_keys() == 0


def test_nested_inner_revert_keeps_outer_writes() -> None:
    j = Journal()
    outer = j.begin()
    j.storage_set(A, b"outer", b"1")
    inner = j.begin()
    assert inner == outer + 1
    j.storage_set(A, b"inner", b"2")
    j.revert_to(inner)

    assert j.storage_get(A, b"outer") == b"1"
    assert j.storage_get(A, b"inner") is None
    j.commit_to(outer)
    assert j.depth() == outer


def test_staged_delete_shadows_base() -> None:
    base = StorageView()
    base.set(A, b"k", b"v")
    j = Journal(base)
    j.begin()
    j.storage_delete(A, b"k")
    assert not j.storage_has(A, b"k")
    assert list(j.storage_items(A)) == []
    j.flush()
    assert base.get(A, b"k") is None


def test_storage_items_merges_layers() -> None:
    base = StorageView()
    base.set(A, b"a", b"1")
    j = Journal(base)
    j.begin()
    j.storage_set(A, b"b", b"2")
    j.storage_set(A, b"a", b"3")
    assert list(j.storage_items(A)) == [(b"a", b"3"), (b"b", b"2")]


def test_markers_must_be_positive() -> None:
    j = Journal()
    with pytest.raises(ValueError):
        j.revert_to(0)
    with pytest.raises(ValueError):
        j.commit_to(0)
