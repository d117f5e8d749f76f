"""Tests for the bounded context assembler."""

from dataclasses import dataclass

import pytest

from app.services.context_assembler import BLOCK_SEPARATOR, ContextAssembler


@dataclass
class FakeNote:
    filename: str
    content: str


NOTES = [
    FakeNote("algo.txt", "Binary search runs in O(log n) time."),
    FakeNote("sorting.pdf", "Merge sort is O(n log n) and stable."),
    FakeNote("graphs.md", "BFS explores level by level."),
]


def test_empty_note_list_gives_empty_context():
    assert ContextAssembler(100).assemble([]) == ""


def test_notes_within_budget_appear_verbatim_with_tags():
    context = ContextAssembler(10_000).assemble(NOTES)

    for note in NOTES:
        assert f"[File: {note.filename}]\n{note.content}" in context
    assert context.count(BLOCK_SEPARATOR) == len(NOTES) - 1


def test_notes_keep_their_order():
    context = ContextAssembler(10_000).assemble(NOTES)

    positions = [context.index(f"[File: {n.filename}]") for n in NOTES]
    assert positions == sorted(positions)


@pytest.mark.parametrize("strategy", ["prefix", "proportional"])
@pytest.mark.parametrize("budget", [1, 20, 57, 100, 150])
def test_context_never_exceeds_budget(strategy, budget):
    long_notes = NOTES + [FakeNote("big.txt", "x" * 5000)]

    context = ContextAssembler(budget, strategy).assemble(long_notes)

    assert len(context) <= budget


def test_prefix_strategy_is_a_hard_cut():
    assembler = ContextAssembler(60, "prefix")
    full = ContextAssembler(10_000).assemble(NOTES)

    assert assembler.assemble(NOTES) == full[:60]


def test_proportional_strategy_keeps_every_tag():
    notes = [
        FakeNote("short.txt", "tiny"),
        FakeNote("long1.txt", "a" * 1000),
        FakeNote("long2.txt", "b" * 1000),
    ]
    assembler = ContextAssembler(400, "proportional")

    context = assembler.assemble(notes)

    assert len(context) <= 400
    for note in notes:
        assert f"[File: {note.filename}]" in context
    # The short note fits entirely; the long ones share the rest evenly
    assert "[File: short.txt]\ntiny" in context
    assert abs(context.count("a") - context.count("b")) <= 1


def test_proportional_falls_back_to_prefix_when_tags_do_not_fit():
    assembler = ContextAssembler(10, "proportional")
    full = ContextAssembler(10_000).assemble(NOTES)

    assert assembler.assemble(NOTES) == full[:10]


def test_invalid_configuration_is_rejected():
    with pytest.raises(ValueError):
        ContextAssembler(0)
    with pytest.raises(ValueError):
        ContextAssembler(100, "random")
