from holestitch.ledger import EdgeLedger, LedgerEntry


class TestEdgeLedger:
    """Test directed edge bookkeeping."""

    def test_insert_keeps_first_entry(self):
        ledger = EdgeLedger()
        assert ledger.insert(0, 1, face_index=0, generated=False)
        assert not ledger.insert(0, 1, face_index=5, generated=True)
        assert ledger.lookup(0, 1) == LedgerEntry(0, False)
        assert len(ledger) == 1

    def test_directions_are_distinct(self):
        ledger = EdgeLedger()
        ledger.insert(0, 1, face_index=3)
        assert ledger.contains(0, 1)
        assert not ledger.contains(1, 0)
        assert ledger.lookup(1, 0) is None

    def test_edge_closed_needs_both_directions(self):
        ledger = EdgeLedger()
        ledger.insert(0, 1, generated=False)
        assert not ledger.is_edge_closed(0, 1)
        ledger.insert(1, 0, face_index=2)
        assert ledger.is_edge_closed(0, 1)
        assert ledger.is_edge_closed(1, 0)

    def test_untouched_vertex_is_open(self):
        assert not EdgeLedger().is_vertex_closed(0)

    def test_vertex_closes_when_all_edges_close(self):
        ledger = EdgeLedger()
        for a, b in ((0, 1), (1, 2), (2, 0)):
            ledger.insert(a, b, face_index=0)
        ledger.link(0, 1, 2)
        assert sorted(ledger.neighbors(0)) == [1, 2]
        assert not ledger.is_vertex_closed(0)

        ledger.insert(1, 0, generated=False)
        assert not ledger.is_vertex_closed(0)
        ledger.insert(0, 2, generated=False)
        assert ledger.is_vertex_closed(0)
        assert not ledger.is_vertex_closed(1)

    def test_items_are_ordered(self):
        ledger = EdgeLedger()
        for key in ((3, 1), (0, 2), (3, 0), (0, 1)):
            ledger.insert(*key)
        assert [key for key, _ in ledger.items()] == [(0, 1), (0, 2), (3, 0), (3, 1)]
