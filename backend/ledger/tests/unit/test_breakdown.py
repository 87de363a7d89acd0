import logging

from ledger.logic.breakdown import (
    session_chip_balances,
    session_final_balances,
    session_mahjong_balances,
    settle_session,
)
from ledger.logic.settings import ChipConfig, SessionSettings
from ledger.tests.helpers.builders import (
    FIVE,
    TIED_ROUND,
    TOBI_ROUND,
    make_expense,
    make_round,
    make_session,
)

CHIPS = ChipConfig(enabled=True, start_chips=20, price_per_chip=100)


def _transfers(settlements):
    return [(s.from_member, s.to, s.amount) for s in settlements]


class TestMahjongBalances:
    def test_uses_session_rate(self):
        session = make_session([make_round(TIED_ROUND)], settings=SessionSettings(rate=50))
        assert session_mahjong_balances(session) == [2250, 250, -750, -1750]

    def test_no_rounds(self):
        assert session_mahjong_balances(make_session(members=FIVE)) == [0, 0, 0, 0, 0]

    def test_tobi_applied_when_enabled(self):
        session = make_session([make_round(TOBI_ROUND, victim=3, attacker=0)])
        assert session_mahjong_balances(session) == [7500, 1000, -1400, -7100]

    def test_tobi_markers_ignored_when_disabled(self):
        session = make_session(
            [make_round(TOBI_ROUND, victim=3, attacker=0)],
            settings=SessionSettings(tobi=False),
        )
        assert session_mahjong_balances(session) == [6500, 1000, -1400, -6100]


class TestChipBalances:
    def test_disabled_chips_are_zero(self):
        session = make_session(chip_counts=(20, 25, 15, 20))
        assert session_chip_balances(session) == [0, 0, 0, 0]

    def test_uncounted_chips_are_zero(self):
        assert session_chip_balances(make_session(chips=CHIPS)) == [0, 0, 0, 0]

    def test_counted_chips(self):
        session = make_session(chips=CHIPS, chip_counts=(20, 25, 15, 20))
        assert session_chip_balances(session) == [0, 500, -500, 0]


class TestSettleSession:
    def _session(self):
        return make_session(
            [make_round(TIED_ROUND)],
            chips=CHIPS,
            chip_counts=(20, 25, 15, 20),
            expenses=[make_expense(1000, "D", description="table fee")],
        )

    def test_balances(self):
        breakdown = settle_session(self._session())

        assert breakdown.members == ("A", "B", "C", "D")
        assert breakdown.mahjong_balances == (4500, 500, -1500, -3500)
        assert breakdown.chip_balances == (0, 500, -500, 0)
        assert breakdown.expense_balances == (-250, -250, -250, 750)
        assert breakdown.final_balances == (4250, 750, -2250, -2750)
        assert sum(breakdown.final_balances) == 0

    def test_settlements(self):
        breakdown = settle_session(self._session())

        assert _transfers(breakdown.mahjong_settlements) == [("D", "A", 3500), ("C", "A", 1000), ("C", "B", 500)]
        assert _transfers(breakdown.final_settlements) == [("D", "A", 2750), ("C", "A", 1500), ("C", "B", 750)]

    def test_shared_expense_total_excludes_individual(self):
        session = make_session(
            expenses=[
                make_expense(1000, "D", expense_id="e1"),
                make_expense(600, "A", for_members=("B", "C"), expense_id="e2"),
            ],
        )
        assert settle_session(session).shared_expense_total == 1000

    def test_final_balances_match_breakdown(self):
        session = self._session()
        assert tuple(session_final_balances(session)) == settle_session(session).final_balances

    def test_json_dump_uses_from_alias(self):
        dumped = settle_session(self._session()).model_dump(mode="json", by_alias=True)
        assert dumped["final_settlements"][0] == {"from": "D", "to": "A", "amount": 2750}

    def test_empty_session(self):
        breakdown = settle_session(make_session())

        assert breakdown.final_balances == (0, 0, 0, 0)
        assert breakdown.final_settlements == ()

    def test_logs_settlement(self, caplog):
        with caplog.at_level(logging.INFO, logger="ledger.logic.breakdown"):
            settle_session(self._session())

        assert "session settled" in caplog.text
