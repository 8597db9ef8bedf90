from warband.battle import BattleSession
from warband.battle.factory import build_unit
from warband.battle.models import Position
from warband.battle.turn import Action, Intent


def quiet(session):
    session.core.message_cb = session.log.append
    return session


def test_basic_ai_battle_team1_wins():
    army1 = [build_unit("Brute", "Greatsword")]
    army2 = [build_unit("Scout", "Dagger")]
    session = BattleSession(army1, army2)
    outcome = session.run_auto(200)
    assert outcome == "TEAM1_WIN"
    assert session.log[-1] == "Army 1 is victorious!"
    assert any("hits" in line for line in session.log)


def test_round_cap_ends_in_draw():
    army1 = [build_unit("Wall", "Shield")]
    army2 = [build_unit("Wall", "Shield")]
    session = BattleSession(army1, army2)
    assert session.run_auto(10) == "DRAW"
    assert session.rounds == 10
    assert session.log[-1] == "Battle ended in a draw!"


def test_ai_delay_paces_only_real_actions():
    naps = []
    session = BattleSession(
        [build_unit("A", "Sword")], [build_unit("B", "Sword")],
        ai_delay=0.5, sleep=naps.append,
    )
    session.step_round()
    assert naps == [0.5, 0.5]


def test_quit_abandons():
    session = BattleSession([build_unit("A", "Sword")], [build_unit("B", "Sword")], controllers=("human", "human"))
    intents = iter([Intent.QUIT])
    outcome = session.play(lambda: next(intents), lambda turn: None)
    assert outcome == "ABANDONED"
    assert session.abandoned


def test_save_intent_hands_snapshot_to_callback():
    session = BattleSession([build_unit("A", "Sword")], [build_unit("B", "Bow")], controllers=("human", "human"))
    saved = []
    intents = iter([Intent.SAVE, Intent.QUIT])

    def on_save(snapshot):
        saved.append(snapshot)
        return True

    session.play(lambda: next(intents), lambda turn: None, on_save=on_save)
    assert len(saved) == 1
    assert [u.name for u in saved[0].army2] == ["B"]
    assert saved[0].active_team == 1
    assert "Game saved" in session.log


def test_human_then_computer_turn():
    session = BattleSession([build_unit("A", "Sword")], [build_unit("B", "Sword")], controllers=("human", "ai"))
    intents = iter([Intent.CONFIRM, Intent.QUIT])
    outcome = session.play(lambda: next(intents), lambda turn: Action.END_TURN)
    assert outcome == "ABANDONED"
    assert session.bf.positions(2) == [Position(8, 0)]
    assert session.rounds == 1


def test_loaded_battle_starts_with_saved_team():
    session = BattleSession([build_unit("A", "Sword")], [build_unit("B", "Sword")])
    snap = session.snapshot()
    snap.active_team = 2
    resumed = BattleSession.from_saved(snap, controllers=("human", "human"))
    assert resumed.turn.state.active_team == 2
    assert resumed.bf.positions(1) == [Position(0, 0)]
