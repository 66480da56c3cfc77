import logging

from mediasignage import seed as seed_module
from mediasignage.models.player import Player
from mediasignage.models.playlist import PlaylistEntry


def test_seed_creates_admin_with_demo_playlist(client, db_session):
    assert seed_module.seed() is not None

    resp = client.post(
        "/auth/login",
        json={"email": seed_module.ADMIN_EMAIL, "password": seed_module.ADMIN_PASSWORD},
    )
    assert resp.status_code == 200
    headers = {"Authorization": f"Bearer {resp.json()['token']}"}

    playlists = client.get("/playlists", headers=headers).json()
    assert [p["name"] for p in playlists] == ["Default"]
    assert playlists[0]["totalDuration"] == 10
    assert [e["order"] for e in playlists[0]["playlistContents"]] == [0]
    players = client.get("/players", headers=headers).json()
    assert players[0]["playlistId"] == playlists[0]["id"]


def test_seed_is_idempotent(db_session):
    seed_module.seed()

    assert seed_module.seed() is None
    assert db_session.query(Player).count() == 1
    assert db_session.query(PlaylistEntry).count() == 1


def test_seed_log_names_the_account_but_not_its_password(db_session, caplog):
    with caplog.at_level(logging.INFO, logger="mediasignage.seed"):
        user = seed_module.seed()

    assert seed_module.ADMIN_EMAIL in caplog.text
    assert user.id in caplog.text
    assert seed_module.ADMIN_PASSWORD not in caplog.text
