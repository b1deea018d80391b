import asyncio
import base64

from fastapi.testclient import TestClient

from app.api.realtime import WebSocketChannel
from app.config import Settings
from app.main import create_app


def _authenticate(ws, account):
    ws.send_json({"type": "authenticate", "userId": account["user_id"], "token": account["access_token"]})
    return ws.receive_json()


def test_authenticated_socket_receives_rest_messages(client, register):
    alice = register("worker")
    bob = register("employer", full_name="Bob Stone")

    with client.websocket_connect("/ws") as ws:
        assert _authenticate(ws, alice) == {"type": "authenticated", "userId": alice["user_id"]}

        sent = client.post(
            "/api/messages", json={"to_user_id": alice["user_id"], "content": "Shift starts at 8"}, headers=bob["headers"]
        )
        assert sent.json()["delivered"] is True

        frame = ws.receive_json()
        assert frame == {
            "type": "new_message",
            "fromUserId": bob["user_id"],
            "messageId": sent.json()["id"],
            "fromName": "Bob Stone",
        }


def test_socket_message_reaches_recipient_socket(client, register):
    alice = register("worker")
    bob = register("employer")

    with client.websocket_connect("/ws") as alice_ws, client.websocket_connect("/ws") as bob_ws:
        _authenticate(alice_ws, alice)
        _authenticate(bob_ws, bob)

        alice_ws.send_json({"type": "message", "toUserId": bob["user_id"], "content": "On my way"})
        ack = alice_ws.receive_json()
        assert ack["type"] == "message_sent"

        pushed = bob_ws.receive_json()
        assert pushed["type"] == "new_message"
        assert pushed["messageId"] == ack["messageId"]

    stored = client.get(f"/api/messages?user_id={alice['user_id']}", headers=bob["headers"]).json()
    assert [m["content"] for m in stored] == ["On my way"]


def test_bad_frames_get_error_replies_and_keep_the_socket_open(client, register):
    alice = register("worker")
    bob = register("employer")

    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "message", "toUserId": 1, "content": "too early"})
        assert ws.receive_json() == {"type": "error", "message": "Not authenticated", "kind": "forbidden"}

        ws.send_text("{not json")
        assert ws.receive_json()["kind"] == "validation"

        ws.send_json({"type": "authenticate", "userId": bob["user_id"], "token": alice["access_token"]})
        assert ws.receive_json()["kind"] == "forbidden"

        ws.send_json({"type": "dance"})
        assert ws.receive_json()["kind"] == "validation"

        assert _authenticate(ws, alice)["type"] == "authenticated"
        ws.send_json({"type": "message", "toUserId": 9999, "content": "hello?"})
        assert ws.receive_json()["kind"] == "not_found"
        ws.send_json({"type": "message", "toUserId": bob["user_id"], "content": ""})
        assert ws.receive_json()["kind"] == "validation"


def test_token_check_can_be_disabled():
    settings = Settings(storage_backend="memory", environment="test", realtime_require_token=False)
    with TestClient(create_app(settings)) as other_client:
        response = other_client.post(
            "/api/auth/register",
            json={
                "username": "tokenless",
                "password": "secret-pass",
                "email": "tokenless@example.com",
                "full_name": "Token Less",
                "phone_number": "5550001111",
                "role": "worker",
            },
        )
        user_id = response.json()["user_id"]

        with other_client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "authenticate", "userId": user_id})
            assert ws.receive_json() == {"type": "authenticated", "userId": user_id}


def test_binary_and_forged_token_frames_get_error_replies(client, register):
    alice = register("worker")
    forged = base64.urlsafe_b64encode("1:9999999999:ab:é".encode("utf-8")).decode("utf-8").rstrip("=")

    with client.websocket_connect("/ws") as ws:
        ws.send_bytes(b"\x00\x01")
        assert ws.receive_json() == {"type": "error", "message": "Frames must be JSON text", "kind": "validation"}

        ws.send_json({"type": "authenticate", "userId": alice["user_id"], "token": forged})
        assert ws.receive_json()["kind"] == "forbidden"

        assert _authenticate(ws, alice)["type"] == "authenticated"


def test_cross_thread_offer_respects_queue_capacity():
    loop = asyncio.new_event_loop()
    try:
        channel = WebSocketChannel(websocket=None, loop=loop, max_pending=1)

        assert channel.offer({"type": "first"}) is True
        # The pending hand-off already holds the only slot.
        assert channel.offer({"type": "second"}) is False

        loop.run_until_complete(asyncio.sleep(0))
        assert channel.queue.qsize() == 1
        assert channel.queue.get_nowait() == {"type": "first"}
        assert channel.offer({"type": "third"}) is True
    finally:
        loop.close()


def test_closed_channel_refuses_frames():
    loop = asyncio.new_event_loop()
    try:
        channel = WebSocketChannel(websocket=None, loop=loop)
        channel.close()
        assert channel.offer({"type": "late"}) is False
    finally:
        loop.close()
