from tests.telegram_fakes import TEST_HOST, TEST_WEBHOOK_SECRET

WEBHOOK_INFO = {
    "url": f"https://{TEST_HOST}/webhook",
    "has_custom_certificate": False,
    "pending_update_count": 3,
    "max_connections": 40,
}


def test_set_webhook_registers_public_url_with_secret(client, fake_telegram) -> None:
    response = client.get("/setWebhook")

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "message": f"Webhook set successfully to: https://{TEST_HOST}/webhook",
    }
    [call] = fake_telegram.calls_to("setWebhook")
    assert call.payload == {
        "url": f"https://{TEST_HOST}/webhook",
        "secret_token": TEST_WEBHOOK_SECRET,
    }


def test_set_webhook_prefers_worker_url_and_omits_blank_secret(client_factory, fake_telegram) -> None:
    with client_factory(WORKER_URL="files.example.org", SECRET_TOKEN="") as client:
        response = client.get("/setWebhook")

    assert response.status_code == 200
    [call] = fake_telegram.calls_to("setWebhook")
    assert call.payload == {"url": "https://files.example.org/webhook"}


def test_set_webhook_failure_returns_upstream_description(client, fake_telegram) -> None:
    fake_telegram.failures["setWebhook"] = (400, "Bad Request: bad webhook: HTTPS url must be provided")

    response = client.get("/setWebhook")

    assert response.status_code == 500
    assert response.json() == {
        "status": "error",
        "message": (
            "Telegram API error (400): Bad Request: bad webhook: HTTPS url must be provided"
        ),
    }


def test_delete_webhook_is_idempotent(client, fake_telegram) -> None:
    first = client.get("/deleteWebhook")
    second = client.get("/deleteWebhook")

    for response in (first, second):
        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "message": "Webhook deleted successfully.",
        }
    calls = fake_telegram.calls_to("setWebhook")
    assert [call.payload for call in calls] == [{"url": ""}, {"url": ""}]


def test_delete_webhook_can_drop_pending_updates(client, fake_telegram) -> None:
    response = client.get("/deleteWebhook", params={"drop_pending_updates": "true"})

    assert response.status_code == 200
    [call] = fake_telegram.calls_to("setWebhook")
    assert call.payload == {"url": "", "drop_pending_updates": True}


def test_delete_webhook_rejects_malformed_flag(client, fake_telegram) -> None:
    response = client.get("/deleteWebhook", params={"drop_pending_updates": "maybe"})

    assert response.status_code == 400
    assert response.json()["status"] == "error"
    assert fake_telegram.calls == []


def test_webhook_info_is_returned_verbatim_under_both_paths(client, fake_telegram) -> None:
    fake_telegram.results["getWebhookInfo"] = WEBHOOK_INFO

    for path in ("/info", "/getWebhookInfo"):
        response = client.get(path)
        assert response.status_code == 200
        assert response.json() == {"status": "success", "webhook_info": WEBHOOK_INFO}

    calls = fake_telegram.calls_to("getWebhookInfo")
    assert len(calls) == 2
    assert all(call.http_method == "GET" and call.payload is None for call in calls)


def test_webhook_info_failure(client, fake_telegram) -> None:
    fake_telegram.failures["getWebhookInfo"] = (401, "Unauthorized")

    response = client.get("/info")

    assert response.status_code == 500
    assert response.json() == {
        "status": "error",
        "message": "Telegram API error (401): Unauthorized",
    }


def test_bot_identity(client, fake_telegram) -> None:
    fake_telegram.results["getMe"] = {"id": 42, "is_bot": True, "username": "proxy_bot"}

    response = client.get("/me")

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "bot": {"id": 42, "is_bot": True, "username": "proxy_bot"},
    }
