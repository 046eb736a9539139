"""
Тесты подключения Sentry
"""
from unittest.mock import patch

from shoe_repair.core.config import Config
from shoe_repair.utils.sentry import init_sentry, scrub_event


class TestScrubEvent:
    def test_masks_customer_contacts(self):
        event = {
            "logentry": {"message": "Письмо на lena.berger@example.com не отправлено"},
            "exception": {"values": [{"type": "NotificationError", "value": "Tel. +49 170 1234567"}]},
            "breadcrumbs": {"values": [{"message": "Заказ #000042 от lena@example.com"}]},
        }

        scrubbed = scrub_event(event)

        assert "lena.berger@example.com" not in scrubbed["logentry"]["message"]
        assert "1234567" not in scrubbed["exception"]["values"][0]["value"]
        assert scrubbed["breadcrumbs"]["values"][0]["message"].startswith("Заказ #000042")
        assert "lena@example.com" not in scrubbed["breadcrumbs"]["values"][0]["message"]

    def test_masks_order_fields_in_extra_and_contexts(self):
        event = {
            "extra": {"order_id": 42, "email": "lena.berger@example.com", "last_name": "Berger"},
            "contexts": {"customer": {"phone": "+49 170 1234567", "city": "München"}},
        }

        scrubbed = scrub_event(event)

        assert scrubbed["extra"] == {
            "order_id": 42,
            "email": "l***r@example.com",
            "last_name": "B***r",
        }
        assert scrubbed["contexts"]["customer"] == {"phone": "+4****4567", "city": "München"}

    def test_empty_event(self):
        assert scrub_event({}) == {}


class TestInitSentry:
    def test_disabled_without_dsn(self):
        with patch.object(Config, "SENTRY_DSN", ""):
            assert init_sentry() is None
