"""
Notification Module

Outbound pushes:
- Sheet sink: the disabled list, POSTed as JSON to a Google Apps Script web app
- Alert sink: WhatsApp messages through Green API, one per active recipient

Both are fire-and-forget. Requests run on a small thread pool; the result of
each request is only logged, never retried here.
"""

import logging
import requests
from concurrent.futures import ThreadPoolExecutor

from config.database import get_active_chat_ids

logger = logging.getLogger(__name__)

GREEN_API_URL = "https://api.green-api.com/waInstance{instance}/sendMessage/{token}"
REQUEST_TIMEOUT = 30


class Dispatcher:
    """Runs outbound requests off the scrape thread and logs how they ended."""

    def __init__(self, max_workers=2):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")

    def submit(self, label, fn, *args):
        future = self._executor.submit(fn, *args)
        future.add_done_callback(lambda f: self._log_outcome(label, f))
        return future

    @staticmethod
    def _log_outcome(label, future):
        if future.cancelled():
            logger.warning(f"[{label}] Send cancelled")
            return
        error = future.exception()
        if error is not None:
            logger.error(f"[{label}] Send error: {error}")

    def shutdown(self, wait=True):
        self._executor.shutdown(wait=wait)


class SheetSink:
    def __init__(self, url, dispatcher, timeout=REQUEST_TIMEOUT):
        self.url = url
        self.dispatcher = dispatcher
        self.timeout = timeout

    @staticmethod
    def build_payload(snapshot):
        return {
            "action": "update_disabled",
            "timestamp": snapshot.taken_at.isoformat(),
            "items": [record.to_dict() for record in snapshot.records],
        }

    def send(self, snapshot):
        """
        Queue a POST of the snapshot.

        Returns:
            Future or None: None when the sheet URL is not configured
        """
        if not self.url:
            logger.info("[Sheet] Skipped (not configured)")
            return None
        return self.dispatcher.submit("Sheet", self._post, self.build_payload(snapshot))

    def _post(self, payload):
        response = requests.post(self.url, json=payload, timeout=self.timeout)
        logger.info(f"[Sheet] Sent {len(payload['items'])} items, response: {response.status_code}")
        return response.status_code


class AlertNotifier:
    def __init__(self, instance, token, dispatcher, recipients=get_active_chat_ids,
                 timeout=REQUEST_TIMEOUT):
        self.instance = instance
        self.token = token
        self.dispatcher = dispatcher
        self.recipients = recipients
        self.timeout = timeout

    @property
    def configured(self):
        return bool(self.instance and self.token)

    @property
    def url(self):
        return GREEN_API_URL.format(instance=self.instance, token=self.token)

    def send(self, message):
        """
        Queue the message for every active recipient. The recipient list is
        read on each call so edits apply to the next alert.

        Returns:
            list: One future per recipient
        """
        if not self.configured:
            logger.info(f"[WhatsApp] Alert skipped (not configured): {message}")
            return []

        try:
            chat_ids = self.recipients()
        except Exception as e:
            logger.error(f"[WhatsApp] Could not load recipients: {e}")
            return []

        if not chat_ids:
            logger.info(f"[WhatsApp] Alert skipped (no active recipients): {message}")
            return []

        return [
            self.dispatcher.submit("WhatsApp", self._post, chat_id, message)
            for chat_id in chat_ids
        ]

    def _post(self, chat_id, message):
        response = requests.post(
            self.url,
            json={"chatId": chat_id, "message": message},
            timeout=self.timeout,
        )
        logger.info(f"[WhatsApp] Alert sent to {chat_id}: {response.status_code} {response.text[:200]}")
        return response.status_code
