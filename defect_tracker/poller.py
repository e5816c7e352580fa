"""
Reminder polling client.

Asks the API for due reminders on a fixed interval and keeps a local copy
of the list. Each successful poll replaces the list wholesale, so reminders
acknowledged or finished elsewhere drop out on the next cycle. Dismissing a
reminder removes it locally right away; if the acknowledgment request
fails, the next poll brings it back.
"""
import logging
import threading

import requests

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 5.0


class NotificationPoller:
    """Background poller for ``GET /defects/notifications/pending``"""

    def __init__(self, base_url, token, interval=DEFAULT_INTERVAL, session=None,
                 on_update=None, timeout=10):
        self.base_url = base_url.rstrip('/')
        self.interval = interval
        self.timeout = timeout
        self.on_update = on_update
        self._session = session or requests.Session()
        self._session.headers.update({'Authorization': f'Bearer {token}'})
        self._reminders = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread = None

    @property
    def reminders(self):
        with self._lock:
            return list(self._reminders)

    def _replace(self, reminders):
        with self._lock:
            self._reminders = list(reminders)
        if self.on_update:
            self.on_update(self.reminders)

    def poll_once(self):
        """
        Fetch due reminders and replace the local list

        Returns:
            bool: False if the request failed (the previous list is kept)
        """
        url = f'{self.base_url}/defects/notifications/pending'
        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
            reminders = response.json().get('data', [])
        except (requests.RequestException, ValueError) as e:
            logger.warning("Reminder poll failed: %s", e)
            return False

        self._replace(reminders)
        return True

    def dismiss(self, defect_id):
        """
        Acknowledge a reminder, removing it locally first

        Returns:
            bool: True if the server accepted the acknowledgment or the
            defect no longer exists
        """
        with self._lock:
            self._reminders = [r for r in self._reminders if r.get('id') != defect_id]

        url = f'{self.base_url}/defects/{defect_id}/mark-notified'
        try:
            response = self._session.patch(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Could not acknowledge reminder %s: %s", defect_id, e)
            return False

        if response.status_code == 404:
            # Already gone
            return True
        if not response.ok:
            logger.warning("Acknowledging reminder %s returned %s", defect_id, response.status_code)
            return False
        return True

    def _run(self):
        while not self._stop.is_set():
            self.poll_once()
            self._stop.wait(self.interval)

    def start(self):
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name='reminder-poller', daemon=True)
        self._thread.start()
        logger.debug("Reminder poller started (every %ss)", self.interval)

    def stop(self):
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=self.timeout)
            self._thread = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
